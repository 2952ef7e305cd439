import io
import json as jsonlib

from typing import TYPE_CHECKING
from typing import Any
from urllib.parse import urlsplit

from .types import Response
from .wsgi import request_from_environ

if TYPE_CHECKING:
    from .app import Erlen


class TestClient:
    """Drives an app in-process, without a server.

    Requests go through the same environ-to-request conversion as the WSGI
    entry point, then straight into ``Erlen.handle``.
    """

    __test__ = False

    def __init__(self, app: "Erlen") -> None:
        self.app = app
        self.default_headers: dict[str, str] = {}

    def with_headers(self, headers: dict[str, str]) -> "TestClient":
        self.default_headers.update(headers)
        return self

    def reset_headers(self) -> "TestClient":
        self.default_headers = {}
        return self

    def get(self, url: str, **kwargs: Any) -> Response:
        return self.request("GET", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> Response:
        return self.request("POST", url, **kwargs)

    def put(self, url: str, **kwargs: Any) -> Response:
        return self.request("PUT", url, **kwargs)

    def patch(self, url: str, **kwargs: Any) -> Response:
        return self.request("PATCH", url, **kwargs)

    def delete(self, url: str, **kwargs: Any) -> Response:
        return self.request("DELETE", url, **kwargs)

    def head(self, url: str, **kwargs: Any) -> Response:
        return self.request("HEAD", url, **kwargs)

    def options(self, url: str, **kwargs: Any) -> Response:
        return self.request("OPTIONS", url, **kwargs)

    def request(
        self,
        method: str,
        url: str,
        headers: dict[str, str] | None = None,
        json: Any = None,
        body: bytes | str | None = None,
    ) -> Response:
        environ = self._environ(method, url, headers or {}, json, body)
        return self.app.handle(request_from_environ(environ))

    def _environ(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        json: Any,
        body: bytes | str | None,
    ) -> dict[str, Any]:
        if not url.startswith("/"):
            url = "/" + url
        parts = urlsplit(url)

        merged = {**self.default_headers, **headers}
        if json is not None:
            body = jsonlib.dumps(json)
            merged.setdefault("Content-Type", "application/json")
        if isinstance(body, str):
            body = body.encode()
        body = body or b""

        environ: dict[str, Any] = {
            "REQUEST_METHOD": method.upper(),
            "PATH_INFO": parts.path or "/",
            "QUERY_STRING": parts.query,
            "SERVER_NAME": "testserver",
            "SERVER_PORT": "80",
            "SERVER_PROTOCOL": "HTTP/1.1",
            "wsgi.input": io.BytesIO(body),
            "wsgi.url_scheme": "http",
        }
        if body:
            environ["CONTENT_LENGTH"] = str(len(body))
        for name, value in merged.items():
            key = name.upper().replace("-", "_")
            if key in ("CONTENT_TYPE", "CONTENT_LENGTH"):
                environ[key] = value
            else:
                environ[f"HTTP_{key}"] = value
        return environ
