from http import HTTPStatus
from socketserver import ThreadingMixIn
from typing import TYPE_CHECKING
from typing import Any
from typing import Callable
from typing import Iterable
from wsgiref.simple_server import WSGIServer
from wsgiref.simple_server import make_server

from .types import Request
from .types import Response

if TYPE_CHECKING:
    from .app import Erlen

StartResponse = Callable[..., Any]

STATUS_PHRASES = {
    200: "OK",
    201: "Created",
    204: "No Content",
    301: "Moved Permanently",
    302: "Found",
    303: "See Other",
    307: "Temporary Redirect",
    308: "Permanent Redirect",
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    422: "Unprocessable Entity",
    500: "Internal Server Error",
}


def _content_length(value: str | None) -> int:
    try:
        length = int(value or 0)
    except ValueError:
        return 0
    return max(length, 0)


def status_phrase(status_code: int) -> str:
    phrase = STATUS_PHRASES.get(status_code)
    if phrase is not None:
        return phrase
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Unknown"


def request_from_environ(environ: dict[str, Any]) -> Request:
    headers: dict[str, str] = {}
    for key, value in environ.items():
        if key.startswith("HTTP_"):
            headers[key[5:].replace("_", "-").lower()] = value
    if environ.get("CONTENT_TYPE"):
        headers["content-type"] = environ["CONTENT_TYPE"]
    if environ.get("CONTENT_LENGTH"):
        headers["content-length"] = environ["CONTENT_LENGTH"]

    body = b""
    length = _content_length(headers.get("content-length"))
    if length and environ.get("wsgi.input") is not None:
        body = environ["wsgi.input"].read(length)

    return Request(
        method=environ.get("REQUEST_METHOD", "GET").upper(),
        path=environ.get("PATH_INFO") or "/",
        headers=headers,
        query_string=environ.get("QUERY_STRING", ""),
        body=body,
    )


def write_response(start_response: StartResponse, response: Response, method: str = "GET") -> Iterable[bytes]:
    phrase = status_phrase(response.status_code)
    start_response(f"{response.status_code} {phrase}", list(response.headers.items()))
    if method == "HEAD":
        return [b""]
    return [response.body]


class ThreadingWSGIServer(ThreadingMixIn, WSGIServer):
    daemon_threads = True


def run(app: "Erlen", host: str = "127.0.0.1", port: int = 8000) -> None:
    with make_server(host, port, app, server_class=ThreadingWSGIServer) as server:
        print(f"Erlen running at http://{host}:{port}")
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            print("\nShutting down...")
