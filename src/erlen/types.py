import json

from dataclasses import dataclass
from dataclasses import field
from typing import Any
from typing import TypeVar
from urllib.parse import parse_qs

from pydantic import BaseModel

ModelT = TypeVar("ModelT", bound=BaseModel)


class HTTPException(Exception):
    def __init__(self, status_code: int, detail: str = ""):
        self.status_code = status_code
        self.detail = detail
        super().__init__(detail)


class InvalidMethod(ValueError):
    def __init__(self, method: str):
        self.method = method
        super().__init__(f"Invalid HTTP method: {method}")


class InvalidFailureType(TypeError):
    def __init__(self, exc_type: Any):
        self.exc_type = exc_type
        super().__init__(f"Invalid exception class: {exc_type!r}")


@dataclass(slots=True)
class Request:
    method: str
    path: str
    headers: dict[str, str] = field(default_factory=dict)
    query_string: str = ""
    body: bytes = b""
    state: dict[str, Any] = field(default_factory=dict)
    _query: dict[str, list[str]] | None = field(default=None, repr=False)
    _json: Any = field(default=None, repr=False)

    @property
    def query_params(self) -> dict[str, list[str]]:
        if self._query is None:
            self._query = parse_qs(self.query_string)
        return self._query

    def query(self, name: str, default: str | None = None) -> str | None:
        values = self.query_params.get(name)
        return values[0] if values else default

    def header(self, name: str, default: str | None = None) -> str | None:
        return self.headers.get(name.lower(), default)

    def json(self) -> Any:
        if self._json is None and self.body:
            self._json = json.loads(self.body)
        return self._json

    def validate(self, model: type[ModelT]) -> ModelT:
        return model.model_validate(self.json())

    def wants_json(self) -> bool:
        accept = self.header("accept", "")
        requested_with = self.header("x-requested-with", "")
        return "application/json" in accept or requested_with.lower() == "xmlhttprequest"


@dataclass(slots=True)
class Response:
    status_code: int = 200
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    @classmethod
    def json(cls, data: Any, status_code: int = 200) -> "Response":
        if isinstance(data, BaseModel):
            body = data.model_dump_json().encode()
        elif isinstance(data, list):
            items = [x.model_dump(mode="json") if isinstance(x, BaseModel) else x for x in data]
            body = json.dumps(items).encode()
        else:
            body = json.dumps(data).encode()

        return cls(
            status_code=status_code,
            headers={"content-type": "application/json", "content-length": str(len(body))},
            body=body,
        )

    @classmethod
    def text(cls, content: str, status_code: int = 200) -> "Response":
        body = content.encode()
        return cls(
            status_code=status_code,
            headers={"content-type": "text/plain", "content-length": str(len(body))},
            body=body,
        )

    @classmethod
    def empty(cls, status_code: int = 204) -> "Response":
        return cls(status_code=status_code, headers={"content-length": "0"})

    @classmethod
    def html(cls, content: str, status_code: int = 200) -> "Response":
        body = content.encode()
        return cls(
            status_code=status_code,
            headers={"content-type": "text/html; charset=utf-8", "content-length": str(len(body))},
            body=body,
        )

    @classmethod
    def redirect(cls, location: str, status_code: int = 302) -> "Response":
        return cls(status_code=status_code, headers={"location": location, "content-length": "0"})


def to_response(result: Any) -> Response:
    if isinstance(result, Response):
        return result
    if isinstance(result, (BaseModel, dict, list)):
        return Response.json(result)
    if isinstance(result, str):
        return Response.text(result)
    if result is None:
        return Response.empty()
    return Response.json(result)
