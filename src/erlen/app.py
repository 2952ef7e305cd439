import html
import logging

from typing import Any
from typing import Callable
from typing import Iterable

from pydantic import ValidationError

from .chain import Handler
from .chain import Middleware
from .config import Config
from .dispatcher import Dispatcher
from .resolver import ExceptionHandler
from .resolver import ExceptionResolver
from .router import HTTP_METHODS
from .router import Router
from .router import check_method
from .types import HTTPException
from .types import Request
from .types import Response
from .wsgi import StartResponse
from .wsgi import request_from_environ
from .wsgi import run as serve
from .wsgi import write_response

logger = logging.getLogger(__name__)

MiddlewareList = list[Middleware] | tuple[Middleware, ...]


class Erlen:
    def __init__(self, config: Config | None = None) -> None:
        self.config = config or Config()
        if self.config.log_level:
            logging.getLogger("erlen").setLevel(self.config.log_level)

        self.router = Router()
        self.resolver = ExceptionResolver(self._internal_error)
        self.resolver.register(HTTPException, self._http_exception)
        self.resolver.register(ValidationError, self._validation_error)
        self._middlewares: list[Middleware] = []
        self._not_found: Handler = self._default_not_found
        self._dispatcher: Dispatcher | None = None

    def get(self, template: str, middleware: MiddlewareList = ()) -> Callable:
        return self._route(("GET",), template, middleware)

    def post(self, template: str, middleware: MiddlewareList = ()) -> Callable:
        return self._route(("POST",), template, middleware)

    def put(self, template: str, middleware: MiddlewareList = ()) -> Callable:
        return self._route(("PUT",), template, middleware)

    def patch(self, template: str, middleware: MiddlewareList = ()) -> Callable:
        return self._route(("PATCH",), template, middleware)

    def delete(self, template: str, middleware: MiddlewareList = ()) -> Callable:
        return self._route(("DELETE",), template, middleware)

    def options(self, template: str, middleware: MiddlewareList = ()) -> Callable:
        return self._route(("OPTIONS",), template, middleware)

    def head(self, template: str, middleware: MiddlewareList = ()) -> Callable:
        return self._route(("HEAD",), template, middleware)

    def route(self, methods: Iterable[str], template: str, middleware: MiddlewareList = ()) -> Callable:
        return self._route(tuple(methods), template, middleware)

    def any(self, template: str, middleware: MiddlewareList = ()) -> Callable:
        return self._route(HTTP_METHODS, template, middleware)

    def _route(self, methods: tuple[str, ...], template: str, middleware: MiddlewareList) -> Callable:
        def decorator(fn: Handler) -> Handler:
            self.add_route(methods, template, fn, middleware)
            return fn
        return decorator

    def add_route(
        self,
        methods: str | Iterable[str],
        template: str,
        handler: Handler,
        middleware: MiddlewareList = (),
    ) -> None:
        if isinstance(methods, str):
            methods = (methods,)
        checked = [check_method(m) for m in methods]
        for method in checked:
            self.router.add(method, template, handler, middleware)
        self._dispatcher = None

    def redirect(self, from_: str, to: str, permanent: bool = False) -> None:
        self.router.redirect(from_, to, permanent)
        self._dispatcher = None

    def middleware(self, fn: Middleware) -> Middleware:
        self.add_middleware(fn)
        return fn

    def add_middleware(self, fn: Middleware) -> None:
        self._middlewares.append(fn)
        self._dispatcher = None

    def exception_handler(self, exc_type: type[Exception]) -> Callable:
        def decorator(fn: ExceptionHandler) -> ExceptionHandler:
            self.add_exception_handler(exc_type, fn)
            return fn
        return decorator

    def add_exception_handler(self, exc_type: type[Exception], handler: ExceptionHandler) -> None:
        self.resolver.register(exc_type, handler)
        self._dispatcher = None

    def not_found(self, fn: Handler) -> Handler:
        self.set_not_found_handler(fn)
        return fn

    def set_not_found_handler(self, fn: Handler) -> None:
        self._not_found = fn
        self._dispatcher = None

    @property
    def dispatcher(self) -> Dispatcher:
        if self._dispatcher is None:
            self._dispatcher = Dispatcher(
                router=self.router,
                resolver=self.resolver,
                not_found=self._not_found,
                middleware=tuple(self._middlewares),
            )
        return self._dispatcher

    def handle(self, request: Request) -> Response:
        try:
            return self.dispatcher.dispatch(request.method, request.path, request)
        except Exception as e:
            logger.critical("Exception handler failed for %s %s", request.method, request.path, exc_info=e)
            return self._fatal_error(request, e)

    def __call__(self, environ: dict[str, Any], start_response: StartResponse) -> Iterable[bytes]:
        request = request_from_environ(environ)
        return write_response(start_response, self.handle(request), request.method)

    def run(self, host: str = "127.0.0.1", port: int = 8000) -> None:
        serve(self, host, port)

    def _default_not_found(self, request: Request, params: dict[str, str]) -> Response:
        return Response.json({"detail": "Not Found"}, 404)

    def _internal_error(self, request: Request, exc: Exception) -> Response:
        logger.error("Unhandled exception: %s", exc, exc_info=exc)
        detail: dict[str, Any] = {"detail": "Internal Server Error"}
        if self.config.show_error_details:
            detail["error"] = str(exc)
        return Response.json(detail, 500)

    def _http_exception(self, request: Request, exc: HTTPException) -> Response:
        return Response.json({"detail": exc.detail}, exc.status_code)

    def _validation_error(self, request: Request, exc: ValidationError) -> Response:
        return Response.json({"detail": exc.errors(include_url=False, include_context=False)}, 422)

    def _fatal_error(self, request: Request, exc: Exception) -> Response:
        if request.wants_json():
            return Response.json({"error": True, "message": "Fatal Error"}, 500)
        message = html.escape(str(exc), quote=True)
        return Response.html(f"<h1>Fatal Error</h1><p>{message}</p>", 500)
