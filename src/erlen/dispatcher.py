import logging

from dataclasses import dataclass
from typing import Any

from .chain import Handler
from .chain import Middleware
from .chain import compose
from .resolver import ExceptionResolver
from .router import RedirectMatch
from .router import RouteMatch
from .router import Router
from .types import Response
from .types import to_response

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR = "Unexpected error."


def _terminal(handler: Handler) -> Handler:
    def respond(context: Any, params: dict[str, str]) -> Response:
        return to_response(handler(context, params))
    return respond


def _coerced(middleware: Middleware) -> Middleware:
    def respond(context: Any, next: Handler, params: dict[str, str]) -> Response:
        return to_response(middleware(context, next, params))
    return respond


def _build(handler: Handler, middleware: tuple[Middleware, ...]) -> Handler:
    return compose(_terminal(handler), [_coerced(mw) for mw in middleware])


@dataclass(slots=True, frozen=True)
class Dispatcher:
    """Runs one request through the route table, middleware and error handlers.

    Holds only read-only references, so concurrent ``dispatch`` calls are
    safe as long as nobody mutates the router or resolver meanwhile.

    An exception raised by an exception handler is not resolved again; it
    propagates to the caller.
    """

    router: Router
    resolver: ExceptionResolver
    not_found: Handler
    middleware: tuple[Middleware, ...] = ()

    def dispatch(self, method: str, path: str, context: Any) -> Response:
        logger.debug("Dispatching %s %s", method, path)
        try:
            match = self.router.match(method, path)

            if isinstance(match, RedirectMatch):
                logger.debug("Redirecting %s to %s (%d)", path, match.to, match.status_code)
                return Response.redirect(match.to, match.status_code)

            if isinstance(match, RouteMatch):
                handler = _build(match.handler, self.middleware + match.middleware)
                return to_response(handler(context, match.params))

            logger.warning("No route matched for: %s %s", method, path)
            handler = _build(self.not_found, self.middleware)
            return to_response(handler(context, {}))
        except Exception as e:
            return self._handle_exception(context, e)

    def _handle_exception(self, context: Any, exc: Exception) -> Response:
        handler = self.resolver.resolve(exc)
        if handler is None:
            logger.error("No exception handler for %r", exc, exc_info=exc)
            return Response.text(UNEXPECTED_ERROR, 500)
        return to_response(handler(context, exc))
