import logging

from dataclasses import dataclass
from dataclasses import field
from typing import Any
from typing import Callable

from .pattern import Pattern
from .pattern import compile_template
from .pattern import normalize_path
from .types import InvalidMethod

logger = logging.getLogger(__name__)

HTTP_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS", "HEAD")


@dataclass(slots=True, frozen=True)
class Route:
    method: str
    pattern: Pattern
    handler: Callable[..., Any]
    middleware: tuple[Callable[..., Any], ...] = ()


@dataclass(slots=True, frozen=True)
class Redirect:
    from_: str
    to: str
    permanent: bool = False

    @property
    def status_code(self) -> int:
        return 301 if self.permanent else 302


@dataclass(slots=True, frozen=True)
class RouteMatch:
    handler: Callable[..., Any]
    middleware: tuple[Callable[..., Any], ...]
    params: dict[str, str] = field(default_factory=dict)


@dataclass(slots=True, frozen=True)
class RedirectMatch:
    to: str
    status_code: int


MatchResult = RouteMatch | RedirectMatch | None


def check_method(method: str) -> str:
    normalized = method.strip().upper()
    if normalized not in HTTP_METHODS:
        logger.error("Invalid HTTP method: %s", method)
        raise InvalidMethod(method)
    return normalized


class Router:
    """Ordered route table keyed by HTTP method, plus static redirects.

    Routes are tried in registration order and the first one whose pattern
    accepts the normalized path wins. Redirects are checked before any route.
    """

    def __init__(self) -> None:
        self.routes: dict[str, list[Route]] = {}
        self.redirects: list[Redirect] = []

    def add(
        self,
        method: str,
        template: str,
        handler: Callable[..., Any],
        middleware: list[Callable[..., Any]] | tuple[Callable[..., Any], ...] = (),
    ) -> Route:
        method = check_method(method)
        route = Route(method, compile_template(template), handler, tuple(middleware))
        self.routes.setdefault(method, []).append(route)
        logger.debug("Registered route %s %s", method, template)
        return route

    def redirect(self, from_: str, to: str, permanent: bool = False) -> Redirect:
        redirect = Redirect(normalize_path(from_), to, permanent)
        self.redirects.append(redirect)
        logger.debug("Registered redirect %s -> %s (%d)", redirect.from_, to, redirect.status_code)
        return redirect

    def match(self, method: str, path: str) -> MatchResult:
        path = normalize_path(path)

        for redirect in self.redirects:
            if redirect.from_ == path:
                return RedirectMatch(redirect.to, redirect.status_code)

        for route in self.routes.get(method.upper(), ()):
            params = route.pattern.params(path)
            if params is not None:
                return RouteMatch(route.handler, route.middleware, params)
        return None
