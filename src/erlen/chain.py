from dataclasses import dataclass
from typing import Any
from typing import Callable

Handler = Callable[[Any, dict[str, str]], Any]
Middleware = Callable[[Any, Handler, dict[str, str]], Any]


@dataclass(slots=True, frozen=True)
class Chain:
    """One middleware bound to the continuation it may call as ``next``.

    Not calling ``next`` ends the chain there: nothing downstream runs.
    Exceptions are never caught here.
    """

    middleware: Middleware
    next: Handler

    def __call__(self, context: Any, params: dict[str, str]) -> Any:
        return self.middleware(context, self.next, params)


def compose(handler: Handler, middleware: list[Middleware] | tuple[Middleware, ...]) -> Handler:
    """Wrap ``handler`` so ``middleware[0]`` runs first and the handler last."""
    composed: Handler = handler
    for mw in reversed(middleware):
        composed = Chain(mw, composed)
    return composed
