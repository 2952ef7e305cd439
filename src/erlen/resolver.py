import logging

from typing import Any
from typing import Callable

from .types import InvalidFailureType

logger = logging.getLogger(__name__)

ExceptionHandler = Callable[[Any, Exception], Any]


class ExceptionResolver:
    """Maps exception classes to handlers.

    Lookup follows the raised exception's MRO, so the nearest registered
    ancestor wins. ``Exception`` always has a handler: it is installed at
    construction and can be replaced but not removed.
    """

    def __init__(self, default: ExceptionHandler) -> None:
        self.handlers: dict[type[Exception], ExceptionHandler] = {Exception: default}

    def register(self, exc_type: type[Exception], handler: ExceptionHandler) -> None:
        if not (isinstance(exc_type, type) and issubclass(exc_type, Exception)):
            logger.error("Invalid exception class: %r", exc_type)
            raise InvalidFailureType(exc_type)
        self.handlers[exc_type] = handler
        logger.info("Exception handler registered for class: %s", exc_type.__qualname__)

    def resolve(self, exc: Exception) -> ExceptionHandler | None:
        for cls in type(exc).__mro__:
            handler = self.handlers.get(cls)
            if handler is not None:
                return handler
        return self.handlers.get(Exception)
