from .app import Erlen
from .chain import Chain
from .chain import compose
from .config import Config
from .dispatcher import Dispatcher
from .resolver import ExceptionResolver
from .router import RedirectMatch
from .router import RouteMatch
from .router import Router
from .types import HTTPException
from .types import InvalidFailureType
from .types import InvalidMethod
from .types import Request
from .types import Response

__version__ = "0.1.0"
__all__ = [
    "Chain",
    "compose",
    "Config",
    "Dispatcher",
    "Erlen",
    "ExceptionResolver",
    "HTTPException",
    "InvalidFailureType",
    "InvalidMethod",
    "RedirectMatch",
    "Request",
    "Response",
    "RouteMatch",
    "Router",
]
