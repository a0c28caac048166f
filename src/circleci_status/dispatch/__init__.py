"""Response dispatch: outcome classification, handler routing, transforms."""

from .dispatcher import dispatch
from .executor import Transform, execute
from .outcome import Classification, Handler, HandlerSet, Outcome

__all__ = [
    "Classification",
    "Handler",
    "HandlerSet",
    "Outcome",
    "Transform",
    "dispatch",
    "execute",
]
