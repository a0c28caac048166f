"""Apply a response transform before dispatching."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from typing import Any

from .dispatcher import dispatch
from .outcome import HandlerSet, Outcome

Transform = Callable[[Any], Any]


def execute(outcome: Outcome, handlers: HandlerSet, transform: Transform | None = None) -> None:
    """Shape a successful payload with ``transform``, then dispatch.

    The transform only runs on success; error bodies have a different shape and
    are dispatched as received. Unlike handler failures, an exception raised by
    ``transform`` is not contained: it propagates to the caller, since a broken
    transform is a programming error rather than a runtime condition.
    """

    if outcome.is_success and transform is not None:
        outcome = replace(outcome, payload=transform(outcome.payload))
    dispatch(outcome, handlers)
