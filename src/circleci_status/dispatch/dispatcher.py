"""Route a completed exchange to the registered handlers."""

from __future__ import annotations

import logging

from .outcome import Handler, HandlerSet, Outcome

logger = logging.getLogger(__name__)


def _invoke(slot: str, handler: Handler | None, outcome: Outcome) -> None:
    if handler is None:
        return
    try:
        handler(outcome)
    except Exception:
        # Handlers are fire-and-forget: one failing must not stop the others.
        logger.debug(
            "Handler raised; ignoring",
            exc_info=True,
            extra={"slot": slot, "status_code": outcome.status_code},
        )


def dispatch(outcome: Outcome, handlers: HandlerSet) -> None:
    """Invoke the handlers that apply to ``outcome``.

    Order:
      1. ``on_success`` or ``on_error`` depending on the classification.
      2. The ``by_status`` entry whose key equals ``outcome.status_code``, if any.
      3. ``on_complete``, always.

    Each handler is called at most once with the same ``outcome``. Exceptions
    raised by a handler are contained here and never reach the caller.
    """

    primary = handlers.on_success if outcome.is_success else handlers.on_error
    _invoke("on_success" if outcome.is_success else "on_error", primary, outcome)

    if outcome.status_code is not None:
        _invoke("by_status", handlers.by_status.get(outcome.status_code), outcome)

    _invoke("on_complete", handlers.on_complete, outcome)
