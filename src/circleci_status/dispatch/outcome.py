"""Outcome and handler types shared by the dispatcher and executor."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any


class Classification(str, Enum):
    """Terminal state of one HTTP exchange."""

    SUCCESS = "success"
    ERROR = "error"
    TRANSPORT_ERROR = "transport_error"


@dataclass(frozen=True, slots=True)
class Outcome:
    """The terminal result of one request.

    ``status_code`` is only set when a response was received, and ``payload``
    only carries the decoded body on success. ``context`` holds whatever the
    transport attached (the ``requests.Response``, the raised error, the URL)
    and is passed through untouched.
    """

    classification: Classification
    status_code: int | None = None
    payload: Any = None
    context: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        # Accept plain strings ("success") as well as enum members.
        object.__setattr__(self, "classification", Classification(self.classification))

    @property
    def is_success(self) -> bool:
        return self.classification is Classification.SUCCESS


Handler = Callable[[Outcome], object]


@dataclass(frozen=True, slots=True)
class HandlerSet:
    """Callbacks registered for a single request. Any of them may be absent."""

    on_success: Handler | None = None
    on_error: Handler | None = None
    on_complete: Handler | None = None
    by_status: Mapping[int, Handler] = field(default_factory=dict)
