"""
Typed results for booking-rule checks.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class RejectionKind(str, Enum):
    """Reasons a booking, edit, cancellation or query is refused."""
    INVALID_INTERVAL = "invalid_interval"
    TIME_CONFLICT = "time_conflict"
    DUPLICATE_DAY_BOOKING = "duplicate_day_booking"
    NOT_EDITABLE = "not_editable"
    ALREADY_CANCELLED = "already_cancelled"
    ALREADY_COMPLETED = "already_completed"
    TOO_LATE = "too_late"
    INVALID_RANGE = "invalid_range"
    RANGE_TOO_LARGE = "range_too_large"
    INVALID_TRANSITION = "invalid_transition"


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """
    Either a success carrying an optional value, or a rejection kind.

    Truthiness follows ``ok`` so callers can write ``if not outcome: ...``.
    """
    ok: bool
    value: Optional[T] = None
    rejection: Optional[RejectionKind] = None
    message: str = ""

    def __post_init__(self):
        if self.ok and self.rejection is not None:
            raise ValueError("A successful outcome cannot carry a rejection")
        if not self.ok and self.rejection is None:
            raise ValueError("A failed outcome needs a rejection kind")

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, value: Optional[T] = None) -> "Outcome[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, kind: RejectionKind, message: str = "") -> "Outcome[T]":
        return cls(ok=False, rejection=kind, message=message)
