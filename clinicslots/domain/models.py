"""
Domain models for intervals, working hours, reservations and slots.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, time
from enum import Enum
from typing import Dict, FrozenSet

from .exceptions import InvalidIntervalError

MAX_SLOT_DURATION_MINUTES = 480

WEEKDAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)


@dataclass(frozen=True)
class TimeInterval:
    """
    An immutable wall-clock range within a single day, half-open: [start, end).

    Invariant: start must be before end.
    """
    start: time
    end: time

    def __post_init__(self):
        if self.start >= self.end:
            raise InvalidIntervalError(
                f"Start time {self.start} must be before end time {self.end}"
            )

    def duration_minutes(self) -> int:
        """Return the duration in whole minutes."""
        return (_seconds_of_day(self.end) - _seconds_of_day(self.start)) // 60

    def overlaps(self, other: "TimeInterval") -> bool:
        """Check if this range overlaps with another."""
        return overlaps(self, other)

    def __str__(self) -> str:
        return f"{self.start.strftime('%H:%M')}-{self.end.strftime('%H:%M')}"


def _seconds_of_day(value: time) -> int:
    return value.hour * 3600 + value.minute * 60 + value.second


def overlaps(a: TimeInterval, b: TimeInterval) -> bool:
    """
    Half-open overlap test.

    An interval ending exactly when the other starts does not overlap it.
    """
    return not (a.end <= b.start or b.end <= a.start)


def overlaps_by_clauses(a: TimeInterval, b: TimeInterval) -> bool:
    """
    Overlap test written as three explicit cases.

    ``a`` starts inside ``b``, ``a`` ends inside ``b``, or ``a`` covers ``b``.
    Equivalent to :func:`overlaps` for every valid pair of intervals.
    """
    return (
        (a.start >= b.start and a.start < b.end)
        or (a.end > b.start and a.end <= b.end)
        or (a.start <= b.start and a.end >= b.end)
    )


class ReservationStatus(str, Enum):
    """Lifecycle states of a reservation."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"

    @property
    def is_terminal(self) -> bool:
        return self in (ReservationStatus.CANCELLED, ReservationStatus.COMPLETED)

    @property
    def blocks_time(self) -> bool:
        """Whether a reservation in this state occupies its interval."""
        return self is not ReservationStatus.CANCELLED

    def can_transition_to(self, target: "ReservationStatus") -> bool:
        return target in ALLOWED_TRANSITIONS[self]


ALLOWED_TRANSITIONS: Dict[ReservationStatus, FrozenSet[ReservationStatus]] = {
    ReservationStatus.PENDING: frozenset({
        ReservationStatus.CONFIRMED,
        ReservationStatus.CANCELLED,
        ReservationStatus.COMPLETED,
    }),
    ReservationStatus.CONFIRMED: frozenset({
        ReservationStatus.CANCELLED,
        ReservationStatus.COMPLETED,
    }),
    ReservationStatus.CANCELLED: frozenset(),
    ReservationStatus.COMPLETED: frozenset(),
}


@dataclass
class WorkingHour:
    """
    A recurring weekly availability window for one specialty.

    ``day_of_week`` follows ``date.weekday()``: 0=Monday, 6=Sunday.
    """
    specialty_id: int
    day_of_week: int
    interval: TimeInterval
    slot_duration_minutes: int = 30
    is_active: bool = True
    id: int | None = None

    def __post_init__(self):
        if not 0 <= self.day_of_week <= 6:
            raise InvalidIntervalError(
                f"day_of_week must be between 0 and 6, got {self.day_of_week}"
            )
        if not 0 < self.slot_duration_minutes <= MAX_SLOT_DURATION_MINUTES:
            raise InvalidIntervalError(
                f"slot_duration_minutes must be in (0, {MAX_SLOT_DURATION_MINUTES}], "
                f"got {self.slot_duration_minutes}"
            )

    @property
    def day_name(self) -> str:
        return WEEKDAY_NAMES[self.day_of_week]

    def same_day_as(self, other: "WorkingHour") -> bool:
        """Check if both windows belong to the same specialty and weekday."""
        return (
            self.specialty_id == other.specialty_id
            and self.day_of_week == other.day_of_week
        )


@dataclass
class Reservation:
    """
    A booked interval on a date for one specialty.

    Users and specialties are referenced by id only.
    """
    id: int
    user_id: int
    specialty_id: int
    date: date
    interval: TimeInterval
    status: ReservationStatus = ReservationStatus.PENDING

    @property
    def is_active(self) -> bool:
        return self.status.blocks_time

    def with_status(self, status: ReservationStatus) -> "Reservation":
        """Return a copy in the given status."""
        return replace(self, status=status)


@dataclass(frozen=True)
class BookingRequest:
    """A user's request to reserve an interval."""
    specialty_id: int
    date: date
    interval: TimeInterval
    requesting_user_id: int


@dataclass(frozen=True)
class Slot:
    """
    A computed candidate reservation interval. Never persisted.
    """
    interval: TimeInterval
    is_available: bool = field(default=True)

    def format_display(self) -> str:
        """Format: HH:MM – HH:MM (N min)"""
        start = self.interval.start.strftime("%H:%M")
        end = self.interval.end.strftime("%H:%M")
        return f"{start} – {end} ({self.interval.duration_minutes()} min)"
