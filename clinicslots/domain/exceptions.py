"""
Domain-specific exception hierarchy for the clinic slot engine.

Expected booking-rule violations are reported through ``Outcome`` values;
exceptions are reserved for invalid input, admin write rejections and
store faults.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .outcome import RejectionKind

if TYPE_CHECKING:
    from .models import WorkingHour


class ClinicSlotsError(Exception):
    """Base class for all application-level errors."""


class InvalidIntervalError(ClinicSlotsError, ValueError):
    """Raised when a time range or slot duration is malformed."""

    kind = RejectionKind.INVALID_INTERVAL


class ConflictError(ClinicSlotsError):
    """Raised when a write would overlap an existing active record."""

    kind = RejectionKind.TIME_CONFLICT


class WorkingHourConflictError(ConflictError):
    """Raised when a working-hour window overlaps another active window."""

    def __init__(self, candidate: "WorkingHour", existing: "WorkingHour"):
        self.candidate = candidate
        self.existing = existing
        super().__init__(
            f"Working hour {candidate.interval} overlaps active window "
            f"{existing.interval} (id={existing.id}) for specialty "
            f"{candidate.specialty_id} on weekday {candidate.day_of_week}"
        )


class WorkingHourNotFoundError(ClinicSlotsError, KeyError):
    """Raised when a working-hour id is unknown."""

    def __str__(self) -> str:
        return f"Working hour not found: {self.args[0]}"


class StoreError(ClinicSlotsError):
    """Raised when working-hour or reservation data cannot be loaded."""


class DuplicateWorkingHourIdError(ClinicSlotsError, ValueError):
    """Raised when a working-hour row reuses an id that is already stored."""

    def __init__(self, working_hour_id: int):
        self.working_hour_id = working_hour_id
        super().__init__(f"Working hour id {working_hour_id} is already in use")
