"""
Domain layer - Pure business logic without external dependencies.
"""

from .conflict_checker import ConflictChecker
from .models import (
    BookingRequest,
    Reservation,
    ReservationStatus,
    Slot,
    TimeInterval,
    WorkingHour,
    overlaps,
)
from .outcome import Outcome, RejectionKind
from .slot_generator import SlotGenerator
from .working_hours import WorkingHourSet

__all__ = [
    "BookingRequest",
    "ConflictChecker",
    "Outcome",
    "RejectionKind",
    "Reservation",
    "ReservationStatus",
    "Slot",
    "SlotGenerator",
    "TimeInterval",
    "WorkingHour",
    "WorkingHourSet",
    "overlaps",
]
