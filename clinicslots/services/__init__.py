"""
Service layer helpers that orchestrate stores and domain logic.
"""

from .availability import AvailabilityService, ReservationStore, WorkingHourStore
from .reservations import Clock, ReservationService

__all__ = [
    "AvailabilityService",
    "Clock",
    "ReservationService",
    "ReservationStore",
    "WorkingHourStore",
]
