"""
Booking-rule checks backed by store lookups.

The checker itself only sees snapshots; this service issues the explicit
queries it needs (reservations by specialty and date, by user and date) and
reads "now" from a clock collaborator.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Protocol

from pendulum import DateTime

from ..domain.conflict_checker import ConflictChecker
from ..domain.models import (
    BookingRequest,
    Reservation,
    ReservationStatus,
    TimeInterval,
)
from ..domain.outcome import Outcome
from .availability import ReservationStore

logger = logging.getLogger(__name__)


class Clock(Protocol):
    """Supplies the current time for lead-time checks."""

    def now(self) -> DateTime:
        """Return the current local time."""


class ReservationService:
    """
    Runs create, edit, cancel and status-change checks for a caller that
    commits the write afterwards.

    The caller must perform the check and the write atomically; two requests
    for the same slot can otherwise both pass ``check_create``.
    """

    def __init__(
        self,
        reservation_store: ReservationStore,
        conflict_checker: ConflictChecker,
        clock: Clock,
    ) -> None:
        self._reservation_store = reservation_store
        self._conflict_checker = conflict_checker
        self._clock = clock

    def check_create(self, request: BookingRequest) -> Outcome[None]:
        """Check a new booking against the specialty's and the user's day."""
        same_slot_day = self._reservation_store.active_for_specialty_on_date(
            request.specialty_id, request.date
        )
        user_day = self._reservation_store.active_for_user_on_date(
            request.requesting_user_id, request.date
        )
        outcome = self._conflict_checker.can_create(request, same_slot_day, user_day)
        return self._log("create", request.specialty_id, outcome)

    def check_edit(
        self,
        reservation: Reservation,
        proposed_date: Optional[date] = None,
        proposed_interval: Optional[TimeInterval] = None,
    ) -> Outcome[None]:
        """Check moving a pending reservation to another date or interval."""
        target_date = proposed_date or reservation.date
        others = self._reservation_store.active_for_specialty_on_date(
            reservation.specialty_id, target_date
        )
        outcome = self._conflict_checker.can_edit(
            reservation,
            others,
            proposed_date=proposed_date,
            proposed_interval=proposed_interval,
        )
        return self._log("edit", reservation.id, outcome)

    def check_cancel(self, reservation: Reservation) -> Outcome[None]:
        """Check an owner's cancellation against the current time."""
        outcome = self._conflict_checker.can_cancel(reservation, self._clock.now())
        return self._log("cancel", reservation.id, outcome)

    def check_status_change(
        self,
        reservation: Reservation,
        target: ReservationStatus,
    ) -> Outcome[None]:
        """Check an administrator's status change."""
        outcome = self._conflict_checker.can_change_status(reservation, target)
        return self._log(f"status->{target.value}", reservation.id, outcome)

    @staticmethod
    def _log(action: str, subject: int, outcome: Outcome[None]) -> Outcome[None]:
        if outcome:
            logger.debug("%s check passed for %s", action, subject)
        else:
            logger.info(
                "%s check rejected for %s: %s (%s)",
                action,
                subject,
                outcome.rejection.value,
                outcome.message,
            )
        return outcome
