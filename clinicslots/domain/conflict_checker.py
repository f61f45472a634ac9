"""
Booking rules: overlap detection, admission, edits, cancellation and
status changes.

Every check works on snapshots supplied by the caller and returns an
``Outcome``; nothing here reads a store or the clock.
"""

from datetime import date, datetime
from typing import Iterable, List, Optional

import pendulum

from .models import (
    BookingRequest,
    Reservation,
    ReservationStatus,
    TimeInterval,
    overlaps,
)
from .outcome import Outcome, RejectionKind

DEFAULT_CANCELLATION_LEAD_HOURS = 24


class ConflictChecker:
    """
    Decides whether reservations may be created, edited, cancelled or moved
    to another status.
    """

    def __init__(
        self,
        cancellation_lead_hours: int = DEFAULT_CANCELLATION_LEAD_HOURS,
        one_reservation_per_day: bool = True,
    ):
        self.cancellation_lead = pendulum.duration(hours=cancellation_lead_hours)
        self.one_reservation_per_day = one_reservation_per_day

    def has_overlap(
        self,
        candidate: TimeInterval,
        existing: Iterable[TimeInterval]
    ) -> bool:
        """Check if the candidate overlaps any of the existing intervals."""
        return any(overlaps(candidate, interval) for interval in existing)

    def can_create(
        self,
        request: BookingRequest,
        reservations_for_date_and_specialty: Iterable[Reservation],
        reservations_for_user_on_date: Iterable[Reservation],
    ) -> Outcome[None]:
        """
        Admit a new reservation request.

        Rules, in order:
        1. The interval must not overlap an active reservation of the
           specialty on that date
        2. The user must not already hold an active reservation that day,
           in any specialty
        """
        busy = self._active_intervals(reservations_for_date_and_specialty)
        if self.has_overlap(request.interval, busy):
            return Outcome.failure(
                RejectionKind.TIME_CONFLICT,
                f"{request.interval} on {request.date} is already reserved",
            )

        if self.one_reservation_per_day and any(
            r.is_active and r.date == request.date
            for r in reservations_for_user_on_date
        ):
            return Outcome.failure(
                RejectionKind.DUPLICATE_DAY_BOOKING,
                f"User {request.requesting_user_id} already has a reservation on {request.date}",
            )

        return Outcome.success()

    def can_cancel(self, reservation: Reservation, now: datetime) -> Outcome[None]:
        """
        Check whether the owner may cancel a reservation at ``now``.

        The reservation must start no earlier than ``now`` plus the lead time.
        """
        if reservation.status is ReservationStatus.CANCELLED:
            return Outcome.failure(
                RejectionKind.ALREADY_CANCELLED,
                f"Reservation {reservation.id} is already cancelled",
            )
        if reservation.status is ReservationStatus.COMPLETED:
            return Outcome.failure(
                RejectionKind.ALREADY_COMPLETED,
                f"Reservation {reservation.id} is completed and cannot be cancelled",
            )

        starts_at = datetime.combine(
            reservation.date, reservation.interval.start, tzinfo=now.tzinfo
        )
        if starts_at < now + self.cancellation_lead:
            hours = int(self.cancellation_lead.total_seconds() // 3600)
            return Outcome.failure(
                RejectionKind.TOO_LATE,
                f"Reservations must be cancelled at least {hours} hours in advance",
            )

        return Outcome.success()

    def can_edit(
        self,
        reservation: Reservation,
        others_on_date_for_specialty: Iterable[Reservation],
        proposed_date: Optional[date] = None,
        proposed_interval: Optional[TimeInterval] = None,
    ) -> Outcome[None]:
        """
        Check whether a pending reservation may move to a new date or interval.

        Omitted fields keep their current values. The reservation's own record
        never conflicts with itself.
        """
        if reservation.status is not ReservationStatus.PENDING:
            return Outcome.failure(
                RejectionKind.NOT_EDITABLE,
                f"Only pending reservations can be edited (status: {reservation.status.value})",
            )

        target_date = proposed_date or reservation.date
        target_interval = proposed_interval or reservation.interval
        busy = self._active_intervals(
            r for r in others_on_date_for_specialty
            if r.id != reservation.id and r.date == target_date
        )
        if self.has_overlap(target_interval, busy):
            return Outcome.failure(
                RejectionKind.TIME_CONFLICT,
                f"{target_interval} on {target_date} is already reserved",
            )

        return Outcome.success()

    def can_change_status(
        self,
        reservation: Reservation,
        target: ReservationStatus
    ) -> Outcome[None]:
        """Check an administrator status change against the lifecycle."""
        current = reservation.status
        if current.is_terminal:
            return Outcome.failure(
                RejectionKind.NOT_EDITABLE,
                f"Reservation {reservation.id} is {current.value}; no further changes allowed",
            )
        if not current.can_transition_to(target):
            return Outcome.failure(
                RejectionKind.INVALID_TRANSITION,
                f"Cannot move reservation {reservation.id} from {current.value} to {target.value}",
            )
        return Outcome.success()

    @staticmethod
    def _active_intervals(reservations: Iterable[Reservation]) -> List[TimeInterval]:
        return [r.interval for r in reservations if r.is_active]
