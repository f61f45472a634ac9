"""
Application service answering "what can I book".

The service pulls working hours and active reservations through small store
protocols and delegates the slot arithmetic to ``SlotGenerator`` and the
overlap test to ``ConflictChecker``. Any store works: a database repository,
the in-memory fixture store, or a stub in tests.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Protocol

from ..config import BookingRules
from ..domain.conflict_checker import ConflictChecker
from ..domain.models import Reservation, Slot, TimeInterval, WorkingHour
from ..domain.outcome import Outcome, RejectionKind
from ..domain.slot_generator import SlotGenerator
from ..domain.working_hours import WorkingHourSet

logger = logging.getLogger(__name__)


class WorkingHourStore(Protocol):
    """Source of configured working hours."""

    def active_for_specialty(self, specialty_id: int) -> List[WorkingHour]:
        """Return every active working-hour row of a specialty."""


class ReservationStore(Protocol):
    """Source of non-cancelled reservations."""

    def active_for_specialty_on_date(
        self,
        specialty_id: int,
        on_date: date,
    ) -> List[Reservation]:
        """Return active reservations of a specialty on a date."""

    def active_for_specialty_between(
        self,
        specialty_id: int,
        from_date: date,
        to_date: date,
    ) -> List[Reservation]:
        """Return active reservations of a specialty within [from_date, to_date]."""

    def active_for_user_on_date(self, user_id: int, on_date: date) -> List[Reservation]:
        """Return active reservations a user holds on a date, in any specialty."""


class AvailabilityService:
    """
    Computes free slots for a specialty on a day or over a date range.
    """

    def __init__(
        self,
        working_hour_store: WorkingHourStore,
        reservation_store: ReservationStore,
        slot_generator: SlotGenerator | None = None,
        conflict_checker: ConflictChecker | None = None,
        rules: BookingRules | None = None,
    ) -> None:
        self._working_hour_store = working_hour_store
        self._reservation_store = reservation_store
        self._slot_generator = slot_generator or SlotGenerator()
        self._conflict_checker = conflict_checker or ConflictChecker()
        self._rules = rules or BookingRules()

    def available_slots_for_day(self, specialty_id: int, on_date: date) -> List[Slot]:
        """
        Free slots of a specialty on one date, ordered by start time.

        Days without configured working hours have no slots.
        """
        working_hours = self._load_working_hours(specialty_id)
        reservations = self._reservation_store.active_for_specialty_on_date(
            specialty_id, on_date
        )
        return self._free_slots(working_hours, specialty_id, on_date, reservations)

    def available_slots_for_range(
        self,
        specialty_id: int,
        from_date: date,
        to_date: date,
        max_days: Optional[int] = None,
    ) -> Outcome[Dict[date, List[Slot]]]:
        """
        Free slots for every date in [from_date, to_date].

        Args:
            specialty_id: Specialty to query
            from_date: First date, inclusive
            to_date: Last date, inclusive
            max_days: Largest allowed ``to_date - from_date`` in days; defaults
                to the configured ``max_range_days``

        Returns:
            Outcome holding a date-keyed map, or INVALID_RANGE / RANGE_TOO_LARGE
        """
        limit = self._rules.max_range_days if max_days is None else max_days

        if from_date > to_date:
            return Outcome.failure(
                RejectionKind.INVALID_RANGE,
                f"Start date {from_date} is after end date {to_date}",
            )
        if (to_date - from_date).days > limit:
            return Outcome.failure(
                RejectionKind.RANGE_TOO_LARGE,
                f"Date range cannot exceed {limit} days",
            )

        working_hours = self._load_working_hours(specialty_id)
        reservations_by_date = self._group_by_date(
            self._reservation_store.active_for_specialty_between(
                specialty_id, from_date, to_date
            )
        )

        result: Dict[date, List[Slot]] = {}
        current = from_date
        while current <= to_date:
            result[current] = self._free_slots(
                working_hours,
                specialty_id,
                current,
                reservations_by_date.get(current, []),
            )
            current += timedelta(days=1)

        return Outcome.success(result)

    def available_slots_for_window(
        self,
        specialty_id: int,
        on_date: date,
        duration_minutes: Optional[int] = None,
        window: Optional[TimeInterval] = None,
    ) -> List[Slot]:
        """
        Free slots inside a flat daily window, ignoring working-hour config.

        Defaults to the clinic opening hours and the default slot duration.
        """
        window = window or self._rules.clinic_window()
        duration = duration_minutes or self._rules.default_slot_duration_minutes
        reservations = self._reservation_store.active_for_specialty_on_date(
            specialty_id, on_date
        )
        candidates = self._slot_generator.generate_for_window(window, duration)
        return self._filter_free(candidates, reservations)

    def _load_working_hours(self, specialty_id: int) -> WorkingHourSet:
        return WorkingHourSet(self._working_hour_store.active_for_specialty(specialty_id))

    def _free_slots(
        self,
        working_hours: WorkingHourSet,
        specialty_id: int,
        on_date: date,
        reservations: Iterable[Reservation],
    ) -> List[Slot]:
        day_of_week = on_date.weekday()
        windows = working_hours.for_day(specialty_id, day_of_week)
        if not windows:
            return []

        overlapping = working_hours.find_overlapping_windows(specialty_id, day_of_week)
        if overlapping:
            logger.warning(
                "Specialty %s has %d overlapping working-hour window pair(s) on %s; "
                "duplicate slots may be returned",
                specialty_id,
                len(overlapping),
                on_date,
            )

        candidates = self._slot_generator.generate_for_working_hours(windows)
        slots = self._filter_free(candidates, reservations)
        logger.debug(
            "Specialty %s on %s: %d of %d candidate slots free",
            specialty_id,
            on_date,
            len(slots),
            len(candidates),
        )
        return slots

    def _filter_free(
        self,
        candidates: Iterable[TimeInterval],
        reservations: Iterable[Reservation],
    ) -> List[Slot]:
        busy = [r.interval for r in reservations if r.is_active]
        free = [
            Slot(interval=candidate)
            for candidate in candidates
            if not self._conflict_checker.has_overlap(candidate, busy)
        ]
        return sorted(free, key=lambda slot: slot.interval.start)

    @staticmethod
    def _group_by_date(reservations: Iterable[Reservation]) -> Dict[date, List[Reservation]]:
        grouped: Dict[date, List[Reservation]] = {}
        for reservation in reservations:
            grouped.setdefault(reservation.date, []).append(reservation)
        return grouped
