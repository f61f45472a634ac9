"""
Tests for the ReservationService orchestration layer.
"""

from datetime import date, time

import pendulum

from clinicslots.adapters.memory_store import InMemoryStore
from clinicslots.domain.conflict_checker import ConflictChecker
from clinicslots.domain.models import (
    BookingRequest,
    Reservation,
    ReservationStatus,
    TimeInterval,
)
from clinicslots.domain.outcome import RejectionKind
from clinicslots.services.reservations import ReservationService

MONDAY = date(2024, 11, 25)


class FixedClock:
    """Clock stub returning a preset instant."""

    def __init__(self, now):
        self._now = now

    def now(self):
        return self._now


def _interval(start: str, end: str) -> TimeInterval:
    return TimeInterval(start=time.fromisoformat(start), end=time.fromisoformat(end))


def _build_service(now=None) -> tuple[ReservationService, InMemoryStore]:
    store = InMemoryStore(reservations=[
        Reservation(id=1, user_id=7, specialty_id=1, date=MONDAY, interval=_interval("09:00", "10:00")),
        Reservation(id=2, user_id=8, specialty_id=2, date=MONDAY, interval=_interval("11:00", "11:30")),
        Reservation(
            id=3,
            user_id=9,
            specialty_id=1,
            date=MONDAY,
            interval=_interval("12:00", "12:30"),
            status=ReservationStatus.CANCELLED,
        ),
    ])
    clock = FixedClock(now or pendulum.datetime(2024, 11, 20, 9, 0, tz="Asia/Tehran"))
    service = ReservationService(
        reservation_store=store,
        conflict_checker=ConflictChecker(),
        clock=clock,
    )
    return service, store


def test_check_create_rejects_taken_time():
    service, _ = _build_service()
    request = BookingRequest(specialty_id=1, date=MONDAY, interval=_interval("09:00", "09:30"), requesting_user_id=42)

    outcome = service.check_create(request)

    assert outcome.rejection is RejectionKind.TIME_CONFLICT


def test_check_create_accepts_adjacent_and_cancelled_times():
    service, _ = _build_service()

    for start, end in [("10:00", "10:30"), ("12:00", "12:30")]:
        request = BookingRequest(
            specialty_id=1, date=MONDAY, interval=_interval(start, end), requesting_user_id=42
        )
        assert service.check_create(request)


def test_check_create_enforces_one_booking_per_day_across_specialties():
    service, _ = _build_service()
    request = BookingRequest(specialty_id=1, date=MONDAY, interval=_interval("14:00", "14:30"), requesting_user_id=8)

    outcome = service.check_create(request)

    assert outcome.rejection is RejectionKind.DUPLICATE_DAY_BOOKING


def test_check_edit_uses_store_for_target_date():
    service, store = _build_service()
    mine = store.get_reservation(1)

    assert service.check_edit(mine, proposed_interval=_interval("09:30", "10:30"))
    assert service.check_edit(mine, proposed_date=date(2024, 11, 26))

    store.save_reservation(
        Reservation(id=4, user_id=10, specialty_id=1, date=MONDAY, interval=_interval("10:00", "10:30"))
    )
    outcome = service.check_edit(mine, proposed_interval=_interval("09:30", "10:30"))
    assert outcome.rejection is RejectionKind.TIME_CONFLICT


def test_check_cancel_reads_clock():
    early, _ = _build_service(now=pendulum.datetime(2024, 11, 20, 9, 0, tz="Asia/Tehran"))
    late, store = _build_service(now=pendulum.datetime(2024, 11, 25, 8, 0, tz="Asia/Tehran"))
    reservation = store.get_reservation(1)

    assert early.check_cancel(reservation)
    assert late.check_cancel(reservation).rejection is RejectionKind.TOO_LATE


def test_check_status_change():
    service, store = _build_service()

    assert service.check_status_change(store.get_reservation(1), ReservationStatus.CONFIRMED)
    outcome = service.check_status_change(store.get_reservation(3), ReservationStatus.CONFIRMED)
    assert outcome.rejection is RejectionKind.NOT_EDITABLE
