"""
In-memory working-hour and reservation store.

Used by the CLI and tests in place of a database. Fixture data is loaded
from a YAML file:

    working_hours:
      - {id: 1, specialty_id: 1, day_of_week: 0, start: "08:00", end: "12:00",
         slot_duration_minutes: 30}
    reservations:
      - {id: 1, user_id: 7, specialty_id: 1, date: 2026-10-19,
         start: "09:00", end: "09:30", status: pending}
"""

from __future__ import annotations

import logging
from datetime import date, time
from pathlib import Path
from typing import Any, Dict, Iterable, List

import yaml

from ..domain.exceptions import DuplicateWorkingHourIdError, StoreError
from ..domain.models import (
    Reservation,
    ReservationStatus,
    TimeInterval,
    WorkingHour,
)
from ..domain.working_hours import WorkingHourSet

logger = logging.getLogger(__name__)


class InMemoryStore:
    """
    Holds working hours and reservations, answering the store queries the
    availability and reservation services issue.

    No atomicity guarantees: check-then-write races are the caller's concern.
    """

    def __init__(
        self,
        working_hours: Iterable[WorkingHour] = (),
        reservations: Iterable[Reservation] = (),
    ):
        self.working_hours = WorkingHourSet(working_hours)
        self._reservations: Dict[int, Reservation] = {r.id: r for r in reservations}

    @property
    def reservations(self) -> List[Reservation]:
        return list(self._reservations.values())

    def save_reservation(self, reservation: Reservation) -> Reservation:
        """Insert or replace a reservation by id."""
        self._reservations[reservation.id] = reservation
        return reservation

    def get_reservation(self, reservation_id: int) -> Reservation:
        try:
            return self._reservations[reservation_id]
        except KeyError:
            raise StoreError(f"Reservation not found: {reservation_id}") from None

    def next_reservation_id(self) -> int:
        return max(self._reservations, default=0) + 1

    # Working-hour store

    def active_for_specialty(self, specialty_id: int) -> List[WorkingHour]:
        return self.working_hours.all_active(specialty_id)

    # Reservation store

    def active_for_specialty_on_date(
        self,
        specialty_id: int,
        on_date: date,
    ) -> List[Reservation]:
        return self.active_for_specialty_between(specialty_id, on_date, on_date)

    def active_for_specialty_between(
        self,
        specialty_id: int,
        from_date: date,
        to_date: date,
    ) -> List[Reservation]:
        return [
            r for r in self._reservations.values()
            if r.is_active
            and r.specialty_id == specialty_id
            and from_date <= r.date <= to_date
        ]

    def active_for_user_on_date(self, user_id: int, on_date: date) -> List[Reservation]:
        return [
            r for r in self._reservations.values()
            if r.is_active and r.user_id == user_id and r.date == on_date
        ]

    @classmethod
    def from_yaml(cls, data_path: Path) -> "InMemoryStore":
        """
        Load fixture data from a YAML file.

        Raises:
            StoreError: If the file is missing, unreadable or malformed
        """
        try:
            with open(data_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except OSError as exc:
            raise StoreError(f"Could not read data file {data_path}: {exc}") from exc
        except yaml.YAMLError as exc:
            raise StoreError(f"Invalid YAML in {data_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise StoreError("Data file must contain a mapping at the root level.")

        working_hours = [
            _parse_entry(_working_hour_from_dict, entry, "working_hours", index)
            for index, entry in enumerate(data.get("working_hours") or [])
        ]
        reservations = [
            _parse_entry(_reservation_from_dict, entry, "reservations", index)
            for index, entry in enumerate(data.get("reservations") or [])
        ]

        try:
            store = cls(working_hours=working_hours, reservations=reservations)
        except DuplicateWorkingHourIdError as exc:
            raise StoreError(f"Invalid working_hours in {data_path}: {exc}") from exc

        logger.info(
            "Loaded %d working hours and %d reservations from %s",
            len(working_hours),
            len(reservations),
            data_path,
        )
        return store


def _parse_entry(parser, entry: Any, section: str, index: int):
    if not isinstance(entry, dict):
        raise StoreError(f"{section}[{index}] must be a mapping")
    try:
        return parser(entry)
    except (KeyError, TypeError, ValueError) as exc:
        raise StoreError(f"{section}[{index}] is invalid: {exc}") from exc


def _working_hour_from_dict(entry: Dict[str, Any]) -> WorkingHour:
    return WorkingHour(
        id=int(entry["id"]) if "id" in entry else None,
        specialty_id=int(entry["specialty_id"]),
        day_of_week=int(entry["day_of_week"]),
        interval=TimeInterval(
            start=_parse_time(entry["start"]),
            end=_parse_time(entry["end"]),
        ),
        slot_duration_minutes=int(entry.get("slot_duration_minutes", 30)),
        is_active=bool(entry.get("is_active", True)),
    )


def _reservation_from_dict(entry: Dict[str, Any]) -> Reservation:
    return Reservation(
        id=int(entry["id"]),
        user_id=int(entry["user_id"]),
        specialty_id=int(entry["specialty_id"]),
        date=_parse_date(entry["date"]),
        interval=TimeInterval(
            start=_parse_time(entry["start"]),
            end=_parse_time(entry["end"]),
        ),
        status=ReservationStatus(str(entry.get("status", "pending")).lower()),
    )


def _parse_time(value: Any) -> time:
    # YAML 1.1 reads unquoted 08:30 as the sexagesimal integer 510
    if isinstance(value, int):
        return time(hour=value // 60, minute=value % 60)
    return time.fromisoformat(str(value))


def _parse_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))
