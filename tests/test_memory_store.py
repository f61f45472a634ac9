"""
Tests for the in-memory store and its YAML loader.
"""

from datetime import date, time
from pathlib import Path

import pytest

from clinicslots.adapters.memory_store import InMemoryStore
from clinicslots.domain.exceptions import StoreError
from clinicslots.domain.models import ReservationStatus

DATA = """
working_hours:
  - {id: 1, specialty_id: 1, day_of_week: 0, start: "08:00", end: "12:00", slot_duration_minutes: 30}
  - id: 2
    specialty_id: 1
    day_of_week: 0
    start: 16:00
    end: 19:00
    slot_duration_minutes: 45
  - {id: 3, specialty_id: 1, day_of_week: 1, start: "08:00", end: "10:00", is_active: false}
reservations:
  - {id: 1, user_id: 7, specialty_id: 1, date: 2024-11-25, start: "09:00", end: "09:30"}
  - {id: 2, user_id: 8, specialty_id: 1, date: "2024-11-26", start: "09:00", end: "09:30", status: Confirmed}
  - {id: 3, user_id: 7, specialty_id: 2, date: 2024-11-25, start: "10:00", end: "10:30", status: cancelled}
"""


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    path = tmp_path / "data.yaml"
    path.write_text(DATA, encoding="utf-8")
    return path


def test_from_yaml_parses_entries(data_file: Path):
    store = InMemoryStore.from_yaml(data_file)

    assert len(store.working_hours) == 3
    assert len(store.reservations) == 3
    assert store.get_reservation(2).status is ReservationStatus.CONFIRMED
    assert store.get_reservation(2).date == date(2024, 11, 26)


def test_unquoted_times_are_read_as_clock_times(data_file: Path):
    store = InMemoryStore.from_yaml(data_file)

    evening = store.working_hours.get(2)

    assert evening.interval.start == time(16, 0)
    assert evening.interval.end == time(19, 0)


def test_queries_skip_cancelled_and_inactive(data_file: Path):
    store = InMemoryStore.from_yaml(data_file)

    assert [w.id for w in store.active_for_specialty(1)] == [1, 2]
    assert [r.id for r in store.active_for_specialty_on_date(1, date(2024, 11, 25))] == [1]
    assert [r.id for r in store.active_for_specialty_between(1, date(2024, 11, 25), date(2024, 11, 26))] == [1, 2]
    assert [r.id for r in store.active_for_user_on_date(7, date(2024, 11, 25))] == [1]


def test_next_reservation_id(data_file: Path):
    assert InMemoryStore.from_yaml(data_file).next_reservation_id() == 4
    assert InMemoryStore().next_reservation_id() == 1


def test_missing_reservation():
    with pytest.raises(StoreError, match="not found"):
        InMemoryStore().get_reservation(1)


def test_missing_file(tmp_path: Path):
    with pytest.raises(StoreError, match="Could not read"):
        InMemoryStore.from_yaml(tmp_path / "missing.yaml")


def test_invalid_entry_is_reported(tmp_path: Path):
    path = tmp_path / "data.yaml"
    path.write_text(
        'working_hours:\n  - {specialty_id: 1, day_of_week: 0, start: "12:00", end: "08:00"}\n',
        encoding="utf-8",
    )

    with pytest.raises(StoreError, match=r"working_hours\[0\] is invalid"):
        InMemoryStore.from_yaml(path)


def test_unknown_status_is_reported(tmp_path: Path):
    path = tmp_path / "data.yaml"
    path.write_text(
        'reservations:\n  - {id: 1, user_id: 1, specialty_id: 1, date: 2024-11-25, '
        'start: "09:00", end: "09:30", status: lost}\n',
        encoding="utf-8",
    )

    with pytest.raises(StoreError, match=r"reservations\[0\]"):
        InMemoryStore.from_yaml(path)


def test_duplicate_working_hour_id_is_reported(tmp_path: Path):
    path = tmp_path / "data.yaml"
    path.write_text(
        "working_hours:\n"
        '  - {specialty_id: 1, day_of_week: 0, start: "08:00", end: "12:00"}\n'
        '  - {id: 1, specialty_id: 1, day_of_week: 1, start: "08:00", end: "12:00"}\n',
        encoding="utf-8",
    )

    with pytest.raises(StoreError, match="already in use"):
        InMemoryStore.from_yaml(path)


def test_non_integer_working_hour_id_is_reported(tmp_path: Path):
    path = tmp_path / "data.yaml"
    path.write_text(
        'working_hours:\n  - {id: wh-1, specialty_id: 1, day_of_week: 0, start: "08:00", end: "12:00"}\n',
        encoding="utf-8",
    )

    with pytest.raises(StoreError, match=r"working_hours\[0\] is invalid"):
        InMemoryStore.from_yaml(path)
