"""
Per-specialty weekly working-hour configuration.
"""

from __future__ import annotations

from dataclasses import replace
from itertools import combinations
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .exceptions import (
    DuplicateWorkingHourIdError,
    WorkingHourConflictError,
    WorkingHourNotFoundError,
)
from .models import WorkingHour


class WorkingHourSet:
    """
    Collection of working-hour windows, queryable by specialty and weekday.

    Writes reject a window overlapping another active window of the same
    specialty on the same weekday. Deactivated rows are kept.
    """

    def __init__(self, working_hours: Iterable[WorkingHour] = ()):
        self._rows: Dict[int, WorkingHour] = {}
        self._next_id = 1
        for working_hour in working_hours:
            self._store(working_hour)

    def __iter__(self) -> Iterator[WorkingHour]:
        return iter(self._rows.values())

    def __len__(self) -> int:
        return len(self._rows)

    def get(self, working_hour_id: int) -> WorkingHour:
        try:
            return self._rows[working_hour_id]
        except KeyError:
            raise WorkingHourNotFoundError(working_hour_id) from None

    def for_day(self, specialty_id: int, day_of_week: int) -> List[WorkingHour]:
        """Return the active windows of a specialty on a weekday."""
        return [
            row for row in self._rows.values()
            if row.is_active
            and row.specialty_id == specialty_id
            and row.day_of_week == day_of_week
        ]

    def all_active(self, specialty_id: int | None = None) -> List[WorkingHour]:
        """Active windows ordered by weekday, then start time."""
        rows = [
            row for row in self._rows.values()
            if row.is_active
            and (specialty_id is None or row.specialty_id == specialty_id)
        ]
        return sorted(rows, key=lambda r: (r.day_of_week, r.interval.start))

    def add(self, working_hour: WorkingHour) -> WorkingHour:
        """
        Add a window.

        Raises:
            DuplicateWorkingHourIdError: If its id is already stored
            WorkingHourConflictError: If it overlaps an active window of the
                same specialty and weekday
        """
        if working_hour.id is not None and working_hour.id in self._rows:
            raise DuplicateWorkingHourIdError(working_hour.id)
        if working_hour.is_active:
            self._ensure_no_overlap(working_hour)
        return self._store(working_hour)

    def update(self, working_hour: WorkingHour) -> WorkingHour:
        """
        Replace an existing window, checked against every other active window.

        Raises:
            WorkingHourNotFoundError: If the id is unknown
            WorkingHourConflictError: If the changed window overlaps another
        """
        if working_hour.id is None or working_hour.id not in self._rows:
            raise WorkingHourNotFoundError(working_hour.id)

        if working_hour.is_active:
            self._ensure_no_overlap(working_hour, exclude_id=working_hour.id)

        self._rows[working_hour.id] = working_hour
        return working_hour

    def deactivate(self, working_hour_id: int) -> WorkingHour:
        """Soft-delete a window; the row stays for historical consistency."""
        row = replace(self.get(working_hour_id), is_active=False)
        self._rows[working_hour_id] = row
        return row

    def find_overlapping_windows(
        self,
        specialty_id: int,
        day_of_week: int
    ) -> List[Tuple[WorkingHour, WorkingHour]]:
        """
        Report pairs of active windows that overlap on one weekday.

        Only possible when rows were written around ``add``/``update``.
        """
        return [
            (first, second)
            for first, second in combinations(self.for_day(specialty_id, day_of_week), 2)
            if first.interval.overlaps(second.interval)
        ]

    def _ensure_no_overlap(
        self,
        candidate: WorkingHour,
        exclude_id: Optional[int] = None
    ) -> None:
        for row in self._rows.values():
            if not row.is_active or not row.same_day_as(candidate):
                continue
            if exclude_id is not None and row.id == exclude_id:
                continue
            if candidate.interval.overlaps(row.interval):
                raise WorkingHourConflictError(candidate=candidate, existing=row)

    def _store(self, working_hour: WorkingHour) -> WorkingHour:
        if working_hour.id is None:
            working_hour = replace(working_hour, id=self._next_id)
        if working_hour.id in self._rows:
            raise DuplicateWorkingHourIdError(working_hour.id)
        self._rows[working_hour.id] = working_hour
        self._next_id = max(self._next_id, working_hour.id + 1)
        return working_hour
