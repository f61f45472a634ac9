"""
Expansion of availability windows into discrete bookable slots.

Pure domain logic: no store access, no clock, no I/O.
"""

from datetime import time
from typing import Iterable, List

import pendulum
from pendulum import DateTime

from .models import TimeInterval, WorkingHour

# Any fixed day works; it only carries wall-clock times through the arithmetic.
_ANCHOR = pendulum.naive(2000, 1, 3)


class SlotGenerator:
    """
    Generates back-to-back slots inside availability windows.

    Algorithm:
    1. Start a cursor at the window start
    2. Emit [cursor, cursor + duration) while it still fits in the window
    3. Advance the cursor by the slot's own duration
    4. Drop the partial trailing remainder
    """

    def generate(
        self,
        start: time,
        end: time,
        duration_minutes: int
    ) -> List[TimeInterval]:
        """
        Generate slots between two wall-clock times.

        Returns an empty list for a non-positive duration or an empty window.
        """
        if duration_minutes <= 0 or start >= end:
            return []

        window_end = self._on_anchor(end)
        cursor = self._on_anchor(start)
        slots: List[TimeInterval] = []

        while True:
            slot_end = cursor.add(minutes=duration_minutes)
            if slot_end > window_end:
                break
            slots.append(
                TimeInterval(start=self._wall_clock(cursor), end=self._wall_clock(slot_end))
            )
            cursor = slot_end

        return slots

    def generate_for_window(
        self,
        window: TimeInterval,
        duration_minutes: int
    ) -> List[TimeInterval]:
        """Generate slots for a single ad-hoc window."""
        return self.generate(window.start, window.end, duration_minutes)

    def generate_for_working_hours(
        self,
        working_hours: Iterable[WorkingHour]
    ) -> List[TimeInterval]:
        """
        Expand each working-hour window independently and merge the results.

        Example:
        Windows: 08:00-10:00 (60 min), 16:00-17:00 (30 min)
        Result: [08:00-09:00, 09:00-10:00, 16:00-16:30, 16:30-17:00]

        Overlapping windows yield duplicate or overlapping slots; they are
        kept as-is.
        """
        candidates: List[TimeInterval] = []

        for working_hour in working_hours:
            candidates.extend(
                self.generate_for_window(
                    working_hour.interval,
                    working_hour.slot_duration_minutes
                )
            )

        return sorted(candidates, key=lambda interval: interval.start)

    @staticmethod
    def _on_anchor(value: time) -> DateTime:
        return _ANCHOR.set(
            hour=value.hour,
            minute=value.minute,
            second=value.second,
            microsecond=0
        )

    @staticmethod
    def _wall_clock(moment: DateTime) -> time:
        return time(moment.hour, moment.minute, moment.second)
