"""
Clock collaborator for lead-time checks.
"""

import pendulum
from pendulum import DateTime


class SystemClock:
    """Reads the wall clock in the clinic's time zone."""

    def __init__(self, timezone: str = "Asia/Tehran"):
        self.timezone = timezone

    def now(self) -> DateTime:
        return pendulum.now(self.timezone)
