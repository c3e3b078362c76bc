"""System clock: implements Clock."""

import time
from datetime import datetime, timezone


class SystemClock:
    """UTC wall clock with a monotonic counter for durations."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def monotonic(self) -> float:
        return time.monotonic()
