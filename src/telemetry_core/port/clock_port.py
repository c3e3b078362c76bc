"""Clock port: wall clock and monotonic time source."""

from datetime import datetime
from typing import Protocol


class Clock(Protocol):
    """Protocol for time sources.

    ``now`` stamps records; ``monotonic`` (seconds) measures durations.
    """

    def now(self) -> datetime: ...

    def monotonic(self) -> float: ...
