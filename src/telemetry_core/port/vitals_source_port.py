"""Vitals source port: performance entry observation."""

from collections.abc import Callable, Mapping
from typing import Any, Protocol

PerformanceEntry = Mapping[str, Any]
EntryCallback = Callable[[PerformanceEntry], None]


class VitalsSource(Protocol):
    """Protocol for a feed of browser performance entries.

    Entries follow the PerformanceObserver shape: ``entryType``, ``name``,
    ``startTime``, ``duration`` plus type-specific fields such as
    ``processingStart``, ``value``, ``hadRecentInput``, ``requestStart`` and
    ``responseStart``.
    """

    def connect(self, callback: EntryCallback) -> None: ...

    def disconnect(self) -> None: ...
