"""In-memory performance timeline backing VitalsSource and RuntimeTimings.

Browser clients report PerformanceObserver entries (for example through a
beacon to the dashboard API). The timeline keeps the latest navigation,
paint and memory readings for health probes and forwards every entry to the
connected vitals callback.
"""

from collections.abc import Iterable
from typing import Any

import structlog

from telemetry_core.port.vitals_source_port import EntryCallback, PerformanceEntry

logger = structlog.get_logger()

MEMORY_ENTRY_TYPE = "memory"


class PerformanceTimeline:
    """Latest client performance readings plus a single-subscriber entry feed."""

    def __init__(self) -> None:
        self._callback: EntryCallback | None = None
        self._navigation: dict[str, Any] | None = None
        self._paint: dict[str, float] = {}
        self._memory: tuple[float, float] | None = None

    # --- VitalsSource ---

    def connect(self, callback: EntryCallback) -> None:
        self._callback = callback

    def disconnect(self) -> None:
        self._callback = None

    @property
    def connected(self) -> bool:
        return self._callback is not None

    # --- Ingestion ---

    def record_entry(self, entry: PerformanceEntry) -> None:
        """Store one performance entry and forward it to the subscriber."""
        entry_type = entry.get("entryType")
        if entry_type == "navigation":
            self._navigation = dict(entry)
        elif entry_type == "paint" and "name" in entry:
            self._paint[entry["name"]] = float(entry.get("startTime", 0.0))
        elif entry_type == MEMORY_ENTRY_TYPE:
            self.record_memory(
                float(entry.get("usedJSHeapSize", 0.0)),
                float(entry.get("totalJSHeapSize", 0.0)),
            )
            return

        if self._callback is not None:
            self._callback(entry)

    def record_entries(self, entries: Iterable[PerformanceEntry]) -> int:
        """Store a batch of entries. Returns how many were accepted."""
        count = 0
        for entry in entries:
            if not entry.get("entryType"):
                logger.debug("Skipping performance entry without entryType")
                continue
            self.record_entry(entry)
            count += 1
        return count

    def record_memory(self, used_heap: float, total_heap: float) -> None:
        self._memory = (used_heap, total_heap)

    def clear(self) -> None:
        self._navigation = None
        self._paint.clear()
        self._memory = None

    # --- RuntimeTimings ---

    def page_load_time(self) -> float | None:
        return self._navigation_delta("loadEventEnd")

    def dom_content_loaded_time(self) -> float | None:
        return self._navigation_delta("domContentLoadedEventEnd")

    def first_contentful_paint(self) -> float | None:
        return self._paint.get("first-contentful-paint")

    def memory_usage_ratio(self) -> float | None:
        if self._memory is None:
            return None
        used, total = self._memory
        if total <= 0:
            return None
        return used / total

    def _navigation_delta(self, end_field: str) -> float | None:
        if self._navigation is None:
            return None
        end = self._navigation.get(end_field)
        if not end:
            return None
        return float(end) - float(self._navigation.get("fetchStart", 0.0))
