"""Folds observed performance entries into a Core Web Vitals snapshot."""

import structlog

from telemetry_core.domain.sessions import CoreWebVitals, VitalsScore
from telemetry_core.evaluator.vitals_scorer import score_vitals
from telemetry_core.port.vitals_source_port import PerformanceEntry, VitalsSource

logger = structlog.get_logger(component="rum")


class VitalsCollector:
    """Subscribes to a VitalsSource and keeps the latest vitals."""

    def __init__(self, source: VitalsSource) -> None:
        self._source = source
        self._vitals = CoreWebVitals()
        self._connected = False

    @property
    def vitals(self) -> CoreWebVitals:
        return self._vitals.copy()

    @property
    def is_connected(self) -> bool:
        return self._connected

    def connect(self) -> None:
        if self._connected:
            return
        self._source.connect(self.handle_entry)
        self._connected = True
        logger.debug("Vitals collector connected")

    def disconnect(self) -> None:
        if not self._connected:
            return
        self._source.disconnect()
        self._connected = False
        logger.debug("Vitals collector disconnected")

    def handle_entry(self, entry: PerformanceEntry) -> None:
        entry_type = entry.get("entryType")
        start_time = float(entry.get("startTime", 0.0))

        if entry_type == "paint":
            if entry.get("name") == "first-contentful-paint":
                self._vitals.FCP = start_time
        elif entry_type == "largest-contentful-paint":
            # later candidates supersede earlier ones
            self._vitals.LCP = start_time
        elif entry_type == "first-input":
            self._vitals.FID = float(entry.get("processingStart", start_time)) - start_time
        elif entry_type == "layout-shift":
            if not entry.get("hadRecentInput"):
                self._vitals.CLS = (self._vitals.CLS or 0.0) + float(entry.get("value", 0.0))
        elif entry_type == "navigation":
            if "responseStart" in entry and "requestStart" in entry:
                self._vitals.TTFB = float(entry["responseStart"]) - float(entry["requestStart"])
        elif entry_type == "event":
            duration = float(entry.get("duration", 0.0))
            if self._vitals.INP is None or duration > self._vitals.INP:
                self._vitals.INP = duration

    def score(self) -> VitalsScore:
        return score_vitals(self._vitals)

    def reset(self) -> None:
        self._vitals = CoreWebVitals()
