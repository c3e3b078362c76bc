"""Runtime timings port: client page timing and memory signals."""

from typing import Protocol


class RuntimeTimings(Protocol):
    """Protocol for client runtime measurements used by health probes.

    Every method returns None when the measurement is unavailable.
    """

    def page_load_time(self) -> float | None: ...

    def dom_content_loaded_time(self) -> float | None: ...

    def first_contentful_paint(self) -> float | None: ...

    def memory_usage_ratio(self) -> float | None: ...
