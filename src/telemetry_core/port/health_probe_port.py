"""Health probe ports: data layer and remote API checks."""

from typing import Protocol


class DataLayerProbe(Protocol):
    """Protocol for a lightweight data-layer read.

    Raises on failure; the elapsed time is measured by the caller.
    """

    async def ping(self) -> None: ...


class ApiHealthProbe(Protocol):
    """Protocol for the remote API health endpoint check.

    Returns ``(ok, status_code)``; raises ProbeError when the check itself
    fails (timeouts included).
    """

    async def check(self) -> tuple[bool, int]: ...
