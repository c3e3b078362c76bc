"""Remote API and data-layer health probes."""

from collections.abc import Awaitable, Callable

import httpx
import structlog

from telemetry_core.config import Settings
from telemetry_core.exceptions import ProbeError

logger = structlog.get_logger()

HEALTH_PATH = "/api/health"


class HttpApiHealthProbe:
    """Issues ``GET /api/health`` against the remote API.

    A missing endpoint (404 or connection refused) is treated as healthy.
    Timeouts raise ProbeError so the aggregator counts them as failures.
    """

    def __init__(self, client: httpx.AsyncClient, settings: Settings) -> None:
        self._client = client
        self._url = settings.api_base_url.rstrip("/") + HEALTH_PATH
        self._timeout = settings.health_check_timeout_seconds

    async def check(self) -> tuple[bool, int]:
        try:
            response = await self._client.get(self._url, timeout=self._timeout)
        except httpx.TimeoutException as e:
            raise ProbeError("api", f"health check timed out after {self._timeout}s") from e
        except httpx.ConnectError:
            logger.debug("API health endpoint unreachable, assuming healthy", url=self._url)
            return True, 200

        if response.status_code == 404:
            logger.debug("API health endpoint not found, assuming healthy", url=self._url)
            return True, 404
        return response.is_success, response.status_code


class CallableDataLayerProbe:
    """Wraps an async read (for example ``lambda: repo.list(limit=1)``) as a DataLayerProbe."""

    def __init__(self, read: Callable[[], Awaitable[object]]) -> None:
        self._read = read

    async def ping(self) -> None:
        await self._read()
