"""Alert notifiers: implement Notifier."""

import asyncio
from typing import Any

import httpx
import structlog

from telemetry_core.domain.error_records import AlertRule, ErrorRecord
from telemetry_core.exceptions import NotificationError

logger = structlog.get_logger()


class LoggingNotifier:
    """Logs alert deliveries instead of dispatching them.

    Default notifier: real webhook/email dispatch is an external concern.
    """

    def notify(self, rule: AlertRule, error: ErrorRecord) -> None:
        log = logger.bind(rule_id=rule.id, rule_name=rule.name, error_id=error.id)
        if rule.webhook_url:
            log.info("Would send webhook", webhook_url=rule.webhook_url)
        if rule.email_recipients:
            log.info("Would send emails", recipients=", ".join(rule.email_recipients))


class WebhookNotifier:
    """Posts fired alerts to the rule's webhook URL without blocking the caller.

    ``notify`` schedules the POST on the running event loop and returns
    immediately. Email recipients are logged only. Delivery is attempted
    once; failures are logged from the task's done callback. Outside a
    running loop there is nothing to schedule on, so NotificationError is
    raised for the evaluator to log.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client
        self._pending: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._pending)

    def notify(self, rule: AlertRule, error: ErrorRecord) -> None:
        if rule.email_recipients:
            logger.info(
                "Email delivery not configured",
                rule_id=rule.id,
                recipients=", ".join(rule.email_recipients),
            )
        if not rule.webhook_url:
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as e:
            raise NotificationError(
                "webhook", f"{rule.webhook_url}: no running event loop"
            ) from e

        payload = {
            "alert": rule.name,
            "rule": rule.to_dict(),
            "error": error.to_dict(),
        }
        task = loop.create_task(self._deliver(rule.id, rule.webhook_url, payload))
        self._pending.add(task)
        task.add_done_callback(self._on_delivered)

    async def _deliver(self, rule_id: str, url: str, payload: dict[str, Any]) -> None:
        try:
            response = await self._client.post(url, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise NotificationError("webhook", f"{url} returned {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise NotificationError("webhook", f"{url}: {e}") from e

        logger.info("Webhook delivered", rule_id=rule_id, webhook_url=url)

    def _on_delivered(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            logger.warning("Webhook delivery cancelled")
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Webhook delivery failed", error=str(exc))

    async def drain(self) -> None:
        """Wait for in-flight deliveries. Failures are already logged."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
