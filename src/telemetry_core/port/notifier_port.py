"""Notifier port: outbound alert delivery."""

from typing import Protocol

from telemetry_core.domain.error_records import AlertRule, ErrorRecord


class Notifier(Protocol):
    """Protocol for delivering a fired alert.

    Called synchronously from error recording, so implementations must not
    block on I/O; network delivery belongs in a background task.
    Implementations may raise NotificationError; the caller logs and moves on.
    """

    def notify(self, rule: AlertRule, error: ErrorRecord) -> None: ...
