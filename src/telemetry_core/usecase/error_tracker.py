"""Error capture, grouping and resolution tracking."""

import asyncio
import sys
import traceback
from collections.abc import Callable
from datetime import datetime, timedelta
from types import TracebackType
from typing import Any
from uuid import uuid4

import structlog

from telemetry_core.domain.error_records import (
    AlertCondition,
    AlertRule,
    ErrorGroup,
    ErrorRecord,
    ErrorStatistics,
    HourlyErrorCount,
)
from telemetry_core.domain.models import ErrorSeverity, ErrorSource
from telemetry_core.evaluator.error_grouping import (
    compute_error_statistics,
    group_errors,
    hourly_error_counts,
)
from telemetry_core.evaluator.fingerprint import generate_fingerprint
from telemetry_core.port.clock_port import Clock
from telemetry_core.usecase.alert_evaluator import AlertEvaluator

logger = structlog.get_logger(component="errors")

DEFAULT_MAX_ERRORS = 2000

ExceptHook = Callable[[type[BaseException], BaseException, TracebackType | None], Any]
LoopHandler = Callable[[asyncio.AbstractEventLoop, dict[str, Any]], Any]


class ErrorTracker:
    """Records errors into a bounded buffer and runs alert rules on each one.

    Groups and statistics are derived from the buffer on demand.
    """

    def __init__(
        self,
        clock: Clock,
        alert_evaluator: AlertEvaluator | None = None,
        max_errors: int = DEFAULT_MAX_ERRORS,
        default_url: str = "",
        default_user_agent: str = "",
    ) -> None:
        self._clock = clock
        self._alerts = alert_evaluator or AlertEvaluator(clock)
        self._max_errors = max_errors
        self._default_url = default_url
        self._default_user_agent = default_user_agent
        self._errors: list[ErrorRecord] = []
        self._tracking = True

        self._previous_excepthook: ExceptHook | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._previous_loop_handler: LoopHandler | None = None

    @property
    def errors(self) -> list[ErrorRecord]:
        return list(self._errors)

    @property
    def is_tracking(self) -> bool:
        return self._tracking

    @property
    def alert_rules(self) -> list[AlertRule]:
        return self._alerts.rules

    # --- Recording ---

    def record_error(
        self,
        message: str,
        *,
        stack: str | None = None,
        source: ErrorSource | str = ErrorSource.JAVASCRIPT,
        severity: ErrorSeverity | str = ErrorSeverity.MEDIUM,
        context: dict[str, Any] | None = None,
        tags: list[str] | None = None,
        user_id: str | None = None,
        url: str | None = None,
        user_agent: str | None = None,
    ) -> ErrorRecord | None:
        """Capture an error and evaluate alert rules before returning it."""
        if not self._tracking:
            return None

        source = ErrorSource(source)
        severity = ErrorSeverity(severity)
        error = ErrorRecord(
            id=f"error_{uuid4().hex}",
            message=message,
            source=source,
            severity=severity,
            timestamp=self._clock.now(),
            fingerprint=generate_fingerprint(message, stack, source.value),
            stack=stack,
            url=url if url is not None else self._default_url,
            user_agent=user_agent if user_agent is not None else self._default_user_agent,
            user_id=user_id,
            context=context,
            tags=list(tags or []),
        )

        self._errors.append(error)
        overflow = len(self._errors) - self._max_errors
        if overflow > 0:
            del self._errors[:overflow]

        logger.debug(
            "Error recorded",
            error_id=error.id,
            source=source.value,
            severity=severity.value,
            fingerprint=error.fingerprint,
        )

        self._alerts.evaluate(error, self._errors)
        return error

    def record_api_error(
        self,
        message: str,
        status_code: int | None = None,
        endpoint: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> ErrorRecord | None:
        severity = (
            ErrorSeverity.HIGH
            if status_code is not None and status_code >= 500
            else ErrorSeverity.MEDIUM
        )
        return self.record_error(
            message,
            source=ErrorSource.API,
            severity=severity,
            context={**(context or {}), "status_code": status_code, "endpoint": endpoint},
            tags=["api", "http"],
        )

    def record_database_error(
        self,
        message: str,
        query: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> ErrorRecord | None:
        return self.record_error(
            message,
            source=ErrorSource.DATABASE,
            severity=ErrorSeverity.HIGH,
            context={**(context or {}), "query": query},
            tags=["database", "sql"],
        )

    def record_user_action_error(
        self,
        action: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> ErrorRecord | None:
        return self.record_error(
            f"User action failed: {action} - {message}",
            source=ErrorSource.USER_ACTION,
            severity=ErrorSeverity.MEDIUM,
            context={**(context or {}), "action": action},
            tags=["user_action", action],
        )

    def record_javascript_error(
        self,
        error: BaseException,
        context: dict[str, Any] | None = None,
    ) -> ErrorRecord | None:
        """Record an unhandled exception with its formatted traceback as the stack."""
        stack = "".join(traceback.format_exception(type(error), error, error.__traceback__))
        return self.record_error(
            str(error) or type(error).__name__,
            stack=stack,
            source=ErrorSource.JAVASCRIPT,
            severity=ErrorSeverity.HIGH,
            context={**(context or {}), "exception_type": type(error).__name__},
            tags=["javascript", "unhandled"],
        )

    # --- Resolution and tagging ---

    def resolve_error(self, error_id: str, resolved_by: str | None = None) -> bool:
        error = self._find(error_id)
        if error is None:
            return False
        self._resolve(error, resolved_by, self._clock.now())
        logger.info("Error resolved", error_id=error_id, resolved_by=resolved_by)
        return True

    def resolve_error_group(self, fingerprint: str, resolved_by: str | None = None) -> int:
        """Resolve every error with the fingerprint. Returns how many changed."""
        now = self._clock.now()
        count = 0
        for error in self._errors:
            if error.fingerprint == fingerprint and not error.resolved:
                self._resolve(error, resolved_by, now)
                count += 1
        if count:
            logger.info(
                "Error group resolved",
                fingerprint=fingerprint,
                resolved_count=count,
                resolved_by=resolved_by,
            )
        return count

    def add_tag(self, error_id: str, tag: str) -> bool:
        error = self._find(error_id)
        if error is None:
            return False
        if tag not in error.tags:
            error.tags.append(tag)
        return True

    def remove_tag(self, error_id: str, tag: str) -> bool:
        error = self._find(error_id)
        if error is None or tag not in error.tags:
            return False
        error.tags.remove(tag)
        return True

    # --- Alert rules ---

    def add_alert_rule(
        self,
        name: str,
        condition: AlertCondition,
        enabled: bool = True,
        cooldown_period: float = 15.0,
        webhook_url: str | None = None,
        email_recipients: list[str] | None = None,
    ) -> AlertRule:
        return self._alerts.add_rule(
            name,
            condition,
            enabled=enabled,
            cooldown_period=cooldown_period,
            webhook_url=webhook_url,
            email_recipients=email_recipients,
        )

    def remove_alert_rule(self, rule_id: str) -> bool:
        return self._alerts.remove_rule(rule_id)

    # --- Derived views ---

    def error_groups(self) -> list[ErrorGroup]:
        return group_errors(self._errors)

    def statistics(self) -> ErrorStatistics:
        return compute_error_statistics(self._errors, self._clock.now())

    def recent_errors(self, window: timedelta = timedelta(hours=1)) -> list[ErrorRecord]:
        cutoff = self._clock.now() - window
        return [e for e in self._errors if e.timestamp > cutoff]

    def critical_errors(self) -> list[ErrorRecord]:
        return [
            e for e in self._errors if e.severity == ErrorSeverity.CRITICAL and not e.resolved
        ]

    def unresolved_errors(self) -> list[ErrorRecord]:
        return [e for e in self._errors if not e.resolved]

    def get_error_trend(self, hours: int = 24) -> list[HourlyErrorCount]:
        return hourly_error_counts(self._errors, self._clock.now(), hours)

    def export_errors(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
        source: ErrorSource | str | None = None,
        severity: ErrorSeverity | str | None = None,
        resolved: bool | None = None,
    ) -> dict[str, Any]:
        """JSON-serializable snapshot of matching errors, groups and statistics."""
        wanted_source = ErrorSource(source) if source is not None else None
        wanted_severity = ErrorSeverity(severity) if severity is not None else None
        selected = [
            e
            for e in self._errors
            if (start is None or e.timestamp >= start)
            and (end is None or e.timestamp <= end)
            and (wanted_source is None or e.source == wanted_source)
            and (wanted_severity is None or e.severity == wanted_severity)
            and (resolved is None or e.resolved == resolved)
        ]
        now = self._clock.now()

        return {
            "errors": [e.to_dict() for e in selected],
            "groups": [g.to_dict() for g in group_errors(selected)],
            "statistics": compute_error_statistics(selected, now).to_dict(),
            "exported_at": now.isoformat(),
            "filters": {
                "start": start.isoformat() if start else None,
                "end": end.isoformat() if end else None,
                "source": wanted_source.value if wanted_source else None,
                "severity": wanted_severity.value if wanted_severity else None,
                "resolved": resolved,
            },
        }

    # --- Lifecycle ---

    def start_tracking(self) -> None:
        self._tracking = True

    def stop_tracking(self) -> None:
        self._tracking = False

    def clear_errors(self) -> None:
        self._errors.clear()

    def install_global_handlers(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        """Capture uncaught exceptions from sys.excepthook and, if given, an event loop.

        Existing handlers stay chained and are restored by uninstall_global_handlers.
        """
        if self._previous_excepthook is None:
            self._previous_excepthook = sys.excepthook
            sys.excepthook = self._handle_uncaught

        if loop is not None and self._loop is None:
            self._loop = loop
            self._previous_loop_handler = loop.get_exception_handler()
            loop.set_exception_handler(self._handle_loop_exception)

        logger.info("Global error handlers installed", event_loop=loop is not None)

    def uninstall_global_handlers(self) -> None:
        if self._previous_excepthook is not None:
            sys.excepthook = self._previous_excepthook
            self._previous_excepthook = None

        if self._loop is not None:
            self._loop.set_exception_handler(self._previous_loop_handler)
            self._loop = None
            self._previous_loop_handler = None

    def _handle_uncaught(
        self,
        exc_type: type[BaseException],
        exc: BaseException,
        tb: TracebackType | None,
    ) -> None:
        if not issubclass(exc_type, KeyboardInterrupt):
            self.record_javascript_error(exc.with_traceback(tb), {"type": "uncaught_exception"})
        previous = self._previous_excepthook or sys.__excepthook__
        previous(exc_type, exc, tb)

    def _handle_loop_exception(
        self, loop: asyncio.AbstractEventLoop, context: dict[str, Any]
    ) -> None:
        exc = context.get("exception")
        if exc is None:
            exc = RuntimeError(context.get("message", "Unhandled event loop error"))
        self.record_javascript_error(exc, {"type": "unhandled_task_exception"})

        if self._previous_loop_handler is not None:
            self._previous_loop_handler(loop, context)
        else:
            loop.default_exception_handler(context)

    def _find(self, error_id: str) -> ErrorRecord | None:
        for error in self._errors:
            if error.id == error_id:
                return error
        return None

    @staticmethod
    def _resolve(error: ErrorRecord, resolved_by: str | None, now: datetime) -> None:
        error.resolved = True
        error.resolved_at = now
        error.resolved_by = resolved_by
