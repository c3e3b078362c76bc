"""Rule-based alerting over the error stream."""

from collections.abc import Sequence
from datetime import datetime, timedelta
from uuid import uuid4

import structlog

from telemetry_core.domain.error_records import AlertCondition, AlertRule, ErrorRecord
from telemetry_core.domain.models import AlertConditionType
from telemetry_core.exceptions import ConfigurationError
from telemetry_core.gateway.notifier_gateway import LoggingNotifier
from telemetry_core.port.clock_port import Clock
from telemetry_core.port.notifier_port import Notifier

logger = structlog.get_logger(component="errors")

WINDOWED_CONDITIONS = (AlertConditionType.ERROR_RATE, AlertConditionType.ERROR_COUNT)


class AlertEvaluator:
    """Evaluates alert rules synchronously for each new error.

    A rule fires at most once per cooldown period. Notification failures are
    logged and never interrupt evaluation of the remaining rules.
    """

    def __init__(self, clock: Clock, notifier: Notifier | None = None) -> None:
        self._clock = clock
        self._notifier = notifier or LoggingNotifier()
        self._rules: list[AlertRule] = []

    @property
    def rules(self) -> list[AlertRule]:
        return list(self._rules)

    def add_rule(
        self,
        name: str,
        condition: AlertCondition,
        enabled: bool = True,
        cooldown_period: float = 15.0,
        webhook_url: str | None = None,
        email_recipients: list[str] | None = None,
    ) -> AlertRule:
        """Register a rule and return it with a generated id."""
        if condition.type in WINDOWED_CONDITIONS and condition.time_window <= 0:
            raise ConfigurationError(
                f"Alert rule '{name}': time_window must be positive for {condition.type.value}"
            )
        if condition.type == AlertConditionType.SEVERITY and condition.severity is None:
            raise ConfigurationError(f"Alert rule '{name}': severity condition needs a severity")
        if cooldown_period < 0:
            raise ConfigurationError(f"Alert rule '{name}': cooldown_period must not be negative")

        rule = AlertRule(
            id=f"rule_{uuid4().hex[:12]}",
            name=name,
            condition=condition,
            enabled=enabled,
            cooldown_period=cooldown_period,
            webhook_url=webhook_url,
            email_recipients=list(email_recipients or []),
        )
        self._rules.append(rule)
        logger.info("Alert rule added", rule_id=rule.id, rule_name=name, condition=condition.type.value)
        return rule

    def remove_rule(self, rule_id: str) -> bool:
        for index, rule in enumerate(self._rules):
            if rule.id == rule_id:
                del self._rules[index]
                logger.info("Alert rule removed", rule_id=rule_id)
                return True
        return False

    def clear_rules(self) -> None:
        self._rules.clear()

    def evaluate(self, error: ErrorRecord, errors: Sequence[ErrorRecord]) -> list[AlertRule]:
        """Check every enabled rule against a new error.

        ``errors`` is the live buffer, already containing ``error``.
        Returns the rules that fired.
        """
        now = self._clock.now()
        fired: list[AlertRule] = []

        for rule in self._rules:
            if not rule.enabled:
                continue
            if not self._condition_met(rule.condition, error, errors, now):
                continue
            if self._in_cooldown(rule, now):
                logger.debug("Alert suppressed by cooldown", rule_id=rule.id)
                continue

            rule.last_triggered = now
            fired.append(rule)
            self._dispatch(rule, error)

        return fired

    @staticmethod
    def _condition_met(
        condition: AlertCondition,
        error: ErrorRecord,
        errors: Sequence[ErrorRecord],
        now: datetime,
    ) -> bool:
        if condition.source is not None and error.source != condition.source:
            return False

        if condition.type == AlertConditionType.NEW_ERROR:
            return True
        if condition.type == AlertConditionType.SEVERITY:
            return condition.severity == error.severity

        window_start = now - timedelta(minutes=condition.time_window)
        in_window = sum(
            1
            for e in errors
            if e.timestamp > window_start
            and (condition.source is None or e.source == condition.source)
        )

        if condition.type == AlertConditionType.ERROR_RATE:
            # raw count per window minute, not normalized against traffic
            return in_window / condition.time_window > condition.threshold
        if condition.type == AlertConditionType.ERROR_COUNT:
            return in_window > condition.threshold
        return False

    @staticmethod
    def _in_cooldown(rule: AlertRule, now: datetime) -> bool:
        if rule.last_triggered is None:
            return False
        return now < rule.last_triggered + timedelta(minutes=rule.cooldown_period)

    def _dispatch(self, rule: AlertRule, error: ErrorRecord) -> None:
        log = logger.bind(rule_id=rule.id, rule_name=rule.name, error_id=error.id)
        log.warning(
            "Alert triggered",
            severity=error.severity.value,
            source=error.source.value,
            fingerprint=error.fingerprint,
        )
        try:
            self._notifier.notify(rule, error)
        except Exception as e:
            log.error("Alert delivery failed", error=str(e))
