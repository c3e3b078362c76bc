"""Tests for AlertEvaluator."""

import pytest

from telemetry_core.domain.error_records import AlertCondition
from telemetry_core.domain.models import AlertConditionType, ErrorSeverity, ErrorSource
from telemetry_core.exceptions import ConfigurationError
from telemetry_core.usecase.alert_evaluator import AlertEvaluator
from telemetry_core.usecase.error_tracker import ErrorTracker
from tests.fakes import RecordingNotifier


class TestRuleManagement:
    def test_add_rule_generates_id(self, alert_evaluator):
        rule = alert_evaluator.add_rule(
            "any error", AlertCondition(type=AlertConditionType.NEW_ERROR)
        )

        assert rule.id.startswith("rule_")
        assert alert_evaluator.rules == [rule]

    def test_remove_rule(self, alert_evaluator):
        rule = alert_evaluator.add_rule("x", AlertCondition(type=AlertConditionType.NEW_ERROR))

        assert alert_evaluator.remove_rule(rule.id) is True
        assert alert_evaluator.remove_rule(rule.id) is False
        assert alert_evaluator.rules == []

    def test_rejects_non_positive_window(self, alert_evaluator):
        with pytest.raises(ConfigurationError):
            alert_evaluator.add_rule(
                "rate", AlertCondition(type=AlertConditionType.ERROR_RATE, time_window=0)
            )

    def test_rejects_severity_rule_without_severity(self, alert_evaluator):
        with pytest.raises(ConfigurationError):
            alert_evaluator.add_rule("sev", AlertCondition(type=AlertConditionType.SEVERITY))

    def test_string_condition_fires_like_enum(self, tracker, notifier):
        tracker.add_alert_rule(
            "api errors", AlertCondition(type="error_count", threshold=0, source="api")
        )

        tracker.record_api_error("Bad gateway", status_code=502)

        assert len(notifier.calls) == 1


class TestConditions:
    def test_new_error_always_fires(self, tracker, notifier):
        tracker.add_alert_rule("any", AlertCondition(type=AlertConditionType.NEW_ERROR))

        tracker.record_error("boom")

        assert len(notifier.calls) == 1

    def test_severity_must_match(self, tracker, notifier):
        tracker.add_alert_rule(
            "critical only",
            AlertCondition(type=AlertConditionType.SEVERITY, severity=ErrorSeverity.CRITICAL),
        )

        tracker.record_error("minor", severity=ErrorSeverity.HIGH)
        tracker.record_error("major", severity=ErrorSeverity.CRITICAL)

        assert [error.message for _, error in notifier.calls] == ["major"]

    def test_error_count_above_threshold(self, tracker, notifier):
        tracker.add_alert_rule(
            "burst",
            AlertCondition(type=AlertConditionType.ERROR_COUNT, threshold=2, time_window=5),
            cooldown_period=0,
        )

        tracker.record_error("e1")
        tracker.record_error("e2")
        assert notifier.calls == []

        tracker.record_error("e3")
        assert len(notifier.calls) == 1

    def test_error_rate_is_count_per_window_minute(self, tracker, notifier, clock):
        tracker.add_alert_rule(
            "rate",
            AlertCondition(type=AlertConditionType.ERROR_RATE, threshold=0.5, time_window=4),
        )

        tracker.record_error("e1")
        tracker.record_error("e2")
        assert notifier.calls == []  # 2 / 4 = 0.5, not above

        tracker.record_error("e3")
        assert len(notifier.calls) == 1

    def test_window_excludes_errors_at_boundary(self, tracker, notifier, clock):
        tracker.add_alert_rule(
            "count",
            AlertCondition(type=AlertConditionType.ERROR_COUNT, threshold=1, time_window=5),
        )

        tracker.record_error("old")
        clock.advance(minutes=5)
        tracker.record_error("new")

        assert notifier.calls == []

    def test_source_filter(self, tracker, notifier):
        tracker.add_alert_rule(
            "db burst",
            AlertCondition(
                type=AlertConditionType.ERROR_COUNT,
                threshold=1,
                time_window=5,
                source=ErrorSource.DATABASE,
            ),
        )

        tracker.record_error("api 1", source=ErrorSource.API)
        tracker.record_error("api 2", source=ErrorSource.API)
        tracker.record_database_error("db 1")
        assert notifier.calls == []

        tracker.record_database_error("db 2")
        assert len(notifier.calls) == 1

    def test_disabled_rule_never_fires(self, tracker, notifier):
        tracker.add_alert_rule(
            "off", AlertCondition(type=AlertConditionType.NEW_ERROR), enabled=False
        )

        tracker.record_error("boom")

        assert notifier.calls == []


class TestCooldown:
    def test_rule_fires_once_per_cooldown(self, tracker, notifier, clock):
        rule = tracker.add_alert_rule(
            "any", AlertCondition(type=AlertConditionType.NEW_ERROR), cooldown_period=10
        )

        tracker.record_error("t0")
        clock.advance(minutes=9, seconds=59)
        tracker.record_error("t9")
        assert len(notifier.calls) == 1

        clock.advance(seconds=1)
        tracker.record_error("t10")
        assert len(notifier.calls) == 2
        assert rule.last_triggered == clock.now()


class TestNotifierFailure:
    def test_failure_does_not_block_other_rules(self, clock):
        notifier = RecordingNotifier(fail=True)
        tracker = ErrorTracker(clock, AlertEvaluator(clock, notifier))
        first = tracker.add_alert_rule("a", AlertCondition(type=AlertConditionType.NEW_ERROR))
        second = tracker.add_alert_rule("b", AlertCondition(type=AlertConditionType.NEW_ERROR))

        error = tracker.record_error("boom")

        assert error is not None
        assert [rule for rule, _ in notifier.calls] == [first, second]
        assert first.last_triggered == clock.now()
