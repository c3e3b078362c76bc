"""Tests for domain models."""

import dataclasses

import pytest

from telemetry_core.domain.error_records import AlertCondition, AlertRule, ErrorRecord
from telemetry_core.domain.health import ComponentHealth, SystemHealthStatus
from telemetry_core.domain.models import (
    AlertConditionType,
    ErrorSeverity,
    ErrorSource,
    HealthStatus,
    MetricCategory,
    VitalRating,
)
from telemetry_core.domain.performance import Metric
from telemetry_core.domain.sessions import CoreWebVitals, DeviceInfo, PageView, UserSession
from tests.fakes import START


class TestEnums:
    def test_severity_rank_order(self):
        ranks = [s.rank for s in (ErrorSeverity.LOW, ErrorSeverity.MEDIUM, ErrorSeverity.HIGH, ErrorSeverity.CRITICAL)]

        assert ranks == sorted(ranks)
        assert len(set(ranks)) == 4

    def test_values_match_wire_format(self):
        assert VitalRating.NEEDS_IMPROVEMENT.value == "needs-improvement"
        assert MetricCategory("database_query") == MetricCategory.DATABASE_QUERY
        assert ErrorSource("user_action") == ErrorSource.USER_ACTION


class TestMetric:
    def test_is_immutable(self):
        metric = Metric(
            id="m1", name="x", category=MetricCategory.API_CALL, duration=1.0, timestamp=START
        )

        with pytest.raises(dataclasses.FrozenInstanceError):
            metric.duration = 2.0

    def test_to_dict(self):
        metric = Metric(
            id="m1",
            name="list",
            category=MetricCategory.API_CALL,
            duration=12.34567,
            timestamp=START,
            metadata={"status": 200},
        )

        assert metric.to_dict() == {
            "id": "m1",
            "name": "list",
            "category": "api_call",
            "duration": 12.346,
            "timestamp": "2025-01-01T12:00:00+00:00",
            "success": True,
            "metadata": {"status": 200},
        }


class TestErrorModels:
    def test_error_record_to_dict(self):
        record = ErrorRecord(
            id="e1",
            message="boom",
            source=ErrorSource.API,
            severity=ErrorSeverity.HIGH,
            timestamp=START,
            fingerprint="fp",
            tags=["api"],
        )

        data = record.to_dict()

        assert data["source"] == "api"
        assert data["severity"] == "high"
        assert data["resolved_at"] is None
        assert data["tags"] == ["api"]

    def test_alert_condition_coerces_strings(self):
        condition = AlertCondition(type="severity", severity="critical", source="api")

        assert condition.type is AlertConditionType.SEVERITY
        assert condition.severity is ErrorSeverity.CRITICAL
        assert condition.source is ErrorSource.API

    def test_alert_condition_rejects_unknown_type(self):
        with pytest.raises(ValueError):
            AlertCondition(type="sometimes")

    def test_alert_rule_to_dict(self):
        rule = AlertRule(
            id="r1",
            name="rate",
            condition=AlertCondition(
                type=AlertConditionType.ERROR_RATE, threshold=2, source=ErrorSource.DATABASE
            ),
        )

        data = rule.to_dict()

        assert data["condition"] == {
            "type": "error_rate",
            "threshold": 2,
            "time_window": 5.0,
            "severity": None,
            "source": "database",
        }
        assert data["cooldown_period"] == 15.0
        assert data["last_triggered"] is None


class TestSessionModels:
    def test_vitals_copy_is_independent(self):
        vitals = CoreWebVitals(FCP=100)
        copy = vitals.copy()
        copy.FCP = 200

        assert vitals.FCP == 100

    def test_session_to_dict(self):
        session = UserSession(
            session_id="s1",
            start_time=START,
            device_info=DeviceInfo(viewport_width=1280, viewport_height=720),
            vitals=CoreWebVitals(),
            page_views=[PageView(id="p1", url="/", title="Home", timestamp=START)],
        )

        data = session.to_dict()

        assert data["end_time"] is None
        assert data["device_info"]["viewport"] == {"width": 1280, "height": 720}
        assert data["page_views"][0]["exit_page"] is True


class TestHealthModels:
    def test_system_health_to_dict(self):
        component = ComponentHealth(
            status=HealthStatus.DEGRADED,
            response_time=1234.5678,
            error_rate=0.02,
            last_checked=START,
            message="slow",
        )
        status = SystemHealthStatus(
            overall=HealthStatus.DEGRADED,
            score=65.0,
            components={"api": component},
            last_checked=START,
            uptime=12.5,
            checks_performed=3,
        )

        data = status.to_dict()

        assert data["overall"] == "degraded"
        assert data["components"]["api"]["response_time"] == 1234.568
        assert data["checks_performed"] == 3
