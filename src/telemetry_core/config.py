"""Configuration settings for the telemetry engine."""

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from telemetry_core.domain.models import MetricCategory


class CategoryThreshold(BaseModel):
    """Response time bounds for one metric category (ms)."""

    acceptable: float
    tolerable: float


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TELEMETRY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Buffers
    max_metrics: int = Field(default=1000, ge=1, description="Metric buffer capacity")
    max_errors: int = Field(default=2000, ge=1, description="Error buffer capacity")
    max_sessions: int = Field(default=500, ge=1, description="Completed session history capacity")
    max_health_history: int = Field(default=100, ge=1, description="Health check history capacity")
    health_error_retention_hours: int = Field(
        default=24, ge=1, description="How long probe failures stay in the health error log"
    )

    # Health checks
    api_base_url: str = Field(
        default="http://localhost:8080",
        description="Base URL of the remote API probed at /api/health",
    )
    health_check_interval_seconds: float = Field(default=30.0, gt=0)
    health_check_timeout_seconds: float = Field(default=5.0, gt=0)
    enable_health_monitoring: bool = Field(
        default=True, description="Allow the periodic health check job to be scheduled"
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Dashboard API bind host")
    port: int = Field(default=8090, description="Dashboard API port")
    cors_allowed_origins: list[str] = Field(
        default=["http://localhost:3000"],
        description="Origins allowed to post performance beacons",
    )

    # Alert delivery
    webhook_timeout_seconds: float = Field(default=5.0, gt=0)

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Log format (json or console)")


class PerformanceThresholds(BaseSettings):
    """Per-category response time thresholds and success rate bounds."""

    model_config = SettingsConfigDict(env_prefix="PERF_")

    api_call_acceptable: float = Field(default=500)
    api_call_tolerable: float = Field(default=2000)
    user_interaction_acceptable: float = Field(default=100)
    user_interaction_tolerable: float = Field(default=300)
    page_load_acceptable: float = Field(default=2000)
    page_load_tolerable: float = Field(default=5000)
    database_query_acceptable: float = Field(default=200)
    database_query_tolerable: float = Field(default=1000)

    # Success rate: below error bound is an error, below warn bound a warning
    success_rate_error: float = Field(default=0.95)
    success_rate_warn: float = Field(default=0.98)

    def get_threshold(self, category: MetricCategory | str) -> CategoryThreshold:
        """Get response time bounds for a metric category."""
        name = MetricCategory(category).value
        return CategoryThreshold(
            acceptable=getattr(self, f"{name}_acceptable"),
            tolerable=getattr(self, f"{name}_tolerable"),
        )


class HealthThresholds(BaseSettings):
    """Component health classification bounds.

    Values above the healthy bound degrade a component, values above the
    degraded bound make it critical.
    """

    model_config = SettingsConfigDict(env_prefix="HEALTH_")

    response_time_healthy_ms: float = Field(default=1000)
    response_time_degraded_ms: float = Field(default=3000)
    error_rate_healthy: float = Field(default=0.01)
    error_rate_degraded: float = Field(default=0.05)
