"""Monitoring dashboard HTTP handlers (thin)."""

from datetime import datetime

import structlog
from fastapi import APIRouter, Request

from telemetry_core.domain.models import ErrorSeverity, ErrorSource, MetricCategory
from telemetry_core.handler.schemas import (
    ErrorExportResponse,
    PerformanceExportResponse,
    SessionExportResponse,
    SystemHealthResponse,
    VitalsIngestRequest,
    VitalsIngestResponse,
)

logger = structlog.get_logger()

router = APIRouter(prefix="/api/v1/monitoring")


@router.get("/performance", response_model=PerformanceExportResponse)
async def get_performance(
    request: Request,
    category: MetricCategory | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
):
    engine = request.app.state.engine
    return engine.performance.export_metrics(start=start, end=end, category=category)


@router.get("/errors", response_model=ErrorExportResponse)
async def get_errors(
    request: Request,
    source: ErrorSource | None = None,
    severity: ErrorSeverity | None = None,
    resolved: bool | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
):
    engine = request.app.state.engine
    return engine.errors.export_errors(
        start=start, end=end, source=source, severity=severity, resolved=resolved
    )


@router.get("/sessions", response_model=SessionExportResponse)
async def get_sessions(
    request: Request,
    user_id: str | None = None,
    bounced: bool | None = None,
    converted: bool | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
):
    engine = request.app.state.engine
    return engine.rum.export_session_data(
        start=start, end=end, user_id=user_id, bounced=bounced, converted=converted
    )


@router.get("/health", response_model=SystemHealthResponse)
async def get_health(request: Request):
    engine = request.app.state.engine
    return SystemHealthResponse.from_aggregator(engine.health)


@router.post("/vitals", response_model=VitalsIngestResponse)
async def ingest_vitals(request: Request, body: VitalsIngestRequest):
    engine = request.app.state.engine
    accepted = engine.timeline.record_entries(entry.to_entry() for entry in body.entries)
    logger.debug("Performance entries ingested", received=len(body.entries), accepted=accepted)
    return VitalsIngestResponse(accepted=accepted, vitals=engine.vitals.vitals.to_dict())
