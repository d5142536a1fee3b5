from __future__ import annotations

from typing import Any

import psutil
from fastapi import APIRouter, Request
from fastapi.responses import ORJSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from mongo_slow.errors import ErrorCategory, ErrorSeverity, get_error_handler
from mongo_slow.health.models import HealthLevel
from mongo_slow.service import ExporterService
from mongo_slow.version import get_build_info


router = APIRouter()


def _service(request: Request) -> ExporterService:
    return request.app.state.service


@router.get("/metrics")
async def metrics(request: Request) -> Response:
    return Response(generate_latest(_service(request).registry), media_type=CONTENT_TYPE_LATEST)


@router.get("/health")
async def health(request: Request) -> ORJSONResponse:
    """Dependency health; 503 while any dependency is unhealthy or the checker has not started."""
    svc = _service(request)
    resp = svc.health.response()
    body: dict[str, Any] = resp.to_dict()
    body["version"] = get_build_info()
    body["started"] = svc.health.started_at
    body["last"] = svc.health.last_run_at
    body["stats"] = vars(svc.health.stats).copy()
    status = 200 if resp.level == HealthLevel.HEALTHY else 503
    return ORJSONResponse(body, status_code=status)


@router.get("/healthz")
async def healthz(request: Request) -> Response:
    """Ultra-light liveness check: 204 once the poller has completed a tick and has not failed."""
    poller = _service(request).poller
    if poller.failure is not None or poller.last_tick_at is None:
        return Response(status_code=503)
    return Response(status_code=204)


def _process_rss_mb() -> float | None:
    try:
        return round(psutil.Process().memory_info().rss / (1024 * 1024), 2)
    except psutil.Error as e:
        get_error_handler().handle_error(
            e,
            category=ErrorCategory.RESOURCE,
            severity=ErrorSeverity.LOW,
            component="web.dashboard.system",
            function_name="_process_rss_mb",
            message="Failed to read process memory",
            should_log=False,
        )
        return None


@router.get("/api/info")
async def api_info(request: Request) -> ORJSONResponse:
    """Runtime info and selected settings for diagnostics."""
    svc = _service(request)
    ts = svc.settings.tracker
    poller = svc.poller
    return ORJSONResponse(
        {
            **get_build_info(),
            "environment": svc.settings.server.environment,
            "poll_interval": poller.interval,
            "noise_floor_micros": ts.noise_floor_micros,
            "observe_floor_micros": ts.observe_floor_micros,
            "history_threshold_micros": ts.history_threshold_micros,
            "history_capacity": svc.tracker.history.capacity,
            "history_entries": len(svc.tracker.history),
            "excluded_namespaces": sorted(ts.excluded_namespaces),
            "running_operations": len(svc.tracker.view.records),
            "poller": {
                "alive": poller.is_alive(),
                "ticks": poller.ticks,
                "last_tick_at": poller.last_tick_at,
                "failure": str(poller.failure) if poller.failure is not None else None,
            },
            "errors": get_error_handler().snapshot(),
            "rss_mb": _process_rss_mb(),
        }
    )


@router.get("/api/version")
async def api_version() -> ORJSONResponse:
    return ORJSONResponse(get_build_info())
