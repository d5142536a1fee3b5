from __future__ import annotations

import datetime as _dt

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, ORJSONResponse

from mongo_slow.service import ExporterService
from ..core.render import records_payload, table_rows, templates


router = APIRouter()


def _service(request: Request) -> ExporterService:
    return request.app.state.service


def _updated_at(ts: float | None) -> str | None:
    if ts is None:
        return None
    return _dt.datetime.fromtimestamp(ts, _dt.timezone.utc).replace(microsecond=0).isoformat().replace('+00:00', 'Z')


@router.get("/queries")
async def running_queries(request: Request) -> ORJSONResponse:
    """Operations currently tracked as running."""
    svc = _service(request)
    payload = records_payload(svc.tracker.view.records, include_raw=svc.settings.server.include_raw)
    return ORJSONResponse(payload)


@router.get("/queries/table", response_class=HTMLResponse)
async def running_queries_table(request: Request) -> HTMLResponse:
    view = _service(request).tracker.view
    return templates.TemplateResponse(
        request,
        "queries.html",
        {"title": "Running queries", "rows": table_rows(view.records), "updated_at": _updated_at(view.updated_at)},
    )


@router.get("/history")
async def history_queries(request: Request) -> ORJSONResponse:
    """Completed slow operations, oldest first."""
    svc = _service(request)
    payload = records_payload(svc.tracker.history.snapshot(), include_raw=svc.settings.server.include_raw)
    return ORJSONResponse(payload)


@router.get("/history/table", response_class=HTMLResponse)
async def history_queries_table(request: Request) -> HTMLResponse:
    history = _service(request).tracker.history.snapshot()
    return templates.TemplateResponse(
        request,
        "queries.html",
        {"title": "Slow query history", "rows": table_rows(history), "updated_at": None},
    )
