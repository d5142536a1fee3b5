from __future__ import annotations

import logging
import time
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse, ORJSONResponse, RedirectResponse
from starlette.exceptions import HTTPException

from mongo_slow.errors import ErrorCategory, ErrorSeverity, get_error_handler
from mongo_slow.service import ExporterService
from mongo_slow.version import get_version
from .routes.queries import router as queries_router
from .routes.system import router as system_router

_logger = logging.getLogger("mongo_slow.webapi")


def create_app(service: ExporterService, manage_service: bool = True) -> FastAPI:
    """Build the HTTP app around ``service``.

    With ``manage_service`` the app's lifespan starts the poller and health
    checker on startup and stops them on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if manage_service:
            service.start()
        yield
        if manage_service:
            try:
                service.stop()
            except Exception as e:
                get_error_handler().handle_error(
                    e,
                    category=ErrorCategory.RESOURCE,
                    severity=ErrorSeverity.LOW,
                    component="web.dashboard.app",
                    function_name="lifespan_stop",
                    message="Failed to stop exporter service",
                )

    app = FastAPI(
        title="Mongo Slow Queries",
        version=get_version(),
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
    )
    app.state.service = service
    app.add_middleware(GZipMiddleware, minimum_size=service.settings.server.gzip_min_size)
    app.include_router(queries_router)
    app.include_router(system_router)

    @app.get("/", include_in_schema=False)
    async def index() -> RedirectResponse:
        return RedirectResponse("/queries/table", status_code=308)

    # --------------------------- Correlation ID & Access Log Middleware ---------------------------
    @app.middleware("http")
    async def _access_log_middleware(request: Request, call_next):
        cid = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        request.state.correlation_id = cid
        start = time.perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = getattr(response, "status_code", 200)
        except Exception:
            _logger.exception(
                "request_error",
                extra={
                    "cid": cid,
                    "path": str(request.url.path),
                    "method": request.method,
                    "client_ip": request.client.host if request.client else None,
                    "user_agent": request.headers.get("user-agent"),
                },
            )
            raise
        finally:
            dur_ms = (time.perf_counter() - start) * 1000.0
            _logger.info(
                "request",
                extra={
                    "cid": cid,
                    "path": str(request.url.path),
                    "method": request.method,
                    "status": status,
                    "dur_ms": round(dur_ms, 2),
                    "client_ip": request.client.host if request.client else None,
                    "user_agent": request.headers.get("user-agent"),
                },
            )
        response.headers["X-Request-ID"] = cid
        return response

    # --------------------------- Global Exception Handlers ---------------------------
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        # Only route 5xx to central handler to avoid noise for expected 4xx
        if exc.status_code >= 500:
            get_error_handler().handle_error(
                exc,
                category=ErrorCategory.RESOURCE,
                severity=ErrorSeverity.MEDIUM,
                component="web.dashboard.app",
                function_name=str(request.url.path),
                message=f"HTTPException {exc.status_code}",
            )
        return JSONResponse({"error": str(exc.detail), "status_code": exc.status_code}, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        get_error_handler().handle_error(
            exc,
            category=ErrorCategory.DATA_VALIDATION,
            severity=ErrorSeverity.LOW,
            component="web.dashboard.app",
            function_name=str(request.url.path),
            message="Request validation failed",
            should_log=False,
        )
        return JSONResponse({"error": "validation_failed", "detail": exc.errors()}, status_code=422)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        get_error_handler().handle_error(
            exc,
            category=ErrorCategory.UNKNOWN,
            severity=ErrorSeverity.HIGH,
            component="web.dashboard.app",
            function_name=str(request.url.path),
            message="Unhandled server error",
        )
        return JSONResponse({"error": "internal_error"}, status_code=500)

    return app


__all__ = ["create_app"]
