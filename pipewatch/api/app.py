"""FastAPI application factory for Pipewatch.

Usage::

    from pipewatch.api.app import create_app

    app = create_app(dashboard=dashboard, config=config, persister=persister)

The factory is used by both the production bootstrap (``pipewatch.app``)
and unit tests.
"""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from pipewatch.api.routes import InvalidFilterError, router
from pipewatch.api.schemas import ErrorResponse
from pipewatch.dashboard import Dashboard

_log = structlog.get_logger(component="api.app")

_API_PREFIX = "/api/v1"


def create_app(
    dashboard: Dashboard,
    config: Any = None,
    persister: Any = None,
) -> FastAPI:
    """Create and configure the Pipewatch FastAPI application.

    Args:
        dashboard: Dashboard aggregate every route reads from.
        config:    PipewatchConfig. Kept on app.state for introspection.
        persister: Optional SnapshotPersister backing ``/history``.

    Returns:
        Configured FastAPI application, ready to be served by uvicorn.
    """
    from pipewatch import __version__

    app = FastAPI(
        title="Pipewatch",
        summary="CI/CD pipeline dashboard simulator API",
        version=__version__,
        docs_url="/api/v1/docs",
        redoc_url="/api/v1/redoc",
        openapi_url="/api/v1/openapi.json",
    )

    app.state.dashboard = dashboard
    app.state.config = config
    app.state.persister = persister

    app.include_router(router, prefix=_API_PREFIX)

    # -----------------------------------------------------------------------
    # Exception handlers
    # -----------------------------------------------------------------------

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        _request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Map Pydantic validation errors to our error envelope."""
        errors = exc.errors()
        first_field = ""
        first_msg = ""
        if errors:
            locs = errors[0].get("loc", ())
            first_field = str(locs[-1]) if locs else ""
            first_msg = str(errors[0].get("msg", ""))

        error_code = "INVALID_BUCKET_COUNT" if first_field == "buckets" else "INVALID_FILTER"

        return JSONResponse(
            status_code=400,
            content=ErrorResponse(error=error_code, detail=first_msg).model_dump(),
        )

    @app.exception_handler(InvalidFilterError)
    async def invalid_filter_handler(
        _request: Request,
        exc: InvalidFilterError,
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(error="INVALID_FILTER", detail=str(exc)).model_dump(),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Catch-all for unhandled exceptions; never expose stack traces."""
        _log.error(
            "unhandled_exception",
            path=str(request.url.path),
            method=request.method,
            error=str(exc),
        )
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="INTERNAL_ERROR",
                detail="An unexpected error occurred.",
            ).model_dump(),
        )

    return app
