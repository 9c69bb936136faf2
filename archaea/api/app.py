# archaea/api/app.py
"""
FastAPI application for the archaea dashboard

Handlers are thin: they parse query parameters, call a service and
serialize the result. ArchaeaError subclasses become JSON error bodies
``{error, message}`` with the status from error_handlers.http_status_for.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from archaea import __version__
from archaea.core.context import ApplicationContext
from archaea.error_handlers import http_status_for, log_exception
from archaea.exceptions import ArchaeaError
from archaea.api.routers import (
    router_novel_folds, router_curation, router_proteins, router_clusters, router_stats,
    router_organisms, router_landscape
)

logger = logging.getLogger("archaea.api")

ERROR_LABELS = {
    400: "Invalid argument",
    404: "Not found",
    409: "Conflict",
    503: "Store unavailable",
    500: "Internal error",
}


def error_body(status: int, message: str) -> dict:
    return {"error": ERROR_LABELS.get(status, "Error"), "message": message}


async def archaea_error_handler(request: Request, exc: ArchaeaError) -> JSONResponse:
    status = http_status_for(exc)
    if status >= 500:
        log_exception(logger, exc, context={"path": request.url.path})
    else:
        logger.info(f"{request.method} {request.url.path}: {exc.__class__.__name__}: {exc.message}")
    return JSONResponse(status_code=status, content=error_body(status, exc.message))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
    )
    return JSONResponse(status_code=400, content=error_body(400, problems))


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log_exception(logger, exc, context={"path": request.url.path})
    return JSONResponse(status_code=500, content=error_body(500, str(exc)))


def create_app(context: Optional[ApplicationContext] = None,
               config_path: Optional[str] = None) -> FastAPI:
    """Build the API around an application context

    Args:
        context: Context to serve from; built from config_path when omitted
        config_path: Configuration file used when no context is given

    Raises:
        ConfigurationError: If database settings are incomplete
        StoreUnavailableError: If the database pool cannot be opened
    """
    context = context or ApplicationContext(config_path)
    context.open()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        context.close()

    app = FastAPI(
        title="Archaea Novel Fold Dashboard API",
        version=__version__,
        description="Novel fold clusters, cross-tier links and curation workflow for archaeal proteins.",
        lifespan=lifespan,
    )
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=context.get('api.cors_origins', ['*']),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ArchaeaError, archaea_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    app.include_router(router_novel_folds, prefix="/api", tags=["novel-folds"])
    app.include_router(router_curation, prefix="/api/curation", tags=["curation"])
    app.include_router(router_proteins, prefix="/api/proteins", tags=["proteins"])
    app.include_router(router_clusters, prefix="/api/clusters", tags=["clusters"])
    app.include_router(router_stats, prefix="/api", tags=["stats"])
    app.include_router(router_organisms, prefix="/api/organisms", tags=["organisms"])
    app.include_router(router_landscape, prefix="/api", tags=["landscape"])

    return app
