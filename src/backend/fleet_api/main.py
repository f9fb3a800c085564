"""IoT Fleet API FastAPI Application Entry Point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fleet_api.api import router as api_router
from fleet_api.core.config import settings
from fleet_api.core.deps import Store, close_store, get_store
from fleet_api.core.exceptions import (
    DependentsExistError,
    DuplicateKeyError,
    FleetError,
    MissingReferenceError,
    NotFoundError,
    StoreError,
)
from fleet_api.core.logging import configure_logging
from fleet_api.services.health_service import health_service
from fleet_api.store.sql import SQLDocumentStore

configure_logging(settings.log_level, settings.log_json)

logger = structlog.get_logger()

# Most specific class first
ERROR_STATUS: tuple[tuple[type[FleetError], int], ...] = (
    (NotFoundError, 404),
    (MissingReferenceError, 422),
    (DependentsExistError, 409),
    (DuplicateKeyError, 409),
    (StoreError, 503),
)


def status_for(exc: FleetError) -> int:
    for error_type, status_code in ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return 500


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown events."""
    logger.info(
        "Starting IoT Fleet API",
        environment=settings.environment,
        store_backend=settings.store_backend,
    )

    store = get_store()
    if isinstance(store, SQLDocumentStore) and settings.create_tables_on_startup:
        await store.create_schema()
        logger.info("Document tables ready")

    yield

    logger.info("Shutting down IoT Fleet API")
    await close_store()


fastapi_app = FastAPI(
    title=settings.app_name,
    description="IoT fleet metadata with referential-integrity guards",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    lifespan=lifespan,
)

# CORS middleware
fastapi_app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
fastapi_app.include_router(api_router, prefix="/api")


@fastapi_app.exception_handler(FleetError)
async def fleet_exception_handler(request: Request, exc: FleetError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error("Request failed", path=str(request.url.path), error=str(exc))
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": exc.code,
            "message": str(exc),
            **exc.to_dict(),
        },
    )


@fastapi_app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Convert errors to JSON-serializable format
    errors = []
    for error in exc.errors():
        errors.append({
            "loc": error.get("loc"),
            "msg": str(error.get("msg")),
            "type": error.get("type"),
        })

    logger.warning("Validation error", path=str(request.url.path), errors=errors)
    return JSONResponse(
        status_code=422,
        content={"detail": errors},
    )


@fastapi_app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", path=str(request.url.path))
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "internal_error", "message": "Internal server error"},
    )


# Set up Prometheus metrics instrumentation
if settings.metrics_enabled:
    from fleet_api.core.metrics import expose_metrics, setup_metrics

    expose_metrics(fastapi_app, setup_metrics(fastapi_app))


@fastapi_app.get("/")
async def root() -> dict[str, str]:
    return {"message": f"{settings.app_name} is running"}


@fastapi_app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint for container probes."""
    return {"status": "healthy", "version": "0.1.0"}


@fastapi_app.get("/health/live")
async def liveness_check() -> dict:
    """Liveness probe - checks if application is running."""
    return health_service.get_liveness().to_dict()


@fastapi_app.get("/health/ready")
async def readiness_check(store: Store) -> JSONResponse:
    """Readiness probe - checks the document store is reachable."""
    result = await health_service.get_readiness(store)
    status_code = 200 if result.status.value == "healthy" else 503
    return JSONResponse(status_code=status_code, content=result.to_dict())


app = fastapi_app
