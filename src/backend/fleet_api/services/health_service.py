"""Health check service for the fleet API."""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Any

import structlog

from fleet_api.core.exceptions import StoreError
from fleet_api.store.base import DocumentStore

logger = structlog.get_logger()


class HealthStatus(str, Enum):
    """Health check status values."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


@dataclass
class ComponentHealth:
    """Health status of a single component."""

    name: str
    status: HealthStatus
    message: str | None = None
    latency_ms: float | None = None


@dataclass
class SystemHealth:
    """Overall system health status."""

    status: HealthStatus
    version: str
    components: list[ComponentHealth]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON response."""
        return {
            "status": self.status.value,
            "version": self.version,
            "components": [
                {
                    "name": c.name,
                    "status": c.status.value,
                    "message": c.message,
                    "latency_ms": c.latency_ms,
                }
                for c in self.components
            ],
        }


class HealthService:
    """Service for checking health of system components."""

    VERSION = "0.1.0"

    async def check_store(self, store: DocumentStore) -> ComponentHealth:
        """Check document store connectivity and response time."""
        start = time.perf_counter()
        try:
            await store.ping()
            latency = (time.perf_counter() - start) * 1000
            return ComponentHealth(
                name="document_store",
                status=HealthStatus.HEALTHY,
                message=f"{type(store).__name__} responding",
                latency_ms=round(latency, 2),
            )
        except StoreError as e:
            latency = (time.perf_counter() - start) * 1000
            logger.error("Document store health check failed", error=str(e))
            return ComponentHealth(
                name="document_store",
                status=HealthStatus.UNHEALTHY,
                message=f"Connection failed: {str(e)[:100]}",
                latency_ms=round(latency, 2),
            )

    async def get_readiness(self, store: DocumentStore) -> SystemHealth:
        """Readiness: the application can reach its document store."""
        store_health = await self.check_store(store)
        return SystemHealth(
            status=store_health.status,
            version=self.VERSION,
            components=[store_health],
        )

    def get_liveness(self) -> SystemHealth:
        """Get basic liveness status (application is running)."""
        return SystemHealth(
            status=HealthStatus.HEALTHY,
            version=self.VERSION,
            components=[
                ComponentHealth(
                    name="application",
                    status=HealthStatus.HEALTHY,
                    message="Application is running",
                )
            ],
        )


health_service = HealthService()
