"""Prometheus metrics instrumentation for the fleet API."""

from prometheus_client import Counter
from prometheus_fastapi_instrumentator import Instrumentator, metrics

# Integrity refusals, labelled by the entity kind being written/deleted
integrity_violations_total = Counter(
    "fleet_integrity_violations_total",
    "Writes or deletes refused by the integrity engine",
    ["kind", "error"],
)

# Successful mutations per entity kind
entity_mutations_total = Counter(
    "fleet_entity_mutations_total",
    "Entity create/update/delete operations",
    ["kind", "operation"],
)


def setup_metrics(app) -> Instrumentator:
    """Set up Prometheus metrics instrumentation for FastAPI app."""
    instrumentator = Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=True,
        should_instrument_requests_inprogress=True,
        excluded_handlers=["/health", "/health/live", "/health/ready", "/metrics"],
        inprogress_name="http_requests_inprogress",
        inprogress_labels=True,
    )

    instrumentator.add(
        metrics.default(
            metric_namespace="",
            metric_subsystem="",
            latency_highr_buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
        )
    )

    instrumentator.instrument(app)

    return instrumentator


def expose_metrics(app, instrumentator: Instrumentator) -> None:
    """Expose the /metrics endpoint."""
    instrumentator.expose(app, include_in_schema=False, should_gzip=True)


def record_integrity_violation(kind: str, error: str) -> None:
    """Increment the integrity refusal counter."""
    integrity_violations_total.labels(kind=kind, error=error).inc()


def record_mutation(kind: str, operation: str) -> None:
    """Increment the entity mutation counter."""
    entity_mutations_total.labels(kind=kind, operation=operation).inc()
