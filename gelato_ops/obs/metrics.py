"""Prometheus metrics for the API and the statement/document pipeline."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable

from fastapi import APIRouter, Request, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_LATENCY_SECONDS = Histogram(
    "http_request_latency_seconds",
    "Latency of HTTP requests in seconds.",
    labelnames=("method", "path"),
)
REQUEST_COUNTER = Counter(
    "http_requests_total",
    "Total number of HTTP requests processed.",
    labelnames=("method", "path", "status"),
)
REQUEST_ERROR_COUNTER = Counter(
    "http_request_errors_total",
    "Total number of HTTP requests that resulted in server errors.",
    labelnames=("method", "path", "status"),
)
STATEMENTS_CREATED = Counter(
    "statements_created_total",
    "Statements created by the monthly backfill.",
)
STATEMENTS_UPDATED = Counter(
    "statements_updated_total",
    "Existing statements whose totals were recomputed by the backfill.",
)
BACKFILL_FAILED_GROUPS = Counter(
    "statement_backfill_failed_groups_total",
    "Client-month groups skipped by the backfill after a store error.",
)
DOCUMENTS_RENDERED = Counter(
    "documents_rendered_total",
    "Documents rendered for download or printing.",
    labelnames=("kind", "format"),
)
DOCUMENT_RENDER_SECONDS = Histogram(
    "document_render_seconds",
    "Time spent laying out a document.",
    labelnames=("kind",),
)
RECORD_MUTATIONS = Counter(
    "record_mutations_total",
    "Committed mutations announced on the change notifier.",
    labelnames=("channel",),
)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware that records request metrics for Prometheus scraping."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:  # type: ignore[override]
        method = request.method
        route = request.scope.get("route")
        path = getattr(route, "path", request.url.path)
        start_time = time.perf_counter()
        status = "500"

        try:
            response = await call_next(request)
            status = str(response.status_code)
            if response.status_code >= 500:
                REQUEST_ERROR_COUNTER.labels(method=method, path=path, status=status).inc()
            return response
        except Exception:
            REQUEST_ERROR_COUNTER.labels(method=method, path=path, status="500").inc()
            raise
        finally:
            latency = time.perf_counter() - start_time
            REQUEST_LATENCY_SECONDS.labels(method=method, path=path).observe(latency)
            REQUEST_COUNTER.labels(method=method, path=path, status=status).inc()


metrics_router = APIRouter(tags=["observability"])


@metrics_router.get("/metrics", include_in_schema=False)
def metrics_endpoint() -> Response:
    """Expose Prometheus metrics for scraping."""
    payload = generate_latest()
    return Response(content=payload, media_type=CONTENT_TYPE_LATEST)


def record_mutation(channel: str) -> None:
    """Change-notifier listener counting committed mutations per channel."""
    RECORD_MUTATIONS.labels(channel=channel).inc()


__all__ = [
    "BACKFILL_FAILED_GROUPS",
    "DOCUMENTS_RENDERED",
    "DOCUMENT_RENDER_SECONDS",
    "PrometheusMiddleware",
    "RECORD_MUTATIONS",
    "REQUEST_COUNTER",
    "REQUEST_ERROR_COUNTER",
    "REQUEST_LATENCY_SECONDS",
    "STATEMENTS_CREATED",
    "STATEMENTS_UPDATED",
    "metrics_endpoint",
    "metrics_router",
    "record_mutation",
]
