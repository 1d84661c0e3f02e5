"""Observability utilities."""

from .metrics import (
    BACKFILL_FAILED_GROUPS,
    DOCUMENT_RENDER_SECONDS,
    DOCUMENTS_RENDERED,
    RECORD_MUTATIONS,
    REQUEST_COUNTER,
    REQUEST_ERROR_COUNTER,
    REQUEST_LATENCY_SECONDS,
    STATEMENTS_CREATED,
    STATEMENTS_UPDATED,
    PrometheusMiddleware,
    metrics_router,
    record_mutation,
)
from .tracing import document_span, initialise_tracing, instrument_fastapi_app, instrument_sqlalchemy_engine

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
    "document_span",
    "initialise_tracing",
    "instrument_fastapi_app",
    "instrument_sqlalchemy_engine",
    "metrics_router",
    "record_mutation",
]
