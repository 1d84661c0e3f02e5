from __future__ import annotations

from fastapi import FastAPI
from fastapi.testclient import TestClient

from gelato_ops.obs import (
    RECORD_MUTATIONS,
    PrometheusMiddleware,
    document_span,
    initialise_tracing,
    metrics_router,
    record_mutation,
)
from gelato_ops.services.events import ChangeNotifier


def test_metrics_endpoint_exposes_counters() -> None:
    app = FastAPI()
    app.add_middleware(PrometheusMiddleware)
    app.include_router(metrics_router)

    client = TestClient(app)
    response = client.get("/metrics")

    assert response.status_code == 200
    assert "http_requests_total" in response.text


def test_mutation_counter_follows_notifier() -> None:
    before = RECORD_MUTATIONS.labels(channel="templates")._value.get()
    notifier = ChangeNotifier()
    notifier.subscribe("templates", record_mutation)

    notifier.notify("templates")
    notifier.notify("templates")

    assert RECORD_MUTATIONS.labels(channel="templates")._value.get() == before + 2


def test_document_span_records_attributes() -> None:
    initialise_tracing(service_name="unit-test-service", instrument_logging=False)

    with document_span("invoice", order_id=7, mode="print") as span:
        assert span.get_span_context().is_valid

    assert span.name == "document.render.invoice"
    assert span.attributes["order_id"] == 7
    assert span.attributes["mode"] == "print"
