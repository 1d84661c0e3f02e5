from __future__ import annotations

from fastapi.testclient import TestClient


def test_health_and_readiness(client: TestClient) -> None:
    health = client.get("/api/healthz")
    ready = client.get("/api/readyz")

    assert health.status_code == 200
    assert health.json()["status"] == "ok"
    assert ready.status_code == 200
    assert ready.json()["status"] == "ready"


def test_metrics_exposes_document_and_request_counters(client: TestClient, auth_headers) -> None:
    client.get("/api/healthz")

    response = client.get("/metrics")

    assert response.status_code == 200
    assert "http_requests_total" in response.text
    assert "documents_rendered_total" in response.text
    assert "statements_created_total" in response.text
