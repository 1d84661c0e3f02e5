from __future__ import annotations

from fastapi.testclient import TestClient


def test_header_crud(client: TestClient, auth_headers) -> None:
    created = client.post(
        "/api/templates/headers",
        json={"option_name": "Main", "line1": "Gelato House Pte Ltd", "line7": "UEN 201900001A"},
        headers=auth_headers,
    )
    assert created.status_code == 201
    header_id = created.json()["id"]
    assert created.json()["line7"] == "UEN 201900001A"

    updated = client.put(
        f"/api/templates/headers/{header_id}",
        json={"line2": "8 Marina View", "is_default": True},
        headers=auth_headers,
    )
    assert updated.status_code == 200
    assert updated.json()["line1"] == "Gelato House Pte Ltd"
    assert updated.json()["line2"] == "8 Marina View"
    assert updated.json()["is_default"] is True

    listing = client.get("/api/templates/headers", headers=auth_headers)
    assert [item["id"] for item in listing.json()] == [header_id]

    deleted = client.delete(
        f"/api/templates/headers/{header_id}", params={"selected_id": header_id}, headers=auth_headers
    )
    assert deleted.status_code == 200
    assert deleted.json() == {"selected_id": None}
    assert client.get("/api/templates/headers", headers=auth_headers).json() == []
    assert client.delete(f"/api/templates/headers/{header_id}", headers=auth_headers).status_code == 404


def test_footer_default_moves(client: TestClient, auth_headers) -> None:
    first = client.post(
        "/api/templates/footers", json={"option_name": "Bank", "is_default": True}, headers=auth_headers
    ).json()
    second = client.post(
        "/api/templates/footers", json={"option_name": "PayNow", "is_default": True}, headers=auth_headers
    ).json()

    listing = client.get("/api/templates/footers", headers=auth_headers).json()

    assert [(item["id"], item["is_default"]) for item in listing] == [(second["id"], True), (first["id"], False)]


def test_template_without_name_is_rejected(client: TestClient, auth_headers) -> None:
    response = client.post("/api/templates/footers", json={"line1": "Thank you"}, headers=auth_headers)

    assert response.status_code == 422


def test_update_missing_template(client: TestClient, auth_headers) -> None:
    response = client.put("/api/templates/footers/404", json={"line1": "x"}, headers=auth_headers)

    assert response.status_code == 404


def test_delete_selected_footer_returns_next_selection(client: TestClient, auth_headers) -> None:
    bank = client.post("/api/templates/footers", json={"option_name": "Bank"}, headers=auth_headers).json()
    paynow = client.post(
        "/api/templates/footers", json={"option_name": "PayNow", "is_default": True}, headers=auth_headers
    ).json()

    response = client.delete(
        f"/api/templates/footers/{paynow['id']}", params={"selected_id": paynow["id"]}, headers=auth_headers
    )

    assert response.status_code == 200
    assert response.json() == {"selected_id": bank["id"]}
