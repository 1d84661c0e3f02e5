from __future__ import annotations

from fastapi.testclient import TestClient


def test_create_client(client: TestClient, auth_headers) -> None:
    response = client.post(
        "/api/clients",
        json={
            "business_name": "Alpha Co",
            "email": "Ops@Alpha.Example",
            "street_name": "1 Harbour Rd",
            "country": "Singapore",
            "postal_code": "098765",
        },
        headers=auth_headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["email"] == "ops@alpha.example"
    assert body["structured_address"] == "1 Harbour Rd, Singapore, 098765"


def test_create_client_rejects_invalid_email(client: TestClient, auth_headers) -> None:
    response = client.post(
        "/api/clients", json={"business_name": "Alpha Co", "email": "ops-at-alpha"}, headers=auth_headers
    )

    assert response.status_code == 422


def test_upload_profile_photo(client: TestClient, auth_headers, client_factory, s3_client, blob_store) -> None:
    client_factory("client-a")

    response = client.post(
        "/api/clients/client-a/documents/profile_photo",
        content=b"\x89PNG\r\n",
        headers={**auth_headers, "Content-Type": "image/png", "X-Upload-Filename": "logo.PNG"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["kind"] == "profile_photo"
    assert body["path"].startswith("profile_photo/client-a_")
    assert body["path"].endswith(".png")
    assert s3_client.keys(blob_store.bucket) == {body["path"]}


def test_upload_rejects_unknown_kind_and_client(client: TestClient, auth_headers, client_factory) -> None:
    client_factory("client-a")

    unknown_kind = client.post("/api/clients/client-a/documents/passport", content=b"data", headers=auth_headers)
    unknown_client = client.post(
        "/api/clients/missing/documents/acra_document", content=b"data", headers=auth_headers
    )

    assert unknown_kind.status_code == 422
    assert unknown_client.status_code == 404


def test_prices_for_unknown_client(client: TestClient, auth_headers) -> None:
    response = client.put("/api/clients/missing/prices", json={"prices": {"1": "10.00"}}, headers=auth_headers)

    assert response.status_code == 404
