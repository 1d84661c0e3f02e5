from __future__ import annotations

from fastapi.testclient import TestClient

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "changeme123"


def test_first_admin_can_sign_up_without_token(client: TestClient) -> None:
    response = client.post(
        "/api/auth/signup",
        json={"email": "First@Example.com", "password": "s3cure-pass", "full_name": "First Admin"},
    )

    assert response.status_code == 201
    assert response.json()["email"] == "first@example.com"

    login = client.post("/api/auth/login", json={"email": "first@example.com", "password": "s3cure-pass"})
    assert login.status_code == 200
    assert login.json()["token_type"] == "bearer"


def test_further_signups_require_a_token(client: TestClient, admin_user, auth_headers) -> None:
    anonymous = client.post("/api/auth/signup", json={"email": "second@example.com", "password": "s3cure-pass"})
    assert anonymous.status_code in (401, 403)

    created = client.post(
        "/api/auth/signup",
        json={"email": "second@example.com", "password": "s3cure-pass"},
        headers=auth_headers,
    )
    assert created.status_code == 201

    duplicate = client.post(
        "/api/auth/signup",
        json={"email": "second@example.com", "password": "s3cure-pass"},
        headers=auth_headers,
    )
    assert duplicate.status_code == 409


def test_login_rejects_bad_credentials(client: TestClient, admin_user) -> None:
    wrong = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": "wrong-password"})
    malformed = client.post("/api/auth/login", json={"email": "not-an-email", "password": ADMIN_PASSWORD})

    assert wrong.status_code == 401
    assert malformed.status_code == 422


def test_session_describes_current_admin(client: TestClient, auth_headers) -> None:
    response = client.get("/api/auth/session", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["email"] == ADMIN_EMAIL


def test_protected_routes_reject_invalid_tokens(client: TestClient) -> None:
    response = client.get("/api/statements", headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == 401


def test_password_change(client: TestClient, auth_headers) -> None:
    wrong = client.put(
        "/api/auth/password",
        json={"current_password": "nope-nope", "new_password": "brand-new-pass"},
        headers=auth_headers,
    )
    assert wrong.status_code == 400

    changed = client.put(
        "/api/auth/password",
        json={"current_password": ADMIN_PASSWORD, "new_password": "brand-new-pass"},
        headers=auth_headers,
    )
    assert changed.status_code == 204

    login = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": "brand-new-pass"})
    assert login.status_code == 200
