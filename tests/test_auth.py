"""Registration, login and bearer token checks."""

from __future__ import annotations

from datetime import timedelta
from types import SimpleNamespace

from fastapi.testclient import TestClient

from classroom.utils import create_access_token, decode_access_token
from conftest import auth_headers, register


def test_register_returns_user_and_token(client: TestClient):
    response = client.post(
        "/api/auth/register",
        json={
            "name": "Ada",
            "email": "Ada@Example.com",
            "password": "secret123",
            "role": "teacher",
        },
    )

    assert response.status_code == 201
    body = response.json()
    assert body["user"]["email"] == "ada@example.com"
    assert body["user"]["role"] == "teacher"
    assert "password" not in body["user"]
    assert body["tokenType"] == "bearer"
    assert body["expiresIn"] == 7 * 24 * 60 * 60

    claims = decode_access_token(body["token"])
    assert claims.sub == str(body["user"]["id"])
    assert claims.user.name == "Ada"
    assert claims.user.role.value == "teacher"


def test_duplicate_email_is_conflict(client: TestClient):
    payload = {
        "name": "Ada",
        "email": "ada@example.com",
        "password": "secret123",
        "role": "student",
    }
    assert client.post("/api/auth/register", json=payload).status_code == 201

    response = client.post("/api/auth/register", json={**payload, "name": "Other"})

    assert response.status_code == 409
    assert response.json() == {"message": "Email already registered", "code": "conflict"}


def test_register_rejects_malformed_input(client: TestClient):
    response = client.post(
        "/api/auth/register",
        json={"name": "X", "email": "not-an-email", "password": "123", "role": "admin"},
    )

    assert response.status_code == 400
    assert response.json()["code"] == "validation_error"
    assert response.json()["message"]


def test_login_round_trip(client: TestClient):
    registered = register(client, "student")

    response = client.post(
        "/api/auth/login",
        json={"email": registered["user"]["email"], "password": "secret123"},
    )

    assert response.status_code == 200
    assert response.json()["user"]["id"] == registered["user"]["id"]


def test_login_with_wrong_password_is_unauthenticated(client: TestClient):
    registered = register(client, "student")

    response = client.post(
        "/api/auth/login",
        json={"email": registered["user"]["email"], "password": "wrong-password"},
    )

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid email or password"


def test_me_requires_a_token(client: TestClient):
    response = client.get("/api/auth/me")

    assert response.status_code == 401
    assert response.json()["message"] == "Authentication required"


def test_me_returns_profile(client: TestClient, teacher: dict):
    response = client.get("/api/auth/me", headers=teacher["headers"])

    assert response.status_code == 200
    assert response.json()["name"] == "Ms Frizzle"


def test_garbage_token_is_unauthenticated(client: TestClient):
    response = client.get("/api/groups", headers=auth_headers("not-a-jwt"))

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid or expired token"


def test_expired_token_is_unauthenticated(client: TestClient, student: dict):
    user = SimpleNamespace(
        id=student["user"]["id"],
        email=student["user"]["email"],
        role="student",
        name=student["user"]["name"],
    )
    token = create_access_token(user, expires_delta=timedelta(seconds=-5))

    response = client.get("/api/groups", headers=auth_headers(token))

    assert response.status_code == 401


def test_token_for_deleted_user_is_rejected(client: TestClient):
    user = SimpleNamespace(id=9999, email="ghost@example.com", role="teacher", name="Ghost")
    token = create_access_token(user)

    response = client.get("/api/groups", headers=auth_headers(token))

    assert response.status_code == 401
    assert response.json()["message"] == "User not found"
