"""Shared fixtures: an isolated SQLite database and upload directory per session."""

from __future__ import annotations

import asyncio
import os
import tempfile
from itertools import count
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

_WORKDIR = Path(tempfile.mkdtemp(prefix="classroom-tests-"))
os.environ["DB_DRIVER"] = "sqlite"
os.environ["DB_PATH"] = str(_WORKDIR / "test.db")
os.environ["UPLOAD_DIRECTORY"] = str(_WORKDIR / "uploads")
os.environ["JWT_SECRET"] = "test-secret"
os.environ["LOG_FILE"] = str(_WORKDIR / "logs" / "app.log")

from classroom.database import engine  # noqa: E402
from classroom.main import app  # noqa: E402
from classroom.models import Base  # noqa: E402

_emails = count(1)


async def _reset_schema() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


@pytest.fixture(autouse=True)
def reset_database() -> None:
    asyncio.run(_reset_schema())


@pytest.fixture
def client() -> TestClient:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def upload_dir() -> Path:
    return _WORKDIR / "uploads"


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def register(client: TestClient, role: str, name: str | None = None) -> dict:
    """Register a fresh account and return the auth body plus ready headers."""

    number = next(_emails)
    response = client.post(
        "/api/auth/register",
        json={
            "name": name or f"{role.title()} {number}",
            "email": f"{role}{number}@example.com",
            "password": "secret123",
            "role": role,
        },
    )
    assert response.status_code == 201, response.text
    body = response.json()
    body["headers"] = auth_headers(body["token"])
    return body


@pytest.fixture
def teacher(client: TestClient) -> dict:
    return register(client, "teacher", "Ms Frizzle")


@pytest.fixture
def student(client: TestClient) -> dict:
    return register(client, "student", "Arnold")


@pytest.fixture
def group(client: TestClient, teacher: dict) -> dict:
    response = client.post(
        "/api/groups", json={"name": "Math 101"}, headers=teacher["headers"]
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def joined_group(client: TestClient, group: dict, student: dict) -> dict:
    response = client.post(
        "/api/groups/join",
        json={"joinCode": group["joinCode"]},
        headers=student["headers"],
    )
    assert response.status_code == 200, response.text
    return group
