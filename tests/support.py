"""Shared helpers: an app over in-memory SQLite and shortcuts for accounts and tokens."""

from typing import Any

from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import SecretStr

from app.application import create_app
from app.core.config import Settings
from app.models import Base

ACCESS_SECRET = "test-access-secret-0123456789abcdef"
REFRESH_SECRET = "test-refresh-secret-0123456789abcdef"
PASSWORD = "correct-horse-battery"


def make_settings(**overrides: Any) -> Settings:
    """Settings isolated from the environment and .env, with fast bcrypt."""
    values: dict[str, Any] = {
        "APP_ENV": "dev",
        "DATABASE_URL": "sqlite://",
        "ACCESS_TOKEN_SECRET": SecretStr(ACCESS_SECRET),
        "REFRESH_TOKEN_SECRET": SecretStr(REFRESH_SECRET),
        "BCRYPT_ROUNDS": 4,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_app(**overrides: Any) -> FastAPI:
    app = create_app(make_settings(**overrides))
    Base.metadata.create_all(app.state.engine)
    return app


def make_client(**overrides: Any) -> TestClient:
    return TestClient(make_app(**overrides))


def register(
    client: TestClient,
    login: str,
    role: str | None = None,
    password: str = PASSWORD,
) -> dict[str, Any]:
    """Register through the API and return the JSON body ({user, accessToken, refreshToken})."""
    body: dict[str, Any] = {
        "login": login,
        "password": password,
        "nom": "Durand",
        "prenom": "Camille",
    }
    if role is not None:
        body["role"] = role
    resp = client.post("/api/auth/register", json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
