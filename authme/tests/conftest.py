from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from flask import Flask
from flask.testing import FlaskClient

from authme.app import create_app
from authme.infrastructure.container import Container
from authme.shared.config import AppConfig, DatabaseConfig, JwtConfig, SecurityConfig
from authme.shared.middleware.csrf import TOKEN_COOKIE

TEST_SECRET = "test-signing-secret-that-is-long-enough-for-hs256"


@pytest.fixture(autouse=True)
def _log_to_tmp(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_FILE", str(tmp_path / "app.log"))


@pytest.fixture()
def app_config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        app_env="test",
        frontend_build_dir=tmp_path / "build",
        database=DatabaseConfig(url=f"sqlite:///{tmp_path / 'test.db'}"),
        jwt=JwtConfig(secret=TEST_SECRET, expires_in=3600),
        security=SecurityConfig(enable_csrf=True, allowed_origins=["http://localhost:3000"]),
    )


@pytest.fixture()
def app(app_config: AppConfig) -> Iterator[Flask]:
    flask_app = create_app(app_config)
    yield flask_app
    container: Container = flask_app.extensions["authme.container"]
    container.database.drop_all()
    container.database.dispose()


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    return app.test_client()


@pytest.fixture()
def csrf(client: FlaskClient) -> dict[str, str]:
    """Fetch a readable CSRF token the way the dev frontend does."""
    response = client.get("/api/csrf/restore")
    assert response.status_code == 200
    cookie = client.get_cookie(TOKEN_COOKIE)
    assert cookie is not None
    return {"XSRF-TOKEN": cookie.value}
