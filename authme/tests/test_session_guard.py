from __future__ import annotations

import pytest
from flask import Flask, g, jsonify
from flask.testing import FlaskClient

from authme.application.services.tokens import JwtTokenService
from authme.domain.users.entities import AuthRecord, PublicUser
from authme.shared.config import AppConfig, JwtConfig
from authme.shared.errors import register_error_handler
from authme.shared.middleware.auth import TOKEN_COOKIE, SessionGuard

SECRET = "session-guard-test-secret-long-enough"
SPIDEY = PublicUser(id=1, username="spidey", email="spidey@spider.man")


class StubUserRepository:
    def __init__(self, *users: PublicUser) -> None:
        self._users = {user.id: user for user in users}
        self.lookups = 0

    def add(self, username: str, email: str, password_hash: str) -> PublicUser:
        raise NotImplementedError

    def find_by_id(self, user_id: int) -> PublicUser | None:
        self.lookups += 1
        return self._users.get(user_id)

    def find_by_username(self, username: str) -> PublicUser | None:
        return None

    def find_by_email(self, email: str) -> PublicUser | None:
        return None

    def find_by_credential(self, credential: str) -> AuthRecord | None:
        return None


def _make_app(users: StubUserRepository) -> tuple[Flask, SessionGuard]:
    config = AppConfig(app_env="test", jwt=JwtConfig(secret=SECRET))
    tokens = JwtTokenService(secret=SECRET, expires_in=3600)
    guard = SessionGuard(tokens=tokens, users=users, config=config)

    app = Flask(__name__)
    register_error_handler(app, config)

    @app.get("/login/<int:user_id>")
    def login(user_id: int):
        response = jsonify({})
        guard.set_token_cookie(response, PublicUser(id=user_id, username="x", email="x@y.io"))
        return response

    @app.get("/whoami")
    @guard.restore_user
    def whoami():
        user = g.user
        return jsonify({"user": user.to_dict() if user else None})

    @app.get("/private")
    @guard.require_auth
    def private():
        # second restore in the same request hits the per-request cache
        guard.restore()
        return jsonify({"id": g.user.id})

    return app, guard


@pytest.fixture()
def users() -> StubUserRepository:
    return StubUserRepository(SPIDEY)


@pytest.fixture()
def client(users: StubUserRepository) -> FlaskClient:
    app, _ = _make_app(users)
    return app.test_client()


def _token_cookie_header(response) -> str | None:
    return next(
        (h for h in response.headers.getlist("Set-Cookie") if h.startswith(f"{TOKEN_COOKIE}=")),
        None,
    )


def test_anonymous_request_is_restored_as_none(client: FlaskClient) -> None:
    response = client.get("/whoami")

    assert response.status_code == 200
    assert response.get_json() == {"user": None}


def test_valid_cookie_restores_user(client: FlaskClient) -> None:
    login = client.get("/login/1")
    header = _token_cookie_header(login)
    assert header is not None
    assert "HttpOnly" in header
    assert "Max-Age=3600" in header

    response = client.get("/whoami")

    assert response.get_json() == {"user": SPIDEY.to_dict()}


def test_restore_uses_current_row_not_token_claims(client: FlaskClient) -> None:
    client.get("/login/1")

    # claims say "x", the repository says "spidey"
    assert client.get("/whoami").get_json()["user"]["username"] == "spidey"


def test_invalid_cookie_is_cleared(client: FlaskClient) -> None:
    client.set_cookie(TOKEN_COOKIE, "garbage")

    response = client.get("/whoami")

    assert response.get_json() == {"user": None}
    header = _token_cookie_header(response)
    assert header is not None
    assert "Max-Age=0" in header or "Expires=Thu, 01 Jan 1970" in header
    assert client.get_cookie(TOKEN_COOKIE) is None


def test_cookie_for_deleted_user_is_cleared(client: FlaskClient) -> None:
    client.get("/login/99")

    response = client.get("/whoami")

    assert response.get_json() == {"user": None}
    assert client.get_cookie(TOKEN_COOKIE) is None


def test_require_auth_rejects_anonymous(client: FlaskClient) -> None:
    response = client.get("/private")

    assert response.status_code == 401
    body = response.get_json()
    assert body["title"] == "Unauthorized"
    assert body["errors"] == ["Unauthorized"]


def test_require_auth_passes_and_caches(client: FlaskClient, users: StubUserRepository) -> None:
    client.get("/login/1")

    response = client.get("/private")

    assert response.status_code == 200
    assert response.get_json() == {"id": 1}
    assert users.lookups == 1


def test_issuing_a_cookie_marks_the_request_as_signed_in(users: StubUserRepository) -> None:
    app, guard = _make_app(users)

    with app.test_request_context("/login/1"):
        response = jsonify({})
        guard.set_token_cookie(response, SPIDEY)

        assert g.user == SPIDEY
        assert guard.restore() == SPIDEY
    assert users.lookups == 0
