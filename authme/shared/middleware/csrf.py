# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Double-submit CSRF protection.

The server keeps a random secret in an HTTP-only cookie. Readable tokens are
``salt-digest`` pairs where ``digest = b64url(sha1(salt + "-" + secret))``, so
any number of tokens can be minted for one secret and each one verifies
against it without server-side state. Every non-safe request must echo a
token in a header.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import secrets
import string

from flask import Flask, Response, g, request

from authme.shared.config import AppConfig
from authme.shared.errors import CsrfError
from authme.shared.logging import logger

SAFE_METHODS: tuple[str, ...] = ("GET", "HEAD", "OPTIONS")
SECRET_COOKIE = "_csrf"
TOKEN_COOKIE = "XSRF-TOKEN"
TOKEN_HEADERS: tuple[str, ...] = ("XSRF-TOKEN", "X-XSRF-TOKEN", "CSRF-Token", "X-CSRF-Token")

_SECRET_BYTES = 18
_SALT_LENGTH = 8
_SALT_ALPHABET = string.ascii_letters + string.digits


def _b64url(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def new_secret() -> str:
    return _b64url(secrets.token_bytes(_SECRET_BYTES))


def tokenize(secret: str, salt: str) -> str:
    digest = hashlib.sha1(f"{salt}-{secret}".encode()).digest()
    return f"{salt}-{_b64url(digest)}"


def create_token(secret: str) -> str:
    salt = "".join(secrets.choice(_SALT_ALPHABET) for _ in range(_SALT_LENGTH))
    return tokenize(secret, salt)


def verify_token(secret: str | None, token: str | None) -> bool:
    if not secret or not token:
        return False
    salt, sep, _ = token.partition("-")
    if not sep:
        return False
    return hmac.compare_digest(tokenize(secret, salt).encode(), token.encode())


class CsrfGuard:
    def __init__(self, config: AppConfig) -> None:
        self._enabled = config.security.enable_csrf
        self._cookie_options = config.cookie_options()

    @property
    def enabled(self) -> bool:
        return self._enabled

    def init_app(self, app: Flask) -> None:
        app.before_request(self._protect)
        app.after_request(self._persist_secret)
        app.extensions["csrf_guard"] = self

    def _secret(self) -> str:
        secret = getattr(g, "csrf_secret", None)
        if secret:
            return secret
        secret = request.cookies.get(SECRET_COOKIE, "")
        if not secret:
            secret = new_secret()
            g.csrf_secret_is_new = True
        g.csrf_secret = secret
        return secret

    def _protect(self) -> None:
        secret = self._secret()
        if not self._enabled or request.method in SAFE_METHODS:
            return

        token = next(
            (request.headers[name] for name in TOKEN_HEADERS if request.headers.get(name)),
            None,
        )
        if not verify_token(secret, token):
            logger.warning(
                f"csrf: rejected {request.method} {request.path} "
                f"(token={'present' if token else 'missing'})"
            )
            raise CsrfError()

    def _persist_secret(self, response: Response) -> Response:
        if getattr(g, "csrf_secret_is_new", False):
            response.set_cookie(
                SECRET_COOKIE,
                g.csrf_secret,
                httponly=True,
                **self._cookie_options,
            )
        return response

    def generate_token(self) -> str:
        return create_token(self._secret())

    def set_token_cookie(self, response: Response) -> str:
        token = self.generate_token()
        response.set_cookie(TOKEN_COOKIE, token, httponly=False, **self._cookie_options)
        return token


__all__ = [
    "CsrfGuard",
    "SAFE_METHODS",
    "SECRET_COOKIE",
    "TOKEN_COOKIE",
    "TOKEN_HEADERS",
    "create_token",
    "new_secret",
    "tokenize",
    "verify_token",
]
