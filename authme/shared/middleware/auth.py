# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any

from flask import Response, after_this_request, g, request

from authme.application.services.tokens import JwtTokenService, TokenInvalid
from authme.domain.users.entities import PublicUser
from authme.domain.users.repositories import UserRepository
from authme.shared.config import AppConfig
from authme.shared.errors import UnauthorizedError
from authme.shared.logging import bind_user, logger

TOKEN_COOKIE = "token"


class SessionGuard:
    """Restores the signed-in user from the ``token`` cookie.

    ``restore`` never fails: a missing, invalid or expired token, or a token
    for a user that no longer exists, leaves the request anonymous and
    schedules removal of the cookie. ``require`` adds the 401 gate on top.
    """

    def __init__(self, *, tokens: JwtTokenService, users: UserRepository, config: AppConfig) -> None:
        self._tokens = tokens
        self._users = users
        self._cookie_options = config.cookie_options()

    def restore(self) -> PublicUser | None:
        if "user" in g:
            return g.user

        g.user = None
        token = request.cookies.get(TOKEN_COOKIE)
        result = self._tokens.verify(token)

        if isinstance(result, TokenInvalid):
            logger.debug(f"session.restore: anonymous ({result.reason})")
            self._clear_on_response()
            return None

        user = self._users.find_by_id(result.user.id)
        if user is None:
            logger.debug(f"session.restore: user_id={result.user.id} no longer exists")
            self._clear_on_response()
            return None

        g.user = user
        bind_user(user.id)
        return user

    def require(self) -> PublicUser:
        user = self.restore()
        if user is None:
            raise UnauthorizedError()
        return user

    def set_token_cookie(self, response: Response, user: PublicUser) -> str:
        # the access log and later restore() calls in this request see the new session
        g.user = user
        bind_user(user.id)
        token = self._tokens.issue(user.to_safe())
        response.set_cookie(
            TOKEN_COOKIE,
            token,
            max_age=self._tokens.expires_in,
            httponly=True,
            **self._cookie_options,
        )
        return token

    def clear_token_cookie(self, response: Response) -> None:
        response.delete_cookie(TOKEN_COOKIE, httponly=True, **self._cookie_options)

    def _clear_on_response(self) -> None:
        @after_this_request
        def _drop_token(response: Response) -> Response:
            self.clear_token_cookie(response)
            return response

    def restore_user(self, f: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(f)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            self.restore()
            return f(*args, **kwargs)

        return wrapper

    def require_auth(self, f: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(f)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            self.require()
            return f(*args, **kwargs)

        return wrapper


__all__ = ["SessionGuard", "TOKEN_COOKIE"]
