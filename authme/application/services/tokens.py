# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Signed session tokens.

A token is an HS256 JWT whose only application claim is ``data``, the
``SafeUser`` view of the signed-in user. Verification folds every failure
(missing, malformed, bad signature, expired, unexpected claim shape) into a
single ``TokenInvalid`` result; ``reason`` exists for logs only.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt

from authme.domain.users.entities import SafeUser


@dataclass(slots=True, frozen=True)
class TokenValid:
    user: SafeUser
    expires_at: datetime


@dataclass(slots=True, frozen=True)
class TokenInvalid:
    reason: str


TokenResult = TokenValid | TokenInvalid


def _utcnow() -> datetime:
    return datetime.now(UTC)


class JwtTokenService:
    def __init__(
        self,
        *,
        secret: str,
        expires_in: int,
        algorithm: str = "HS256",
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self._secret = secret
        self._expires_in = expires_in
        self._algorithm = algorithm
        self._clock = clock

    @property
    def expires_in(self) -> int:
        return self._expires_in

    def issue(self, user: SafeUser, ttl_seconds: int | None = None) -> str:
        now = self._clock()
        ttl = self._expires_in if ttl_seconds is None else ttl_seconds
        payload = {
            "data": user.to_claims(),
            "iat": now,
            "exp": now + timedelta(seconds=ttl),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str | None) -> TokenResult:
        if not token:
            return TokenInvalid("missing")
        try:
            # Expiry is checked against the injected clock below.
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp"], "verify_exp": False, "verify_iat": False},
            )
        except jwt.InvalidTokenError as exc:
            return TokenInvalid(type(exc).__name__)

        try:
            expires_at = datetime.fromtimestamp(float(claims["exp"]), UTC)
            user = SafeUser.from_claims(claims["data"])
        except (KeyError, TypeError, ValueError):
            return TokenInvalid("malformed_claims")

        if self._clock() >= expires_at:
            return TokenInvalid("expired")

        return TokenValid(user=user, expires_at=expires_at)


__all__ = ["JwtTokenService", "TokenInvalid", "TokenResult", "TokenValid"]
