# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""User projections.

Each view carries a fixed field set and call sites pick the one they need:
``PublicUser`` for responses, ``SafeUser`` for token claims and ``AuthRecord``
for the password comparison during login. Only ``AuthRecord`` ever holds the
password hash.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(slots=True, frozen=True)
class PublicUser:
    id: int
    username: str
    email: str

    def to_safe(self) -> SafeUser:
        return SafeUser(id=self.id, username=self.username, email=self.email)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "username": self.username, "email": self.email}


@dataclass(slots=True, frozen=True)
class SafeUser:
    id: int
    username: str
    email: str

    def to_claims(self) -> dict[str, Any]:
        return {"id": self.id, "username": self.username, "email": self.email}

    @classmethod
    def from_claims(cls, claims: Mapping[str, Any]) -> SafeUser:
        return cls(
            id=int(claims["id"]),
            username=str(claims["username"]),
            email=str(claims["email"]),
        )


@dataclass(slots=True, frozen=True)
class AuthRecord:
    id: int
    username: str
    email: str
    password_hash: str
    created_at: datetime
    updated_at: datetime

    def to_public(self) -> PublicUser:
        return PublicUser(id=self.id, username=self.username, email=self.email)
