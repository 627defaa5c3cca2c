# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Protocol

from .entities import AuthRecord, PublicUser


class UserRepository(Protocol):
    def add(self, username: str, email: str, password_hash: str) -> PublicUser: ...
    def find_by_id(self, user_id: int) -> PublicUser | None: ...
    def find_by_username(self, username: str) -> PublicUser | None: ...
    def find_by_email(self, email: str) -> PublicUser | None: ...
    def find_by_credential(self, credential: str) -> AuthRecord | None: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...
