# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from authme.domain.users.entities import PublicUser
from authme.domain.users.exceptions import LoginFailedError
from authme.domain.users.repositories import PasswordHasher, UserRepository


class LoginUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher

    def execute(self, credential: str, password: str) -> PublicUser:
        record = self._users.find_by_credential(credential)
        password_valid = record is not None and self._password_hasher.verify(
            password, record.password_hash
        )

        if not password_valid:
            raise LoginFailedError()

        user = self._users.find_by_id(record.id)
        if user is None:
            raise LoginFailedError()
        return user
