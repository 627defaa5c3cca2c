# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from authme.domain.users.entities import PublicUser
from authme.domain.users.exceptions import InvalidUserError, UserAlreadyExistsError
from authme.domain.users.repositories import PasswordHasher, UserRepository
from authme.domain.users.rules import check_new_user


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
        generic_conflicts: bool = False,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._generic_conflicts = generic_conflicts

    def execute(self, username: str, email: str, password: str) -> PublicUser:
        hashed = self._password_hasher.hash(password)

        errors = check_new_user(username, email, hashed)
        if errors:
            raise InvalidUserError(errors)

        taken = []
        if self._users.find_by_username(username):
            taken.append("username")
        if self._users.find_by_email(email):
            taken.append("email")
        if taken:
            raise UserAlreadyExistsError(taken, generic=self._generic_conflicts)

        try:
            return self._users.add(username, email, hashed)
        except UserAlreadyExistsError as exc:
            # lost a race against a concurrent signup
            raise UserAlreadyExistsError(exc.fields, generic=self._generic_conflicts) from exc
