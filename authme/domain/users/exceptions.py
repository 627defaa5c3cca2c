# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Sequence
from http import HTTPStatus

from authme.shared.errors.base import AppError


class DomainError(AppError):
    def __init__(
        self,
        *,
        title: str,
        status: HTTPStatus = HTTPStatus.BAD_REQUEST,
        message: str | None = None,
        errors: Sequence[str] = (),
    ) -> None:
        super().__init__(title=title, status=status, message=message, errors=tuple(errors))


class InvalidUserError(DomainError):
    """A new user row would violate a column constraint."""

    def __init__(self, errors: Sequence[str]) -> None:
        super().__init__(title="Validation error", message="Validation error", errors=errors)


class UserAlreadyExistsError(DomainError):
    GENERIC_MESSAGE = "An account with the provided details already exists."

    def __init__(self, fields: Sequence[str] = (), *, generic: bool = False) -> None:
        self.fields = tuple(fields)
        if generic or not self.fields:
            errors: Sequence[str] = (self.GENERIC_MESSAGE,)
        else:
            errors = tuple(f"{name} must be unique" for name in self.fields)
        super().__init__(title="Validation error", message="Validation error", errors=errors)


class LoginFailedError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            title="Login failed",
            status=HTTPStatus.UNAUTHORIZED,
            message="Login failed",
            errors=("The provided credentials were invalid.",),
        )
