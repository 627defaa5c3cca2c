# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import traceback
from collections.abc import Sequence
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any


@dataclass(slots=True, eq=False)
class AppError(Exception):
    title: str
    status: HTTPStatus
    message: str | None = None
    errors: Sequence[str] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.message is None:
            self.message = self.title
        Exception.__init__(self, self.message)

    def to_dict(self, *, include_stack: bool = False) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "title": self.title,
            "message": self.message,
            "errors": list(self.errors),
            "status": int(self.status),
        }
        if include_stack:
            payload["stack"] = "".join(traceback.format_exception(self))
        return payload


class ValidationError(AppError):
    """Request body failed one or more field checks."""

    def __init__(self, errors: Sequence[str], *, title: str = "Bad request.") -> None:
        super().__init__(
            title=title,
            status=HTTPStatus.BAD_REQUEST,
            message="Bad Request.",
            errors=tuple(errors),
        )


class UnauthorizedError(AppError):
    def __init__(self) -> None:
        super().__init__(
            title="Unauthorized",
            status=HTTPStatus.UNAUTHORIZED,
            errors=("Unauthorized",),
        )


class NotFoundError(AppError):
    def __init__(self) -> None:
        message = "The requested resource couldn't be found."
        super().__init__(
            title="Resource Not Found",
            status=HTTPStatus.NOT_FOUND,
            message=message,
            errors=(message,),
        )


class CsrfError(AppError):
    def __init__(self) -> None:
        super().__init__(
            title="Invalid CSRF token",
            status=HTTPStatus.FORBIDDEN,
            message="invalid csrf token",
            errors=("invalid csrf token",),
        )


class InternalError(AppError):
    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            title="Server Error",
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
            message=message or "Internal server error",
        )
