# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import NoReturn

from pydantic import ValidationError as PydanticValidationError

from .base import ValidationError


def format_pydantic_errors(exc: PydanticValidationError) -> list[str]:
    """One message per offending field, in field declaration order."""
    messages: list[str] = []
    seen: set[str] = set()

    for error in exc.errors():
        loc = error.get("loc", ())
        field_path = ".".join(str(part) for part in loc if part is not None)
        if field_path in seen:
            continue
        seen.add(field_path)
        messages.append(str(error.get("msg", "Invalid value")))

    return messages


def raise_validation_error(exc: PydanticValidationError) -> NoReturn:
    raise ValidationError(format_pydantic_errors(exc)) from exc


__all__ = [
    "format_pydantic_errors",
    "raise_validation_error",
]
