# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any, TypeVar

from flask import request
from pydantic import BaseModel, ValidationError

from authme.shared.errors.validation import raise_validation_error

DTO = TypeVar("DTO", bound=BaseModel)


def get_client_ip() -> str | None:
    ip_address = request.headers.get("X-Forwarded-For", request.remote_addr)
    if ip_address and "," in ip_address:
        ip_address = ip_address.split(",")[0].strip()
    return ip_address


def parse_body(dto: type[DTO]) -> DTO:
    payload: Any = request.get_json(silent=True)
    if payload is None:
        payload = {}
    try:
        return dto.model_validate(payload)
    except ValidationError as exc:
        raise_validation_error(exc)
