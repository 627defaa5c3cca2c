# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import hashlib
import secrets
import time
from typing import Any

from flask import Flask, Response, g, request

from authme.shared.config import AppConfig
from authme.shared.logging import clear_correlation_id, logger, set_correlation_id


def _get_client_ip() -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()

    return request.remote_addr or "unknown"


def _get_user_id() -> int | None:
    user = getattr(g, "user", None)
    return getattr(user, "id", None)


def _sanitize_headers(headers: dict[str, str]) -> dict[str, str]:
    sensitive_headers = {
        "authorization", "cookie", "set-cookie",
        "xsrf-token", "x-xsrf-token", "csrf-token", "x-csrf-token",
    }

    sanitized = {}
    for key, value in headers.items():
        if key.lower() in sensitive_headers:
            sanitized[key] = f"<hashed:{hashlib.sha256(value.encode()).hexdigest()[:8]}>"
        else:
            sanitized[key] = value

    return sanitized


def _sanitize_query_params(params: dict[str, Any]) -> dict[str, Any]:
    sensitive_params = {"password", "token", "credential", "secret", "csrf"}

    sanitized = {}
    for key, value in params.items():
        key_lower = key.lower()
        if any(sensitive in key_lower for sensitive in sensitive_params):
            sanitized[key] = "<redacted>"
        else:
            sanitized[key] = value

    return sanitized


def _log_request_start(debug_mode: bool) -> None:
    if not debug_mode:
        return
    headers = _sanitize_headers(dict(request.headers))
    query_params = _sanitize_query_params(dict(request.args))
    logger.debug(
        f"Request started: {request.method} {request.path} "
        f"from {_get_client_ip()}, query={query_params}, headers={headers}, "
        f"body_size={len(request.get_data(cache=True))}"
    )


def _log_request_end(response: Response, start_time: float) -> None:
    duration_ms = (time.perf_counter() - start_time) * 1000.0
    logger.info(
        f"{request.method} {request.path} {response.status_code} "
        f"{duration_ms:.3f} ms - {response.content_length or '-'} "
        f"user={_get_user_id()}"
    )


def configure_request_logging(app: Flask, config: AppConfig) -> None:
    debug_mode = config.debug_logging

    @app.before_request
    def _before_request() -> None:
        correlation_id = request.headers.get("X-Request-ID") or secrets.token_urlsafe(8)
        set_correlation_id(correlation_id)
        g.correlation_id = correlation_id
        g.request_start_time = time.perf_counter()

        _log_request_start(debug_mode)

    @app.after_request
    def _after_request(response: Response) -> Response:
        start_time = getattr(g, "request_start_time", time.perf_counter())
        _log_request_end(response, start_time)
        response.headers.setdefault("X-Request-ID", getattr(g, "correlation_id", "-"))
        return response

    @app.teardown_request
    def _teardown_request(exc: BaseException | None) -> None:
        if exc is not None:
            logger.error(
                f"Request error: {type(exc).__name__} on {request.method} {request.path} "
                f"from {_get_client_ip()}"
            )

        clear_correlation_id()


__all__ = ["configure_request_logging"]
