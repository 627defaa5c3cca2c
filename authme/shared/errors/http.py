# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Flask, Response, jsonify, request
from werkzeug.exceptions import HTTPException, NotFound

from authme.shared.config import AppConfig
from authme.shared.logging import logger

from .base import AppError, InternalError, NotFoundError


def handle_app_error(error: AppError, *, include_stack: bool = False) -> tuple[Response, HTTPStatus]:
    response = jsonify(error.to_dict(include_stack=include_stack))
    return response, error.status


def _from_http_exception(exc: HTTPException) -> AppError:
    if isinstance(exc, NotFound):
        error: AppError = NotFoundError()
    else:
        description = exc.description or exc.name
        error = AppError(
            title=exc.name,
            status=HTTPStatus(exc.code or HTTPStatus.INTERNAL_SERVER_ERROR),
            message=description,
            errors=(description,),
        )
    error.__cause__ = exc
    return error


def register_error_handler(app: Flask, config: AppConfig) -> None:
    include_stack = not config.is_production()
    debug_mode = config.debug_logging

    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        logger.warning(
            f"Handled application error '{exc.title}' ({int(exc.status)}) "
            f"on {request.method} {request.path}"
        )
        return handle_app_error(exc, include_stack=include_stack)

    @app.errorhandler(HTTPException)
    def _handle_http(exc: HTTPException):
        return handle_app_error(_from_http_exception(exc), include_stack=include_stack)

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        ip_address = request.headers.get("X-Forwarded-For", "").split(",")[0].strip() or (
            request.remote_addr or "unknown"
        )

        if debug_mode:
            logger.exception(
                f"Unhandled exception: {request.method} {request.path} "
                f"from {ip_address}, query={dict(request.args)}, body_size={len(request.data)}"
            )
        else:
            logger.error(f"Error: {type(exc).__name__} on {request.method} {request.path}")

        error = InternalError(None if config.is_production() else str(exc))
        error.__cause__ = exc
        return handle_app_error(error, include_stack=include_stack)
