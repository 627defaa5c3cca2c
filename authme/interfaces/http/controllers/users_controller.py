# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify

from authme.application.use_cases.users.register_user import RegisterUserUseCase
from authme.domain.users.exceptions import DomainError
from authme.infrastructure.audit import AuditAction, audit_log
from authme.interfaces.http.controllers._helpers import get_client_ip, parse_body
from authme.interfaces.http.dto.auth import SignupRequestDTO, UserResponseDTO
from authme.shared.logging import logger
from authme.shared.middleware.auth import SessionGuard


class UsersController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        session_guard: SessionGuard,
    ) -> None:
        self._register_use_case = register_use_case
        self._session_guard = session_guard

    def signup(self) -> tuple[Response, int]:
        dto = parse_body(SignupRequestDTO)
        ip_address = get_client_ip()

        try:
            user = self._register_use_case.execute(dto.username, dto.email, dto.password)
        except DomainError as exc:
            audit_log(
                AuditAction.REGISTER_FAILED,
                ip_address=ip_address,
                details={"username": dto.username, "errors": list(exc.errors)},
                success=False,
            )
            raise

        audit_log(
            AuditAction.REGISTER,
            user_id=user.id,
            ip_address=ip_address,
            details={"username": user.username},
        )

        response = jsonify({"user": UserResponseDTO.from_user(user).model_dump()})
        self._session_guard.set_token_cookie(response, user)
        logger.info(f"auth.signup: ok user_id={user.id}")
        return response, 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("users", __name__, url_prefix="/api/users")
        bp.add_url_rule("", view_func=self.signup, methods=["POST"])
        return bp
