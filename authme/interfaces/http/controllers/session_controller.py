# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify

from authme.application.use_cases.users.login_user import LoginUserUseCase
from authme.application.use_cases.users.logout_user import LogoutUserUseCase
from authme.domain.users.exceptions import LoginFailedError
from authme.infrastructure.audit import AuditAction, audit_log
from authme.interfaces.http.controllers._helpers import get_client_ip, parse_body
from authme.interfaces.http.dto.auth import LoginRequestDTO, MessageDTO, UserResponseDTO
from authme.shared.logging import logger
from authme.shared.middleware.auth import SessionGuard


class SessionController:
    def __init__(
        self,
        *,
        login_use_case: LoginUserUseCase,
        logout_use_case: LogoutUserUseCase,
        session_guard: SessionGuard,
    ) -> None:
        self._login_use_case = login_use_case
        self._logout_use_case = logout_use_case
        self._session_guard = session_guard

    def login(self) -> tuple[Response, int]:
        dto = parse_body(LoginRequestDTO)
        ip_address = get_client_ip()

        try:
            user = self._login_use_case.execute(dto.credential, dto.password)
        except LoginFailedError:
            audit_log(
                AuditAction.LOGIN_FAILED,
                ip_address=ip_address,
                details={"credential": dto.credential},
                success=False,
            )
            raise

        audit_log(AuditAction.LOGIN_SUCCESS, user_id=user.id, ip_address=ip_address)

        response = jsonify({"user": UserResponseDTO.from_user(user).model_dump()})
        self._session_guard.set_token_cookie(response, user)
        logger.info(f"auth.login: ok user_id={user.id}")
        return response, 200

    def logout(self) -> tuple[Response, int]:
        user = self._session_guard.restore()
        self._logout_use_case.execute(user)

        audit_log(
            AuditAction.LOGOUT,
            user_id=user.id if user else None,
            ip_address=get_client_ip(),
        )

        response = jsonify(MessageDTO().model_dump())
        self._session_guard.clear_token_cookie(response)
        return response, 200

    def current(self) -> tuple[Response, int]:
        user = self._session_guard.restore()
        if user is None:
            return jsonify({}), 200
        return jsonify({"user": UserResponseDTO.from_user(user).model_dump()}), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("session", __name__, url_prefix="/api/session")
        bp.add_url_rule("", view_func=self.login, methods=["POST"])
        bp.add_url_rule("", view_func=self.logout, methods=["DELETE"])
        bp.add_url_rule("", view_func=self.current, methods=["GET"])
        return bp
