# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from functools import cached_property

from authme.application.services.password_hashing import BcryptPasswordHasher
from authme.application.services.tokens import JwtTokenService
from authme.application.use_cases.users.login_user import LoginUserUseCase
from authme.application.use_cases.users.logout_user import LogoutUserUseCase
from authme.application.use_cases.users.register_user import RegisterUserUseCase
from authme.infrastructure.db import Database
from authme.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyUserRepository,
)
from authme.interfaces.http.controllers.csrf_controller import CsrfController, FrontendController
from authme.interfaces.http.controllers.session_controller import SessionController
from authme.interfaces.http.controllers.users_controller import UsersController
from authme.shared.config import AppConfig
from authme.shared.middleware.auth import SessionGuard
from authme.shared.middleware.csrf import CsrfGuard


class Container:
    def __init__(self, config: AppConfig) -> None:
        self.config = config

    @cached_property
    def database(self) -> Database:
        return Database(self.config.database)

    @cached_property
    def password_hasher(self) -> BcryptPasswordHasher:
        return BcryptPasswordHasher()

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(self.database)

    @cached_property
    def token_service(self) -> JwtTokenService:
        return JwtTokenService(
            secret=self.config.jwt.secret,
            expires_in=self.config.jwt.expires_in,
            algorithm=self.config.jwt.algorithm,
        )

    @cached_property
    def session_guard(self) -> SessionGuard:
        return SessionGuard(
            tokens=self.token_service,
            users=self.user_repository,
            config=self.config,
        )

    @cached_property
    def csrf_guard(self) -> CsrfGuard:
        return CsrfGuard(self.config)

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            users=self.user_repository,
            password_hasher=self.password_hasher,
            generic_conflicts=self.config.security.generic_signup_conflicts,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def logout_user_use_case(self) -> LogoutUserUseCase:
        return LogoutUserUseCase()

    @cached_property
    def session_controller(self) -> SessionController:
        return SessionController(
            login_use_case=self.login_user_use_case,
            logout_use_case=self.logout_user_use_case,
            session_guard=self.session_guard,
        )

    @cached_property
    def users_controller(self) -> UsersController:
        return UsersController(
            register_use_case=self.register_user_use_case,
            session_guard=self.session_guard,
        )

    @cached_property
    def csrf_controller(self) -> CsrfController:
        return CsrfController(csrf_guard=self.csrf_guard)

    @cached_property
    def frontend_controller(self) -> FrontendController:
        return FrontendController(
            csrf_guard=self.csrf_guard,
            build_dir=self.config.frontend_build_dir,
        )
