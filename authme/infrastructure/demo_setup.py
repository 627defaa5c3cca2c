# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from authme.application.use_cases.users.register_user import RegisterUserUseCase
from authme.domain.users.entities import PublicUser
from authme.domain.users.repositories import UserRepository
from authme.shared.logging import logger

DEMO_USERNAME = "Demo-lition"
DEMO_EMAIL = "demo@user.io"
DEMO_PASSWORD = "password"


class DemoSetupError(Exception):
    pass


def seed_demo_user(users: UserRepository, register: RegisterUserUseCase) -> PublicUser:
    """Create the demo account unless it already exists."""
    existing = users.find_by_username(DEMO_USERNAME)
    if existing:
        logger.info(f"demo_setup: user '{DEMO_USERNAME}' already exists (id={existing.id})")
        return existing

    try:
        user = register.execute(DEMO_USERNAME, DEMO_EMAIL, DEMO_PASSWORD)
    except Exception as e:
        logger.error(f"demo_setup: failed to create demo user: {e}")
        raise DemoSetupError(f"Failed to create demo user: {e}") from e

    logger.info(f"demo_setup: created user '{DEMO_USERNAME}' (id={user.id})")
    return user


__all__ = [
    "DEMO_EMAIL",
    "DEMO_PASSWORD",
    "DEMO_USERNAME",
    "DemoSetupError",
    "seed_demo_user",
]
