# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import AuthRecord, PublicUser, SafeUser
from .exceptions import InvalidUserError, LoginFailedError, UserAlreadyExistsError
from .repositories import PasswordHasher, UserRepository

__all__ = [
    "AuthRecord",
    "PublicUser",
    "SafeUser",
    "InvalidUserError",
    "LoginFailedError",
    "UserAlreadyExistsError",
    "PasswordHasher",
    "UserRepository",
]
