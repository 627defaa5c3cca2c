# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from email_validator import SPECIAL_USE_DOMAIN_NAMES, EmailNotValidError, validate_email

USERNAME_MIN_LENGTH = 4
USERNAME_MAX_LENGTH = 30
EMAIL_MIN_LENGTH = 3
EMAIL_MAX_LENGTH = 256
PASSWORD_HASH_LENGTH = 60

# any ordinary label; only the syntax of the domain matters here
_STAND_IN_TLD = "example"


def _without_special_use_tld(value: str) -> str:
    # email-validator refuses .local, .test, .onion... outright, which is a
    # deliverability policy rather than a syntax rule
    local, _, domain = value.rpartition("@")
    lowered = domain.lower()
    for name in SPECIAL_USE_DOMAIN_NAMES:
        if lowered == name or lowered.endswith("." + name):
            return f"{local}@{domain[: len(domain) - len(name)]}{_STAND_IN_TLD}"
    return value


def looks_like_email(value: str) -> bool:
    """Syntax-only e-mail check; no DNS lookups, reserved domains allowed."""
    if not value or "@" not in value:
        return False
    try:
        validate_email(_without_special_use_tld(value), check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def check_new_user(username: str, email: str, password_hash: str) -> list[str]:
    """Column constraints for a new row, one message per violated field."""
    errors: list[str] = []

    if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
        errors.append(
            f"username must be between {USERNAME_MIN_LENGTH} and {USERNAME_MAX_LENGTH} characters"
        )
    elif looks_like_email(username):
        errors.append("Cannot be an email.")

    if not EMAIL_MIN_LENGTH <= len(email) <= EMAIL_MAX_LENGTH:
        errors.append(
            f"email must be between {EMAIL_MIN_LENGTH} and {EMAIL_MAX_LENGTH} characters"
        )
    elif not looks_like_email(email):
        errors.append("email must be a valid email address")

    if len(password_hash) != PASSWORD_HASH_LENGTH:
        errors.append(f"password hash must be exactly {PASSWORD_HASH_LENGTH} characters")

    return errors


__all__ = [
    "EMAIL_MAX_LENGTH",
    "EMAIL_MIN_LENGTH",
    "PASSWORD_HASH_LENGTH",
    "USERNAME_MAX_LENGTH",
    "USERNAME_MIN_LENGTH",
    "check_new_user",
    "looks_like_email",
]
