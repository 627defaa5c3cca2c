# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Security audit trail for authentication events.

Events are emitted as single ``AUDIT:`` log lines; there is no audit table.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from authme.shared.logging import logger


class AuditAction(str, Enum):
    REGISTER = "register"
    REGISTER_FAILED = "register_failed"
    LOGIN_SUCCESS = "login_success"
    LOGIN_FAILED = "login_failed"
    LOGOUT = "logout"


_REDACT_KEYS = ("password", "token", "secret", "csrf", "hash")


def _redact(details: Mapping[str, Any]) -> dict[str, Any]:
    return {
        key: "***REDACTED***" if any(word in key.lower() for word in _REDACT_KEYS) else value
        for key, value in details.items()
    }


@dataclass(slots=True, frozen=True)
class AuditEvent:
    action: AuditAction
    user_id: int | None = None
    ip_address: str | None = None
    success: bool = True
    details: Mapping[str, Any] = field(default_factory=dict)

    def to_log_line(self) -> str:
        parts = [
            f"AUDIT: {self.action.value}",
            f"user_id={self.user_id if self.user_id is not None else '-'}",
            f"ip={self.ip_address or 'unknown'}",
            f"success={self.success}",
        ]
        if self.details:
            parts.append(f"details={_redact(self.details)}")
        return " | ".join(parts)


def audit_log(
    action: AuditAction,
    user_id: int | None = None,
    ip_address: str | None = None,
    details: Mapping[str, Any] | None = None,
    success: bool = True,
) -> AuditEvent:
    event = AuditEvent(
        action=action,
        user_id=user_id,
        ip_address=ip_address,
        success=success,
        details=details or {},
    )
    if success:
        logger.info(event.to_log_line())
    else:
        logger.warning(event.to_log_line())
    return event


__all__ = ["AuditAction", "AuditEvent", "audit_log"]
