# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Redaction of credentials from log messages.

Runs as the loguru sink filter, so nothing reaches stderr or the log file
without passing through ``sanitize_message``.
"""

from __future__ import annotations

import re
from typing import Any, NamedTuple

_REDACTED = "***REDACTED***"


class Redaction(NamedTuple):
    pattern: re.Pattern[str]
    replacement: str


def _rule(pattern: str, replacement: str, flags: int = re.IGNORECASE) -> Redaction:
    return Redaction(re.compile(pattern, flags), replacement)


def _assignment(key: str, value: str = r"[^'\"\s,;}]+") -> Redaction:
    # key=value, key: value, "key": "value"
    return _rule(rf"({key}['\"]?\s*[:=]\s*['\"]?)({value})", rf"\1{_REDACTED}")


REDACTIONS: tuple[Redaction, ...] = (
    # whole headers first; they may carry any of the values below
    _rule(r"(authorization\s*:\s*)([^\r\n]{10,})", rf"\1{_REDACTED}"),
    _rule(r"((?:set-)?cookie\s*:\s*)([^\r\n]{10,})", rf"\1{_REDACTED}"),
    # session JWTs wherever they appear
    _rule(r"\beyJ[\w-]+\.[\w-]+\.[\w-]+", "***JWT***", 0),
    _rule(r"(bearer\s+)([\w.-]{20,})", rf"\1{_REDACTED}"),
    _assignment(r"jwt[_-]?secret"),
    _assignment(r"secret[_-]?key"),
    _assignment(r"password_hash", r"\$2[aby]?\$[^'\"\s]+"),
    _assignment(r"password"),
    _assignment(r"(?:_csrf|xsrf[_-]?token|csrf[_-]?token)"),
    _assignment(r"\btoken", r"[\w.-]{16,}"),
    _rule(r"((?:postgres(?:ql)?|mysql|sqlite)(?:\+\w+)?://[^:/\s]+:)([^@\s]+)@", rf"\1{_REDACTED}@"),
    # keep the domain so signup problems stay debuggable
    _rule(r"[\w.%+-]+@([A-Za-z0-9.-]+\.[A-Za-z]{2,})", r"***@\1", 0),
)


def sanitize_message(message: str) -> str:
    for rule in REDACTIONS:
        message = rule.pattern.sub(rule.replacement, message)
    return message


def sanitize_record(record: dict[str, Any]) -> bool:
    record["message"] = sanitize_message(record["message"])
    return True


__all__ = ["REDACTIONS", "Redaction", "sanitize_message", "sanitize_record"]
