"""Loguru setup and the per-request log context.

Every record is bound with ``request_id`` and ``user_id`` from a ContextVar
that the request logger fills in, so lines from one HTTP exchange can be
grepped together. Both sinks run every message through the sanitiser.
"""

from __future__ import annotations

import logging
import os
import sys
from contextvars import ContextVar
from dataclasses import dataclass, replace
from pathlib import Path

from loguru import logger as _logger

from .sensitive_filter import sanitize_record

_FMT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<lvl>{level:<8}</lvl> | "
    "<magenta>{extra[request_id]}</magenta> "
    "<yellow>u={extra[user_id]}</yellow> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> | "
    "<lvl>{message}</lvl>"
)

_ROTATION = "10 MB"
_RETENTION = 5
_QUIET_LOGGERS = ("werkzeug", "sqlalchemy.engine", "urllib3")


@dataclass(slots=True, frozen=True)
class LogContext:
    request_id: str = "-"
    user_id: int | None = None

    def as_extra(self) -> dict[str, object]:
        return {"request_id": self.request_id, "user_id": self.user_id or "-"}


_CONTEXT: ContextVar[LogContext] = ContextVar("authme_log_context", default=LogContext())


def set_correlation_id(value: str | None) -> None:
    _CONTEXT.set(LogContext(request_id=value or "-"))


def get_correlation_id() -> str:
    return _CONTEXT.get().request_id


def bind_user(user_id: int | None) -> None:
    _CONTEXT.set(replace(_CONTEXT.get(), user_id=user_id))


def clear_correlation_id() -> None:
    _CONTEXT.set(LogContext())


class ContextualLogger:
    """Loguru proxy; every call is bound to the current request context."""

    def __getattr__(self, name):  # pragma: no cover
        return getattr(_logger.bind(**_CONTEXT.get().as_extra()), name)


class _InterceptHandler(logging.Handler):
    # routes stdlib logging (werkzeug, sqlalchemy) into loguru
    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = _logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        _logger.opt(depth=6, exception=record.exc_info).bind(
            **_CONTEXT.get().as_extra()
        ).log(level, record.getMessage())


def _log_file_path() -> Path:
    configured = os.getenv("LOG_FILE")
    path = Path(configured) if configured else Path.cwd() / "instance" / "app.log"
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def setup_logging(level: str | None = None, *, debug_mode: bool = False) -> None:
    level = "DEBUG" if debug_mode else (level or os.getenv("LOG_LEVEL") or "INFO").upper()

    _logger.remove()
    _logger.configure(extra=LogContext().as_extra())
    common = {"level": level, "format": _FMT, "filter": sanitize_record, "diagnose": False}
    _logger.add(sys.stderr, colorize=True, backtrace=debug_mode, **common)
    _logger.add(
        _log_file_path(),
        colorize=False,
        backtrace=False,
        enqueue=True,
        rotation=_ROTATION,
        retention=_RETENTION,
        encoding="utf-8",
        **common,
    )

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


logger = ContextualLogger()

__all__ = [
    "LogContext",
    "bind_user",
    "clear_correlation_id",
    "get_correlation_id",
    "logger",
    "set_correlation_id",
    "setup_logging",
]
