# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, scoped_session, sessionmaker
from sqlalchemy.pool import StaticPool

from authme.shared.config import DatabaseConfig
from authme.shared.logging import logger


class Base(DeclarativeBase):
    pass


def create_engine_from_config(config: DatabaseConfig) -> Engine:
    kwargs: dict[str, Any] = {"echo": config.echo, "future": True, "pool_pre_ping": True}
    connect_args: dict[str, object] = {}

    if config.is_sqlite():
        connect_args = {
            "check_same_thread": False,
            "timeout": int(config.pool_timeout),
        }
    if config.is_memory():
        # one shared connection, otherwise every checkout sees an empty database
        kwargs["poolclass"] = StaticPool
    else:
        kwargs.update(
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_timeout=config.pool_timeout,
        )

    return create_engine(config.url, connect_args=connect_args, **kwargs)


class Database:
    """Engine plus a thread-scoped session factory for one application."""

    def __init__(self, config: DatabaseConfig) -> None:
        self.engine: Engine = create_engine_from_config(config)
        self.session_factory = scoped_session(
            sessionmaker(
                bind=self.engine, autoflush=False, autocommit=False, expire_on_commit=False
            )
        )

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        session = self.session_factory()
        logger.debug("db.session: opened scoped session")
        try:
            yield session
            session.commit()
            logger.debug("db.session: committed scoped session")
        except Exception:
            logger.debug("db.session: error, rolling back")
            session.rollback()
            raise
        finally:
            session.close()
            self.session_factory.remove()
            logger.debug("db.session: closed scoped session")

    def init_db(self) -> None:
        # registers the mapped tables on Base.metadata
        from authme.infrastructure.db import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info("Database schema ensured")

    def drop_all(self) -> None:
        Base.metadata.drop_all(bind=self.engine)

    def dispose(self) -> None:
        self.session_factory.remove()
        self.engine.dispose()
