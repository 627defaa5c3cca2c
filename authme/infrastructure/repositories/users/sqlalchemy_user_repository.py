# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from authme.domain.users.entities import AuthRecord, PublicUser
from authme.domain.users.exceptions import UserAlreadyExistsError
from authme.domain.users.repositories import UserRepository
from authme.infrastructure.db import Database
from authme.infrastructure.db.models import User
from authme.shared.logging import logger

_UNIQUE_COLUMNS = ("username", "email")


def _to_public(row: User) -> PublicUser:
    return PublicUser(id=row.id, username=row.username, email=row.email)


def _to_auth(row: User) -> AuthRecord:
    return AuthRecord(
        id=row.id,
        username=row.username,
        email=row.email,
        password_hash=row.password_hash,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _conflicting_columns(exc: IntegrityError) -> list[str]:
    detail = str(exc.orig).lower()
    return [column for column in _UNIQUE_COLUMNS if column in detail]


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, database: Database) -> None:
        self._database = database

    def add(self, username: str, email: str, password_hash: str) -> PublicUser:
        try:
            with self._database.session_scope() as session:
                row = User(username=username, email=email, password_hash=password_hash)
                session.add(row)
                session.flush()
                session.refresh(row)
                user = _to_public(row)
        except IntegrityError as exc:
            columns = _conflicting_columns(exc)
            logger.warning(f"users.add: unique constraint violated on {columns or 'unknown'}")
            raise UserAlreadyExistsError(columns) from exc
        logger.info(f"users.add: created user_id={user.id}")
        return user

    def find_by_id(self, user_id: int) -> PublicUser | None:
        with self._database.session_scope() as session:
            row = session.get(User, user_id)
            return _to_public(row) if row else None

    def find_by_username(self, username: str) -> PublicUser | None:
        with self._database.session_scope() as session:
            row = session.query(User).filter(User.username == username).first()
            return _to_public(row) if row else None

    def find_by_email(self, email: str) -> PublicUser | None:
        with self._database.session_scope() as session:
            row = session.query(User).filter(User.email == email).first()
            return _to_public(row) if row else None

    def find_by_credential(self, credential: str) -> AuthRecord | None:
        with self._database.session_scope() as session:
            row = (
                session.query(User)
                .filter(or_(User.username == credential, User.email == credential))
                .first()
            )
            return _to_auth(row) if row else None
