from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from authme.domain.users.entities import AuthRecord, PublicUser
from authme.domain.users.exceptions import UserAlreadyExistsError
from authme.infrastructure.db import Database
from authme.infrastructure.db.models import User
from authme.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyUserRepository,
)
from authme.shared.config import DatabaseConfig

HASH = "$2b$10$" + "a" * 53


@pytest.fixture()
def database(tmp_path: Path) -> Iterator[Database]:
    db = Database(DatabaseConfig(url=f"sqlite:///{tmp_path / 'users.db'}"))
    db.init_db()
    yield db
    db.drop_all()
    db.dispose()


@pytest.fixture()
def repository(database: Database) -> SqlAlchemyUserRepository:
    return SqlAlchemyUserRepository(database)


def test_add_returns_public_view(repository: SqlAlchemyUserRepository) -> None:
    user = repository.add("spidey", "spidey@spider.man", HASH)

    assert isinstance(user, PublicUser)
    assert user.id > 0
    assert repository.find_by_id(user.id) == user
    assert repository.find_by_username("spidey") == user
    assert repository.find_by_email("spidey@spider.man") == user


def test_credential_lookup_matches_username_or_email(
    repository: SqlAlchemyUserRepository,
) -> None:
    created = repository.add("spidey", "spidey@spider.man", HASH)

    by_name = repository.find_by_credential("spidey")
    by_email = repository.find_by_credential("spidey@spider.man")

    assert isinstance(by_name, AuthRecord)
    assert by_name == by_email
    assert by_name.password_hash == HASH
    assert by_name.to_public() == created
    assert by_name.created_at is not None


def test_lookups_miss_cleanly(repository: SqlAlchemyUserRepository) -> None:
    assert repository.find_by_id(404) is None
    assert repository.find_by_username("nobody") is None
    assert repository.find_by_email("nobody@spider.man") is None
    assert repository.find_by_credential("nobody") is None


@pytest.mark.parametrize(
    ("username", "email", "column"),
    [
        ("spidey", "other@spider.man", "username"),
        ("peter", "spidey@spider.man", "email"),
    ],
)
def test_unique_constraint_maps_to_domain_error(
    repository: SqlAlchemyUserRepository, database: Database, username: str, email: str, column: str
) -> None:
    repository.add("spidey", "spidey@spider.man", HASH)

    with pytest.raises(UserAlreadyExistsError) as exc_info:
        repository.add(username, email, HASH)

    assert exc_info.value.fields == (column,)
    with database.session_scope() as session:
        assert session.query(User).count() == 1
