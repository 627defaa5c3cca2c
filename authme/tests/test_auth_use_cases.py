from __future__ import annotations

from datetime import UTC, datetime

import pytest

from authme.application.use_cases.users.login_user import LoginUserUseCase
from authme.application.use_cases.users.logout_user import LogoutUserUseCase
from authme.application.use_cases.users.register_user import RegisterUserUseCase
from authme.domain.users.entities import AuthRecord, PublicUser
from authme.domain.users.exceptions import (
    InvalidUserError,
    LoginFailedError,
    UserAlreadyExistsError,
)
from authme.domain.users.repositories import PasswordHasher, UserRepository
from authme.domain.users.rules import looks_like_email


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self._rows: dict[int, AuthRecord] = {}
        self._seq = 1
        self.add_calls = 0

    def add(self, username: str, email: str, password_hash: str) -> PublicUser:
        self.add_calls += 1
        taken = [
            name
            for name, value in (("username", username), ("email", email))
            if any(getattr(row, name) == value for row in self._rows.values())
        ]
        if taken:
            raise UserAlreadyExistsError(taken)
        now = datetime.now(UTC)
        record = AuthRecord(
            id=self._seq,
            username=username,
            email=email,
            password_hash=password_hash,
            created_at=now,
            updated_at=now,
        )
        self._seq += 1
        self._rows[record.id] = record
        return record.to_public()

    def find_by_id(self, user_id: int) -> PublicUser | None:
        record = self._rows.get(user_id)
        return record.to_public() if record else None

    def find_by_username(self, username: str) -> PublicUser | None:
        for record in self._rows.values():
            if record.username == username:
                return record.to_public()
        return None

    def find_by_email(self, email: str) -> PublicUser | None:
        for record in self._rows.values():
            if record.email == email:
                return record.to_public()
        return None

    def find_by_credential(self, credential: str) -> AuthRecord | None:
        for record in self._rows.values():
            if credential in (record.username, record.email):
                return record
        return None


class RacingUserRepository(InMemoryUserRepository):
    """Pre-checks see nothing; the insert still hits the unique constraint."""

    def find_by_username(self, username: str) -> PublicUser | None:
        return None

    def find_by_email(self, email: str) -> PublicUser | None:
        return None


class DeterministicHasher(PasswordHasher):
    # bcrypt digests are always 60 characters
    def hash(self, password: str) -> str:
        return f"hashed:{password}".ljust(60, "x")[:60]

    def verify(self, password: str, hashed: str) -> bool:
        return hashed == self.hash(password)


@pytest.fixture()
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture()
def register(users: InMemoryUserRepository) -> RegisterUserUseCase:
    return RegisterUserUseCase(users=users, password_hasher=DeterministicHasher())


@pytest.fixture()
def login(users: InMemoryUserRepository) -> LoginUserUseCase:
    return LoginUserUseCase(users=users, password_hasher=DeterministicHasher())


def test_register_user_success(
    users: InMemoryUserRepository, register: RegisterUserUseCase
) -> None:
    user = register.execute("spidey", "spidey@spider.man", "password")

    assert user == PublicUser(id=1, username="spidey", email="spidey@spider.man")
    stored = users.find_by_credential("spidey")
    assert stored is not None
    assert stored.password_hash != "password"
    assert len(stored.password_hash) == 60


def test_register_user_returns_no_password_material(register: RegisterUserUseCase) -> None:
    user = register.execute("spidey", "spidey@spider.man", "password")

    assert set(user.to_dict()) == {"id", "username", "email"}


def test_register_duplicate_username_reports_field(register: RegisterUserUseCase) -> None:
    register.execute("spidey", "spidey@spider.man", "password")

    with pytest.raises(UserAlreadyExistsError) as exc_info:
        register.execute("spidey", "other@spider.man", "password")

    assert exc_info.value.fields == ("username",)
    assert list(exc_info.value.errors) == ["username must be unique"]
    assert int(exc_info.value.status) == 400


def test_register_duplicate_email_reports_field(register: RegisterUserUseCase) -> None:
    register.execute("spidey", "spidey@spider.man", "password")

    with pytest.raises(UserAlreadyExistsError) as exc_info:
        register.execute("peter", "spidey@spider.man", "password")

    assert list(exc_info.value.errors) == ["email must be unique"]


def test_register_duplicate_generic_policy(users: InMemoryUserRepository) -> None:
    use_case = RegisterUserUseCase(
        users=users, password_hasher=DeterministicHasher(), generic_conflicts=True
    )
    use_case.execute("spidey", "spidey@spider.man", "password")

    with pytest.raises(UserAlreadyExistsError) as exc_info:
        use_case.execute("spidey", "spidey@spider.man", "password")

    assert list(exc_info.value.errors) == [UserAlreadyExistsError.GENERIC_MESSAGE]
    assert "username" not in exc_info.value.errors[0]


def test_register_race_on_insert_still_reports_conflict() -> None:
    users = RacingUserRepository()
    use_case = RegisterUserUseCase(users=users, password_hasher=DeterministicHasher())
    use_case.execute("spidey", "spidey@spider.man", "password")

    with pytest.raises(UserAlreadyExistsError) as exc_info:
        use_case.execute("spidey", "new@spider.man", "password")

    assert users.add_calls == 2
    assert list(exc_info.value.errors) == ["username must be unique"]


@pytest.mark.parametrize("username", ["spidey@spider.man", "peter@home.local", "peter@lab.test"])
def test_register_rejects_email_shaped_username(
    users: InMemoryUserRepository, register: RegisterUserUseCase, username: str
) -> None:
    with pytest.raises(InvalidUserError) as exc_info:
        register.execute(username, "spidey@spider.man", "password")

    assert "Cannot be an email." in exc_info.value.errors
    assert users.add_calls == 0


def test_register_rejects_out_of_range_username(register: RegisterUserUseCase) -> None:
    with pytest.raises(InvalidUserError) as exc_info:
        register.execute("x" * 31, "spidey@spider.man", "password")

    assert exc_info.value.errors == ("username must be between 4 and 30 characters",)


def test_login_by_username_and_email(
    register: RegisterUserUseCase, login: LoginUserUseCase
) -> None:
    created = register.execute("spidey", "spidey@spider.man", "password")

    assert login.execute("spidey", "password") == created
    assert login.execute("spidey@spider.man", "password") == created


def test_login_failures_are_indistinguishable(
    register: RegisterUserUseCase, login: LoginUserUseCase
) -> None:
    register.execute("spidey", "spidey@spider.man", "password")

    with pytest.raises(LoginFailedError) as wrong_password:
        login.execute("spidey", "not-the-password")
    with pytest.raises(LoginFailedError) as unknown_user:
        login.execute("nobody", "password")

    assert wrong_password.value.to_dict() == unknown_user.value.to_dict()
    assert int(wrong_password.value.status) == 401
    assert list(wrong_password.value.errors) == ["The provided credentials were invalid."]


def test_logout_is_a_noop_for_any_caller() -> None:
    use_case = LogoutUserUseCase()

    use_case.execute(PublicUser(id=1, username="spidey", email="spidey@spider.man"))
    use_case.execute(None)


def test_register_accepts_email_on_reserved_domain(register: RegisterUserUseCase) -> None:
    user = register.execute("peter", "peter@home.local", "password")

    assert user.email == "peter@home.local"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("peter@home.local", True),
        ("peter@HOME.LOCAL", True),
        ("peter@mirror.onion", True),
        ("peter@spider.man", True),
        ("peter@local", False),
        ("peter@", False),
        ("peter", False),
    ],
)
def test_looks_like_email_is_syntax_only(value: str, expected: bool) -> None:
    assert looks_like_email(value) is expected
