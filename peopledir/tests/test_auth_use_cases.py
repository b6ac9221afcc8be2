from __future__ import annotations

from datetime import timedelta

import pytest

from peopledir.application.use_cases.users.authenticate import AuthenticateUseCase
from peopledir.application.use_cases.users.login_user import LoginUserUseCase
from peopledir.application.use_cases.users.logout_user import LogoutUserUseCase
from peopledir.application.use_cases.users.update_user import UpdateUserUseCase
from peopledir.domain import Storage, User
from peopledir.infrastructure.admin_setup import ensure_admin
from peopledir.shared.errors import (
    ConflictError, InvalidCredentialsError, NotFoundError, UnauthorizedError)


@pytest.fixture()
def alice(storage: Storage) -> User:
    return storage.insert_user(User(login="alice", password="secret123"))


def test_login_issues_session(storage: Storage, alice: User, clock) -> None:
    use_case = LoginUserUseCase(storage=storage, session_ttl=timedelta(hours=1))

    session, user = use_case.execute("alice", "secret123")

    assert user == alice
    assert session.login == "alice"
    assert session.valid_until == clock.now + timedelta(hours=1)
    assert storage.find_session(session.token) == session


@pytest.mark.parametrize(("login", "password"), [("alice", "nope"), ("mallory", "secret123")])
def test_login_rejects_bad_credentials(
    storage: Storage, alice: User, login: str, password: str
) -> None:
    use_case = LoginUserUseCase(storage=storage, session_ttl=timedelta(hours=1))

    with pytest.raises(InvalidCredentialsError) as exc_info:
        use_case.execute(login, password)

    assert exc_info.value.code == "invalid_credentials"


def test_authenticate_resolves_principal(storage: Storage, alice: User, clock) -> None:
    session = storage.issue_session("alice", timedelta(minutes=5))

    principal = AuthenticateUseCase(storage=storage, clock=clock).execute(session.token)

    assert principal.session == session
    assert principal.user == alice


def test_authenticate_rejects_expired_session_before_sweep(
    storage: Storage, alice: User, clock
) -> None:
    session = storage.issue_session("alice", timedelta(minutes=5))
    clock.advance(timedelta(minutes=6))

    with pytest.raises(UnauthorizedError):
        AuthenticateUseCase(storage=storage, clock=clock).execute(session.token)


@pytest.mark.parametrize("token", ["", "f" * 64])
def test_authenticate_rejects_unknown_tokens(storage: Storage, clock, token: str) -> None:
    with pytest.raises(UnauthorizedError):
        AuthenticateUseCase(storage=storage, clock=clock).execute(token)


def test_logout_invalidates_once(storage: Storage, alice: User) -> None:
    session = storage.issue_session("alice", timedelta(minutes=5))
    use_case = LogoutUserUseCase(storage=storage)

    use_case.execute(session)

    with pytest.raises(NotFoundError):
        use_case.execute(session)


def test_update_user_keeps_hash_unless_password_given(storage: Storage, alice: User) -> None:
    use_case = UpdateUserUseCase(storage=storage)

    promoted = use_case.execute(alice.id, login="alice", admin=True, version=alice.version)
    assert promoted.admin is True
    assert promoted.password_hash == alice.password_hash

    changed = use_case.execute(
        alice.id, login="alice", admin=True, version=promoted.version, password="n3w-secret"
    )
    assert storage.verify_password(changed.password_hash, "n3w-secret") is True

    with pytest.raises(ConflictError):
        use_case.execute(alice.id, login="alice", admin=False, version=alice.version)


def test_ensure_admin_creates_then_promotes(storage: Storage, alice: User) -> None:
    created = ensure_admin(storage, "root", "toor")
    assert created.admin is True
    assert storage.verify_password(created.password_hash, "toor") is True

    promoted = ensure_admin(storage, "alice", "ignored")
    assert promoted.admin is True
    assert promoted.password_hash == alice.password_hash

    assert ensure_admin(storage, "alice", "ignored") == promoted
