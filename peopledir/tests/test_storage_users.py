from __future__ import annotations

from dataclasses import replace
from datetime import timedelta

import pytest

from peopledir.application.use_cases.users.authenticate import AuthenticateUseCase
from peopledir.domain import Storage, User
from peopledir.shared.errors import (
    ConflictError, NotFoundError, UnauthorizedError, ValidationError)


def test_admin_password_scenario(storage: Storage) -> None:
    user = storage.insert_user(User(login="admin", password="geheim", admin=True))

    stored = storage.find_user_by_login("admin")
    assert stored == user
    assert stored.password is None
    assert "geheim" not in stored.password_hash
    assert storage.verify_password(stored.password_hash, "geheim") is True
    assert storage.verify_password(stored.password_hash, "wrong") is False


def test_insert_user_requires_password(storage: Storage) -> None:
    with pytest.raises(ValidationError):
        storage.insert_user(User(login="nopass"))


def test_duplicate_login_conflicts(storage: Storage) -> None:
    storage.insert_user(User(login="admin", password="geheim"))

    with pytest.raises(ConflictError) as exc_info:
        storage.insert_user(User(login="admin", password="other"))

    assert exc_info.value.code == "duplicate_login"
    assert len(storage.list_users()) == 1


def test_rename_onto_existing_login_conflicts(storage: Storage) -> None:
    storage.insert_user(User(login="admin", password="geheim"))
    user = storage.insert_user(User(login="user", password="secret"))

    with pytest.raises(ConflictError):
        storage.update_user(replace(user, login="admin"))

    assert storage.find_user(user.id) == user


def test_update_user_changes_password(storage: Storage) -> None:
    user = storage.insert_user(User(login="user", password="secret"))

    updated = storage.update_user(replace(user, password="n3w"))

    assert updated.version == user.version + 1
    assert updated.password_hash != user.password_hash
    assert storage.verify_password(updated.password_hash, "n3w") is True
    assert storage.verify_password(updated.password_hash, "secret") is False


def test_update_user_keeps_hash_without_password(storage: Storage) -> None:
    user = storage.insert_user(User(login="user", password="secret"))

    updated = storage.update_user(replace(user, admin=True))

    assert updated.admin is True
    assert updated.password_hash == user.password_hash


def test_stale_user_update_conflicts(storage: Storage) -> None:
    user = storage.insert_user(User(login="user", password="secret"))
    storage.update_user(replace(user, admin=True))

    with pytest.raises(ConflictError):
        storage.update_user(replace(user, login="renamed"))

    assert storage.find_user(user.id).login == "user"


def test_find_and_delete_user(storage: Storage) -> None:
    first = storage.insert_user(User(login="first", password="x"))
    second = storage.insert_user(User(login="second", password="y"))

    assert [u.id for u in storage.list_users()] == [first.id, second.id]

    storage.delete_user(first.id)

    with pytest.raises(NotFoundError):
        storage.find_user(first.id)
    with pytest.raises(NotFoundError):
        storage.find_user_by_login("first")
    with pytest.raises(NotFoundError):
        storage.delete_user(first.id)


def test_hash_password_round_trip(storage: Storage) -> None:
    hashed = storage.hash_password("geheim")

    assert storage.verify_password(hashed, "geheim") is True


def test_deleted_user_sessions_do_not_carry_over_to_new_user(storage: Storage, clock) -> None:
    bob = storage.insert_user(User(login="bob", password="hunter22"))
    old = storage.issue_session("bob", timedelta(hours=1))
    other = storage.issue_session("alice", timedelta(hours=1))

    storage.delete_user(bob.id)
    storage.insert_user(User(login="bob", password="different", admin=True))

    with pytest.raises(NotFoundError):
        storage.find_session(old.token)
    with pytest.raises(UnauthorizedError):
        AuthenticateUseCase(storage=storage, clock=clock).execute(old.token)
    assert storage.find_session(other.token) == other


def test_login_rename_drops_sessions_of_old_login(storage: Storage) -> None:
    bob = storage.insert_user(User(login="bob", password="hunter22"))
    old = storage.issue_session("bob", timedelta(hours=1))

    renamed = storage.update_user(replace(bob, login="robert"))
    storage.insert_user(User(login="bob", password="different", admin=True))

    with pytest.raises(NotFoundError):
        storage.find_session(old.token)

    kept = storage.issue_session("robert", timedelta(hours=1))
    storage.update_user(replace(renamed, admin=True))
    assert storage.find_session(kept.token) == kept
