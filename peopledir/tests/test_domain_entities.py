from __future__ import annotations

from datetime import UTC, datetime

import pytest

from peopledir.domain import TOKEN_BYTES, Person, PhoneNumber, Session, User, new_token
from peopledir.shared.errors import ValidationError

NOW = datetime(2024, 3, 1, 9, 30, tzinfo=UTC)


class PlainHasher:
    def hash(self, password: str) -> str:
        return f"plain${password}"

    def verify(self, hashed: str, password: str) -> bool:
        return hashed == f"plain${password}"


def test_person_insert_preparation_bumps_version_and_fills_timestamps() -> None:
    person = Person(name="Tamara Skibicki").prepared_for_insert(NOW)

    assert person.version == 1
    assert person.created_at == NOW
    assert person.changed_at == NOW


def test_person_insert_keeps_supplied_timestamps() -> None:
    earlier = datetime(2020, 1, 1, tzinfo=UTC)
    person = Person(name="Ada", created_at=earlier, changed_at=earlier).prepared_for_insert(NOW)

    assert person.created_at == earlier
    assert person.changed_at == earlier


@pytest.mark.parametrize("name", ["", "   "])
def test_person_requires_name(name: str) -> None:
    with pytest.raises(ValidationError) as exc_info:
        Person(name=name).prepared_for_insert(NOW)

    assert exc_info.value.context["fields"] == ["name"]


def test_person_accepts_phone_number_dicts() -> None:
    person = Person(name="Ada", phone_numbers=[{"type": "work", "number": "555-0100"}])

    assert person.phone_numbers == (PhoneNumber(type="work", number="555-0100"),)


def test_user_password_is_hashed_and_dropped() -> None:
    user = User(login="admin", password="geheim").prepared_for_insert(NOW, PlainHasher())

    assert user.password_hash == "plain$geheim"
    assert user.password is None
    assert "geheim" not in repr(user)


def test_user_without_password_hash_is_invalid() -> None:
    with pytest.raises(ValidationError):
        User(login="admin").prepared_for_insert(NOW, PlainHasher())


def test_user_requires_login() -> None:
    with pytest.raises(ValidationError):
        User(login="", password="geheim").prepared_for_insert(NOW, PlainHasher())


def test_user_update_keeps_hash_when_no_password_given() -> None:
    stored = User(login="admin", password_hash="plain$old", created_at=NOW, changed_at=NOW, version=3)

    updated = stored.prepared_for_update(NOW, PlainHasher())

    assert updated.password_hash == "plain$old"
    assert updated.version == 4


def test_session_expiry_is_strict() -> None:
    session = Session(token="a" * 64, login="user", valid_until=NOW)

    assert session.is_expired(NOW) is False
    assert session.is_expired(NOW.replace(microsecond=1)) is True


def test_new_token_is_hex_of_expected_length() -> None:
    token = new_token()

    assert len(token) == TOKEN_BYTES * 2
    int(token, 16)
    assert token != new_token()
