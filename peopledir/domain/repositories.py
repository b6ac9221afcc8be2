# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Capability interfaces of the storage layer.

Every implementation of :class:`Storage` must behave the same way for the
same sequence of calls, so one test suite can run against all of them.
Records are returned as value copies; mutating them never changes stored
state without a version-checked update.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .people.entities import Person
    from .users.entities import Session, User


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, hashed: str, password: str) -> bool: ...


class PersonRepository(Protocol):
    def insert_person(self, person: Person) -> Person: ...
    def find_person(self, person_id: int) -> Person: ...
    def list_people(self) -> Sequence[Person]: ...
    def update_person(self, person: Person) -> Person: ...
    def delete_person(self, person_id: int) -> None: ...
    def fuzzy_find_people(self, query: str) -> Sequence[Person]: ...


class UserRepository(Protocol):
    def insert_user(self, user: User) -> User: ...
    def find_user(self, user_id: int) -> User: ...
    def find_user_by_login(self, login: str) -> User: ...
    def list_users(self) -> Sequence[User]: ...
    def update_user(self, user: User) -> User: ...
    def delete_user(self, user_id: int) -> None: ...


class SessionRepository(Protocol):
    def issue_session(self, login: str, ttl: timedelta) -> Session: ...
    def find_session(self, token: str) -> Session: ...
    def invalidate_session(self, session: Session) -> None: ...
    def expire_sessions(self, now: datetime) -> int: ...


class Storage(PersonRepository, UserRepository, SessionRepository, Protocol):
    def hash_password(self, password: str) -> str: ...
    def verify_password(self, hashed: str, password: str) -> bool: ...
    def close(self) -> None: ...
