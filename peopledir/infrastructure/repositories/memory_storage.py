# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""In-memory storage used by tests and the ``memory`` backend."""

from __future__ import annotations

import threading
from collections.abc import Callable, Sequence
from dataclasses import replace
from datetime import datetime, timedelta

from peopledir.domain import PasswordHasher, Person, Session, Storage, User, new_token
from peopledir.shared.errors import ConflictError, NotFoundError
from peopledir.shared.logging import logger
from peopledir.shared.utils.clock import as_utc, utcnow


class InMemoryStorage(Storage):
    """Keeps records in ordered lists behind one lock.

    Stored entities are frozen dataclasses, so handing them out never
    exposes mutable state. Error kinds and version rules match
    :class:`SqlAlchemyStorage` exactly.
    """

    def __init__(
        self,
        hasher: PasswordHasher,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._hasher = hasher
        self._clock = clock
        self._lock = threading.RLock()
        self._people: list[Person] = []
        self._users: list[User] = []
        self._sessions: list[Session] = []
        self._next_person_id = 1
        self._next_user_id = 1

    # people

    def insert_person(self, person: Person) -> Person:
        prepared = person.prepared_for_insert(self._clock())
        with self._lock:
            stored = replace(prepared, id=self._next_person_id)
            self._next_person_id += 1
            self._people.append(stored)
        logger.debug(f"storage.memory: inserted {stored} version={stored.version}")
        return stored

    def find_person(self, person_id: int) -> Person:
        with self._lock:
            return self._people[self._person_index(person_id)]

    def list_people(self) -> Sequence[Person]:
        with self._lock:
            return list(self._people)

    def update_person(self, person: Person) -> Person:
        prepared = person.prepared_for_update(self._clock())
        with self._lock:
            for i, current in enumerate(self._people):
                if current.id == person.id and current.version == person.version:
                    stored = replace(prepared, created_at=current.created_at)
                    self._people[i] = stored
                    break
            else:
                raise ConflictError("person", person.id)
        logger.debug(f"storage.memory: updated {stored} version={stored.version}")
        return stored

    def delete_person(self, person_id: int) -> None:
        with self._lock:
            del self._people[self._person_index(person_id)]
        logger.debug(f"storage.memory: deleted person id={person_id}")

    def fuzzy_find_people(self, query: str) -> Sequence[Person]:
        needle = query.lower()
        with self._lock:
            return [person for person in self._people if needle in person.name.lower()]

    def _person_index(self, person_id: int) -> int:
        for i, person in enumerate(self._people):
            if person.id == person_id:
                return i
        raise NotFoundError("person", person_id)

    # users

    def insert_user(self, user: User) -> User:
        prepared = user.prepared_for_insert(self._clock(), self._hasher)
        with self._lock:
            self._ensure_login_free(prepared.login, user_id=None)
            stored = replace(prepared, id=self._next_user_id)
            self._next_user_id += 1
            self._users.append(stored)
        logger.debug(f"storage.memory: inserted {stored} version={stored.version}")
        return stored

    def find_user(self, user_id: int) -> User:
        with self._lock:
            return self._users[self._user_index(user_id)]

    def find_user_by_login(self, login: str) -> User:
        with self._lock:
            for user in self._users:
                if user.login == login:
                    return user
        raise NotFoundError("user", login)

    def list_users(self) -> Sequence[User]:
        with self._lock:
            return list(self._users)

    def update_user(self, user: User) -> User:
        prepared = user.prepared_for_update(self._clock(), self._hasher)
        with self._lock:
            for i, current in enumerate(self._users):
                if current.id == user.id and current.version == user.version:
                    self._ensure_login_free(prepared.login, user_id=user.id)
                    stored = replace(prepared, created_at=current.created_at)
                    self._users[i] = stored
                    if current.login != stored.login:
                        self._drop_sessions_of(current.login)
                    break
            else:
                raise ConflictError("user", user.id)
        logger.debug(f"storage.memory: updated {stored} version={stored.version}")
        return stored

    def delete_user(self, user_id: int) -> None:
        with self._lock:
            removed = self._users.pop(self._user_index(user_id))
            self._drop_sessions_of(removed.login)
        logger.debug(f"storage.memory: deleted user id={user_id}")

    def _user_index(self, user_id: int) -> int:
        for i, user in enumerate(self._users):
            if user.id == user_id:
                return i
        raise NotFoundError("user", user_id)

    def _drop_sessions_of(self, login: str) -> None:
        self._sessions = [session for session in self._sessions if session.login != login]

    def _ensure_login_free(self, login: str, *, user_id: int | None) -> None:
        for user in self._users:
            if user.login == login and user.id != user_id:
                raise ConflictError("login", code="duplicate_login")

    # sessions

    def issue_session(self, login: str, ttl: timedelta) -> Session:
        session = Session(token=new_token(), login=login, valid_until=self._clock() + ttl)
        with self._lock:
            self._sessions.append(session)
        return session

    def find_session(self, token: str) -> Session:
        with self._lock:
            for session in self._sessions:
                if session.token == token:
                    return session
        raise NotFoundError("session")

    def invalidate_session(self, session: Session) -> None:
        with self._lock:
            for i, stored in enumerate(self._sessions):
                if stored.token == session.token:
                    del self._sessions[i]
                    break
            else:
                raise NotFoundError("session")
        logger.debug(f"storage.memory: invalidated {session}")

    def expire_sessions(self, now: datetime) -> int:
        now = as_utc(now)
        with self._lock:
            kept = [session for session in self._sessions if not session.is_expired(now)]
            removed = len(self._sessions) - len(kept)
            self._sessions = kept
        return removed

    # credentials and lifecycle

    def hash_password(self, password: str) -> str:
        return self._hasher.hash(password)

    def verify_password(self, hashed: str, password: str) -> bool:
        return self._hasher.verify(hashed, password)

    def close(self) -> None:
        with self._lock:
            self._people.clear()
            self._users.clear()
            self._sessions.clear()
