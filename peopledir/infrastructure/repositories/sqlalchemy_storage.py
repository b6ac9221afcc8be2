# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime, timedelta

from sqlalchemy import delete, func, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from peopledir.domain import PasswordHasher, Person, PhoneNumber, Storage, User, new_token
from peopledir.domain import Session as DomainSession
from peopledir.infrastructure.db.models import PersonRow, SessionRow, UserRow
from peopledir.infrastructure.unit_of_work import unit_of_work_scope
from peopledir.shared.errors import ConflictError, NotFoundError
from peopledir.shared.logging import logger
from peopledir.shared.utils.clock import as_utc, utcnow

def _person_from_row(row: PersonRow) -> Person:
    return Person(
        id=row.id,
        name=row.name,
        title=row.title,
        department=row.department,
        email_address=row.email_address,
        comment=row.comment,
        phone_numbers=tuple(
            PhoneNumber(type=item["type"], number=item["number"]) for item in row.phone_numbers or []
        ),
        street=row.street,
        city=row.city,
        state=row.state,
        postal_code=row.postal_code,
        country=row.country,
        created_at=row.created_at,
        changed_at=row.changed_at,
        version=row.version,
    )


def _person_values(person: Person) -> dict[str, object]:
    return {
        "name": person.name,
        "title": person.title,
        "department": person.department,
        "email_address": person.email_address,
        "comment": person.comment,
        "phone_numbers": [phone.to_dict() for phone in person.phone_numbers],
        "street": person.street,
        "city": person.city,
        "state": person.state,
        "postal_code": person.postal_code,
        "country": person.country,
        "created_at": person.created_at,
        "changed_at": person.changed_at,
        "version": person.version,
    }


def _user_from_row(row: UserRow) -> User:
    return User(
        id=row.id,
        login=row.login,
        password_hash=row.password_hash,
        admin=bool(row.admin),
        created_at=row.created_at,
        changed_at=row.changed_at,
        version=row.version,
    )


def _user_values(user: User) -> dict[str, object]:
    return {
        "login": user.login,
        "password_hash": user.password_hash,
        "admin": user.admin,
        "created_at": user.created_at,
        "changed_at": user.changed_at,
        "version": user.version,
    }


def _session_from_row(row: SessionRow) -> DomainSession:
    return DomainSession(token=row.token, login=row.login, valid_until=row.valid_until)


class SqlAlchemyStorage(Storage):
    """Storage backed by a relational database through SQLAlchemy.

    Each operation runs in its own transaction. Updates are conditional
    writes on ``(id, version)``; no row affected means the caller lost a
    race (or the record is gone) and gets a :class:`ConflictError`.
    """

    def __init__(
        self,
        engine: Engine,
        session_factory: Callable[[], Session],
        hasher: PasswordHasher,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._engine = engine
        self._session_factory = session_factory
        self._hasher = hasher
        self._clock = clock

    # people

    def insert_person(self, person: Person) -> Person:
        prepared = person.prepared_for_insert(self._clock())
        with unit_of_work_scope(self._session_factory, kind="person") as session:
            row = PersonRow(**_person_values(prepared))
            session.add(row)
            session.flush()
            stored = _person_from_row(row)
        logger.debug(f"storage.sql: inserted {stored} version={stored.version}")
        return stored

    def find_person(self, person_id: int) -> Person:
        with unit_of_work_scope(self._session_factory, kind="person") as session:
            row = session.get(PersonRow, person_id)
            if row is None:
                raise NotFoundError("person", person_id)
            return _person_from_row(row)

    def list_people(self) -> Sequence[Person]:
        with unit_of_work_scope(self._session_factory, kind="person") as session:
            rows = session.scalars(select(PersonRow).order_by(PersonRow.id.asc())).all()
            return [_person_from_row(row) for row in rows]

    def update_person(self, person: Person) -> Person:
        prepared = person.prepared_for_update(self._clock())
        values = _person_values(prepared)
        values.pop("created_at")
        with unit_of_work_scope(self._session_factory, kind="person") as session:
            result = session.execute(
                update(PersonRow)
                .where(PersonRow.id == person.id, PersonRow.version == person.version)
                .values(**values)
            )
            if result.rowcount != 1:
                raise ConflictError("person", person.id)
            row = session.get(PersonRow, person.id, populate_existing=True)
            stored = _person_from_row(row)
        logger.debug(f"storage.sql: updated {stored} version={stored.version}")
        return stored

    def delete_person(self, person_id: int) -> None:
        with unit_of_work_scope(self._session_factory, kind="person") as session:
            result = session.execute(delete(PersonRow).where(PersonRow.id == person_id))
            self._check_deleted(result.rowcount, "person", person_id)
        logger.debug(f"storage.sql: deleted person id={person_id}")

    def fuzzy_find_people(self, query: str) -> Sequence[Person]:
        needle = query.lower()
        with unit_of_work_scope(self._session_factory, kind="person") as session:
            rows = session.scalars(
                select(PersonRow)
                .where(func.lower(PersonRow.name).contains(needle, autoescape=True))
                .order_by(PersonRow.id.asc())
            ).all()
            return [_person_from_row(row) for row in rows]

    # users

    def insert_user(self, user: User) -> User:
        prepared = user.prepared_for_insert(self._clock(), self._hasher)
        with unit_of_work_scope(self._session_factory, kind="login") as session:
            row = UserRow(**_user_values(prepared))
            session.add(row)
            session.flush()
            stored = _user_from_row(row)
        logger.debug(f"storage.sql: inserted {stored} version={stored.version}")
        return stored

    def find_user(self, user_id: int) -> User:
        with unit_of_work_scope(self._session_factory, kind="user") as session:
            row = session.get(UserRow, user_id)
            if row is None:
                raise NotFoundError("user", user_id)
            return _user_from_row(row)

    def find_user_by_login(self, login: str) -> User:
        with unit_of_work_scope(self._session_factory, kind="user") as session:
            row = session.scalars(select(UserRow).where(UserRow.login == login)).first()
            if row is None:
                raise NotFoundError("user", login)
            return _user_from_row(row)

    def list_users(self) -> Sequence[User]:
        with unit_of_work_scope(self._session_factory, kind="user") as session:
            rows = session.scalars(select(UserRow).order_by(UserRow.id.asc())).all()
            return [_user_from_row(row) for row in rows]

    def update_user(self, user: User) -> User:
        prepared = user.prepared_for_update(self._clock(), self._hasher)
        values = _user_values(prepared)
        values.pop("created_at")
        with unit_of_work_scope(self._session_factory, kind="login") as session:
            old_login = session.scalar(select(UserRow.login).where(UserRow.id == user.id))
            result = session.execute(
                update(UserRow)
                .where(UserRow.id == user.id, UserRow.version == user.version)
                .values(**values)
            )
            if result.rowcount != 1:
                raise ConflictError("user", user.id)
            if old_login != prepared.login:
                self._drop_sessions_of(session, old_login)
            row = session.get(UserRow, user.id, populate_existing=True)
            stored = _user_from_row(row)
        logger.debug(f"storage.sql: updated {stored} version={stored.version}")
        return stored

    def delete_user(self, user_id: int) -> None:
        with unit_of_work_scope(self._session_factory, kind="user") as session:
            login = session.scalar(select(UserRow.login).where(UserRow.id == user_id))
            result = session.execute(delete(UserRow).where(UserRow.id == user_id))
            self._check_deleted(result.rowcount, "user", user_id)
            self._drop_sessions_of(session, login)
        logger.debug(f"storage.sql: deleted user id={user_id}")

    # sessions

    def issue_session(self, login: str, ttl: timedelta) -> DomainSession:
        issued = DomainSession(token=new_token(), login=login, valid_until=self._clock() + ttl)
        with unit_of_work_scope(self._session_factory, kind="session") as session:
            session.add(
                SessionRow(token=issued.token, login=issued.login, valid_until=issued.valid_until)
            )
        return issued

    def find_session(self, token: str) -> DomainSession:
        with unit_of_work_scope(self._session_factory, kind="session") as session:
            row = session.get(SessionRow, token)
            if row is None:
                raise NotFoundError("session")
            return _session_from_row(row)

    def invalidate_session(self, session: DomainSession) -> None:
        with unit_of_work_scope(self._session_factory, kind="session") as db:
            result = db.execute(delete(SessionRow).where(SessionRow.token == session.token))
            self._check_deleted(result.rowcount, "session", None)
        logger.debug(f"storage.sql: invalidated {session}")

    def expire_sessions(self, now: datetime) -> int:
        with unit_of_work_scope(self._session_factory, kind="session") as session:
            result = session.execute(delete(SessionRow).where(SessionRow.valid_until < as_utc(now)))
            return int(result.rowcount or 0)

    # credentials and lifecycle

    def hash_password(self, password: str) -> str:
        return self._hasher.hash(password)

    def verify_password(self, hashed: str, password: str) -> bool:
        return self._hasher.verify(hashed, password)

    def close(self) -> None:
        self._engine.dispose()
        logger.debug("storage.sql: engine disposed")

    @staticmethod
    def _drop_sessions_of(session: Session, login: str) -> None:
        # Sessions reference their user by login only.
        result = session.execute(delete(SessionRow).where(SessionRow.login == login))
        if result.rowcount:
            logger.debug(f"storage.sql: dropped {result.rowcount} sessions of login={login}")

    @staticmethod
    def _check_deleted(count: int, kind: str, key: int | str | None) -> None:
        if count == 0:
            raise NotFoundError(kind, key)
        if count != 1:
            raise ConflictError(kind, key, code="unexpected_row_count")
