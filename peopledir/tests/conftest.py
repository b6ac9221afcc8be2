from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from peopledir.application.services.password_hashing import (
    WEAK_HASH_PARAMETERS, ScryptPasswordHasher)
from peopledir.domain import Storage
from peopledir.infrastructure.db import build_engine, build_session_factory, init_db
from peopledir.infrastructure.repositories import InMemoryStorage, SqlAlchemyStorage
from peopledir.shared.config import DatabaseConfig


class FakeClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> datetime:
        self.now = self.now + delta
        return self.now


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 3, 1, 9, 30, tzinfo=UTC))


@pytest.fixture()
def hasher() -> ScryptPasswordHasher:
    return ScryptPasswordHasher(WEAK_HASH_PARAMETERS)


def build_sql_storage(path: Path, hasher: ScryptPasswordHasher, clock: FakeClock) -> SqlAlchemyStorage:
    engine = build_engine(DatabaseConfig(url=f"sqlite:///{path}"))
    init_db(engine)
    return SqlAlchemyStorage(engine, build_session_factory(engine), hasher, clock=clock)


@pytest.fixture(params=["memory", "sql"])
def storage(
    request: pytest.FixtureRequest,
    tmp_path: Path,
    hasher: ScryptPasswordHasher,
    clock: FakeClock,
) -> Iterator[Storage]:
    if request.param == "memory":
        store: Storage = InMemoryStorage(hasher, clock=clock)
    else:
        store = build_sql_storage(tmp_path / "people.db", hasher, clock)
    yield store
    store.close()
