# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Transaction scope used by every SQL storage call."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from peopledir.shared.errors import AppError, ConflictError, StorageUnavailableError
from peopledir.shared.logging import logger


@dataclass(slots=True)
class SqlAlchemyUnitOfWork(AbstractContextManager):
    """Commit on clean exit, roll back on any exception, always close."""

    session_factory: Callable[[], Session]
    _session: Session | None = None

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        self._session = self.session_factory()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        session = self.session
        try:
            if exc is None:
                session.commit()
            else:
                logger.debug(f"uow: rollback due to {exc_type.__name__}")
                session.rollback()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
            self._session = None

    @property
    def session(self) -> Session:
        if self._session is None:
            raise RuntimeError("UnitOfWork session accessed before entering context")
        return self._session


@contextmanager
def unit_of_work_scope(factory: Callable[[], Session], *, kind: str = "record") -> Iterator[Session]:
    """Yield a session; database failures surface as application errors.

    Unique-key violations become :class:`ConflictError` with code
    ``duplicate_<kind>``; any other driver or connection failure becomes
    :class:`StorageUnavailableError`.
    """

    try:
        with SqlAlchemyUnitOfWork(factory) as uow:
            yield uow.session
    except AppError:
        raise
    except IntegrityError as exc:
        logger.warning(f"uow: integrity violation on {kind}: {type(exc.orig).__name__}")
        raise ConflictError(kind, code=f"duplicate_{kind}") from exc
    except SQLAlchemyError as exc:
        logger.error(f"uow: storage failure on {kind}: {type(exc).__name__}")
        raise StorageUnavailableError(type(exc).__name__) from exc
