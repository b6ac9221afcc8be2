"""Use-case for revoking session tokens."""

from __future__ import annotations

from peopledir.domain import Session, Storage


class LogoutUserUseCase:
    def __init__(self, *, storage: Storage) -> None:
        self._storage = storage

    def execute(self, session: Session) -> None:
        self._storage.invalidate_session(session)
