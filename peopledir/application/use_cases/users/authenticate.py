# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from peopledir.domain import Session, Storage, User
from peopledir.shared.errors import NotFoundError, UnauthorizedError
from peopledir.shared.utils.clock import utcnow


@dataclass(slots=True, frozen=True)
class Principal:
    session: Session
    user: User


class AuthenticateUseCase:
    """Resolve a bearer token to the session and the user it belongs to."""

    def __init__(
        self,
        *,
        storage: Storage,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._storage = storage
        self._clock = clock

    def execute(self, token: str) -> Principal:
        if not token:
            raise UnauthorizedError()
        try:
            session = self._storage.find_session(token)
            # The sweeper may not have run yet.
            if session.is_expired(self._clock()):
                raise UnauthorizedError()
            user = self._storage.find_user_by_login(session.login)
        except NotFoundError:
            raise UnauthorizedError() from None
        return Principal(session=session, user=user)
