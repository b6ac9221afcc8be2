# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import timedelta

from peopledir.domain import Session, Storage, User
from peopledir.shared.errors import InvalidCredentialsError, NotFoundError
from peopledir.shared.logging import logger


class LoginUserUseCase:
    def __init__(self, *, storage: Storage, session_ttl: timedelta) -> None:
        self._storage = storage
        self._session_ttl = session_ttl

    def execute(self, login: str, password: str) -> tuple[Session, User]:
        try:
            user = self._storage.find_user_by_login(login)
        except NotFoundError:
            logger.warning(f"auth.login: unknown login={login}")
            raise InvalidCredentialsError() from None

        if not self._storage.verify_password(user.password_hash, password):
            logger.warning(f"auth.login: wrong password for login={login}")
            raise InvalidCredentialsError()

        session = self._storage.issue_session(user.login, self._session_ttl)
        logger.info(f"auth.login: issued {session}")
        return session, user
