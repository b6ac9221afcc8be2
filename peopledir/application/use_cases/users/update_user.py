# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import replace

from peopledir.domain import Storage, User
from peopledir.shared.logging import logger


class UpdateUserUseCase:
    """Apply an edit to a user while keeping the stored hash unless a new password is given."""

    def __init__(self, *, storage: Storage) -> None:
        self._storage = storage

    def execute(
        self,
        user_id: int,
        *,
        login: str,
        admin: bool,
        version: int,
        password: str | None = None,
    ) -> User:
        current = self._storage.find_user(user_id)
        edited = replace(current, login=login, admin=admin, version=version, password=password)
        updated = self._storage.update_user(edited)
        logger.info(f"users.update: {updated} password_changed={password is not None}")
        return updated
