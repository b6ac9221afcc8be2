# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import replace

from peopledir.domain import Storage, User
from peopledir.shared.errors import NotFoundError
from peopledir.shared.logging import logger


def ensure_admin(storage: Storage, login: str, password: str) -> User:
    """Create ``login`` as administrator, or grant admin to the existing user.

    An existing user's password is left untouched.
    """

    try:
        user = storage.find_user_by_login(login)
    except NotFoundError:
        user = storage.insert_user(User(login=login, password=password, admin=True))
        logger.info(f"admin_setup: created administrator '{login}'")
        return user

    if user.admin:
        logger.info(f"admin_setup: user '{login}' already has admin privileges")
        return user

    user = storage.update_user(replace(user, admin=True))
    logger.info(f"admin_setup: granted admin privileges to user '{login}'")
    return user


__all__ = ["ensure_admin"]
