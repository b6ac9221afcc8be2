# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .people.entities import Person, PhoneNumber
from .repositories import (
    PasswordHasher,
    PersonRepository,
    SessionRepository,
    Storage,
    UserRepository,
)
from .users.entities import TOKEN_BYTES, Session, User, new_token

__all__ = [
    "PasswordHasher",
    "Person",
    "PersonRepository",
    "PhoneNumber",
    "Session",
    "SessionRepository",
    "Storage",
    "TOKEN_BYTES",
    "User",
    "UserRepository",
    "new_token",
]
