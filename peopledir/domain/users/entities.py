# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import secrets
from dataclasses import dataclass, field, replace
from datetime import datetime

from peopledir.shared.errors import RandomnessFailureError
from peopledir.shared.errors.validation import invariant_violation
from peopledir.shared.utils.clock import as_utc, as_utc_or

from ..repositories import PasswordHasher


@dataclass(slots=True, frozen=True)
class User:
    """An authenticating principal.

    ``password`` is transient: when set, the storage hashes it into
    ``password_hash`` before the record is written and never keeps it.
    """

    login: str
    id: int = 0
    password_hash: str = field(default="", repr=False)
    admin: bool = False
    created_at: datetime | None = None
    changed_at: datetime | None = None
    version: int = 0
    password: str | None = field(default=None, repr=False, compare=False)

    def validate(self) -> None:
        if not self.login:
            raise invariant_violation("login", "login must not be empty")
        if not self.password_hash:
            raise invariant_violation("password_hash", "user must have a password hash")
        if self.created_at is None or self.changed_at is None:
            raise invariant_violation("created_at", "invalid timestamps")

    def with_hashed_password(self, hasher: PasswordHasher) -> User:
        if not self.password:
            return replace(self, password=None)
        return replace(self, password_hash=hasher.hash(self.password), password=None)

    def prepared_for_insert(self, now: datetime, hasher: PasswordHasher) -> User:
        user = replace(
            self.with_hashed_password(hasher),
            created_at=as_utc_or(self.created_at, now),
            changed_at=as_utc_or(self.changed_at, now),
            version=self.version + 1,
        )
        user.validate()
        return user

    def prepared_for_update(self, now: datetime, hasher: PasswordHasher) -> User:
        user = replace(
            self.with_hashed_password(hasher),
            created_at=as_utc_or(self.created_at, now),
            changed_at=as_utc(now),
            version=self.version + 1,
        )
        user.validate()
        return user

    def __str__(self) -> str:
        return f"<User {self.login} ({self.id})>"


@dataclass(slots=True, frozen=True)
class Session:
    """Proof of a prior successful login, valid until ``valid_until``."""

    token: str
    login: str
    valid_until: datetime

    def is_expired(self, now: datetime) -> bool:
        return self.valid_until < now

    def __str__(self) -> str:
        return f"<Session {self.token[:8]}, user {self.login} (valid until {self.valid_until.isoformat()})>"


TOKEN_BYTES = 32


def new_token() -> str:
    """Return a fresh hex session token from the OS random source."""

    try:
        return secrets.token_bytes(TOKEN_BYTES).hex()
    except (OSError, NotImplementedError) as exc:
        raise RandomnessFailureError("session_token") from exc
