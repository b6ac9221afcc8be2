# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Password hashing with a calibrated scrypt cost."""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import timedelta

from werkzeug.security import check_password_hash, generate_password_hash

from peopledir.domain.repositories import PasswordHasher
from peopledir.shared.errors import RandomnessFailureError
from peopledir.shared.logging import logger

_MIN_N = 2**10
_MAX_N = 2**20


@dataclass(slots=True, frozen=True)
class HashParameters:
    n: int
    r: int = 8
    p: int = 1
    salt_length: int = 16

    @property
    def method(self) -> str:
        return f"scrypt:{self.n}:{self.r}:{self.p}"


# Deliberately cheap; only for automated tests.
WEAK_HASH_PARAMETERS = HashParameters(n=128, r=8, p=1, salt_length=16)


def calibrate(
    target: timedelta = timedelta(milliseconds=500),
    *,
    r: int = 8,
    p: int = 1,
    salt_length: int = 16,
) -> HashParameters:
    """Find the smallest power-of-two N whose hash takes at least ``target``."""

    budget = target.total_seconds()
    n = _MIN_N
    while True:
        params = HashParameters(n=n, r=r, p=p, salt_length=salt_length)
        started = time.perf_counter()
        generate_password_hash("calibration", method=params.method, salt_length=salt_length)
        elapsed = time.perf_counter() - started
        if elapsed >= budget or n >= _MAX_N:
            logger.info(
                f"password_hashing: calibrated {params.method} "
                f"({elapsed * 1000:.0f} ms, target {budget * 1000:.0f} ms)"
            )
            return params
        n *= 2


class ScryptPasswordHasher(PasswordHasher):
    def __init__(self, parameters: HashParameters) -> None:
        self._parameters = parameters

    @property
    def parameters(self) -> HashParameters:
        return self._parameters

    def hash(self, password: str) -> str:
        try:
            return str(
                generate_password_hash(
                    password,
                    method=self._parameters.method,
                    salt_length=self._parameters.salt_length,
                )
            )
        except (OSError, NotImplementedError) as exc:
            raise RandomnessFailureError("password_salt") from exc

    def verify(self, hashed: str, password: str) -> bool:
        if not hashed:
            return False
        try:
            return bool(check_password_hash(hashed, password))
        except (ValueError, TypeError, OverflowError, MemoryError):
            return False
