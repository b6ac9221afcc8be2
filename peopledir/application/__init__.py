# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .services.password_hashing import (
    WEAK_HASH_PARAMETERS,
    HashParameters,
    ScryptPasswordHasher,
    calibrate,
)
from .services.session_sweeper import SessionSweeper
from .use_cases.users.authenticate import AuthenticateUseCase, Principal
from .use_cases.users.login_user import LoginUserUseCase
from .use_cases.users.logout_user import LogoutUserUseCase
from .use_cases.users.update_user import UpdateUserUseCase

__all__ = [
    "WEAK_HASH_PARAMETERS",
    "AuthenticateUseCase",
    "HashParameters",
    "LoginUserUseCase",
    "LogoutUserUseCase",
    "Principal",
    "ScryptPasswordHasher",
    "SessionSweeper",
    "UpdateUserUseCase",
    "calibrate",
]
