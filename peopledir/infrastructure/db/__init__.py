# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .models import Base, PersonRow, SessionRow, UserRow
from .session import build_engine, build_session_factory, init_db

__all__ = [
    "Base",
    "PersonRow",
    "SessionRow",
    "UserRow",
    "build_engine",
    "build_session_factory",
    "init_db",
]
