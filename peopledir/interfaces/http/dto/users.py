# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UserPayloadDTO(BaseModel):
    login: str = Field(min_length=1, max_length=64)
    admin: bool = False
    # Plaintext only travels inbound; it is hashed before storage.
    password: str | None = Field(None, min_length=1, max_length=256)
    version: int = Field(0, ge=0)


class UserDTO(BaseModel):
    id: int
    login: str
    admin: bool
    created_at: datetime
    changed_at: datetime
    version: int

    model_config = ConfigDict(from_attributes=True)
