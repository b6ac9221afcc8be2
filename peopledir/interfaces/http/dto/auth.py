from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class LoginRequestDTO(BaseModel):
    login: str = Field(min_length=1, max_length=64)
    password: str = Field(min_length=1, max_length=256)


class SessionDTO(BaseModel):
    token: str
    login: str
    valid_until: datetime

    model_config = ConfigDict(from_attributes=True)


class LoginResponseDTO(SessionDTO):
    admin: bool = False


class OkDTO(BaseModel):
    ok: bool = True
