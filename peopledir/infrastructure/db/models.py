# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from datetime import datetime

from sqlalchemy import JSON, Boolean, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from peopledir.infrastructure.db.types import UTCDateTime


class Base(DeclarativeBase):
    pass


class PersonRow(Base):
    __tablename__ = "people"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(256), index=True)
    title: Mapped[str] = mapped_column(String(128), default="", server_default="")
    department: Mapped[str] = mapped_column(String(128), default="", server_default="")
    email_address: Mapped[str] = mapped_column(String(256), default="", server_default="")
    comment: Mapped[str] = mapped_column(Text, default="", server_default="")
    # Ordered list of {"type": ..., "number": ...}
    phone_numbers: Mapped[list[dict[str, str]]] = mapped_column(JSON, default=list)
    street: Mapped[str] = mapped_column(String(256), default="", server_default="")
    city: Mapped[str] = mapped_column(String(128), default="", server_default="")
    state: Mapped[str] = mapped_column(String(128), default="", server_default="")
    postal_code: Mapped[str] = mapped_column(String(32), default="", server_default="")
    country: Mapped[str] = mapped_column(String(128), default="", server_default="")
    created_at: Mapped[datetime] = mapped_column(UTCDateTime)
    changed_at: Mapped[datetime] = mapped_column(UTCDateTime)
    version: Mapped[int] = mapped_column(Integer, nullable=False)


class UserRow(Base):
    __tablename__ = "users"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    login: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(256))
    admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="0")
    created_at: Mapped[datetime] = mapped_column(UTCDateTime)
    changed_at: Mapped[datetime] = mapped_column(UTCDateTime)
    version: Mapped[int] = mapped_column(Integer, nullable=False)


class SessionRow(Base):
    __tablename__ = "sessions"
    token: Mapped[str] = mapped_column(String(64), primary_key=True)
    login: Mapped[str] = mapped_column(String(64), index=True)
    valid_until: Mapped[datetime] = mapped_column(UTCDateTime, index=True)
