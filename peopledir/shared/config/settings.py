# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import sys
from datetime import timedelta
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _parse_bool(value: str | bool) -> bool:
    if isinstance(value, str):
        return value.lower() in ("1", "true", "yes")
    return bool(value)


class DatabaseConfig(BaseSettings):
    url: str = Field("sqlite:///peopledir.db", alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")

    model_config = SettingsConfigDict(populate_by_name=True, extra="ignore")


class SessionConfig(BaseSettings):
    ttl_seconds: int = Field(24 * 60 * 60, ge=1, alias="SESSION_TTL")
    sweep_interval_seconds: float = Field(5 * 60, gt=0, alias="SESSION_SWEEP_INTERVAL")
    auth_header: str = Field("X-Auth-Token", min_length=1, alias="AUTH_HEADER")

    model_config = SettingsConfigDict(populate_by_name=True, extra="ignore")

    @property
    def ttl(self) -> timedelta:
        return timedelta(seconds=self.ttl_seconds)

    @property
    def sweep_interval(self) -> timedelta:
        return timedelta(seconds=self.sweep_interval_seconds)


class HashingConfig(BaseSettings):
    # Weak parameters are only meant for automated tests.
    weak: bool = Field(False, alias="WEAK_PASSWORD_HASH")
    target_ms: int = Field(500, ge=1, alias="PASSWORD_HASH_TARGET_MS")

    model_config = SettingsConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("weak", mode="before")
    @classmethod
    def _parse_weak(cls, value: str | bool) -> bool:
        return _parse_bool(value)

    @property
    def target(self) -> timedelta:
        return timedelta(milliseconds=self.target_ms)


def _database_config_factory() -> DatabaseConfig:
    return DatabaseConfig()  # type: ignore[call-arg]


def _session_config_factory() -> SessionConfig:
    return SessionConfig()  # type: ignore[call-arg]


def _hashing_config_factory() -> HashingConfig:
    return HashingConfig()  # type: ignore[call-arg]


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    secret_key: str = Field("dev", alias="SECRET_KEY")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")
    storage_backend: Literal["sql", "memory"] = Field("sql", alias="STORAGE_BACKEND")
    admin_login: str | None = Field(None, alias="ADMIN_LOGIN")
    admin_password: str | None = Field(None, alias="ADMIN_PASSWORD")

    database: DatabaseConfig = Field(default_factory=_database_config_factory)
    session: SessionConfig = Field(default_factory=_session_config_factory)
    hashing: HashingConfig = Field(default_factory=_hashing_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        validate_assignment=True,
        populate_by_name=True,
        extra="ignore",
    )

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        return _parse_bool(value)

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if not self.is_production():
            return self

        if self.secret_key in ("dev", "development", "test", ""):
            print(
                "\n❌ CRITICAL SECURITY ERROR: Insecure SECRET_KEY detected in production!\n"
                "   SECRET_KEY must be a strong random value in production.\n",
                file=sys.stderr,
            )
            sys.exit(1)

        warnings = []
        if self.hashing.weak:
            warnings.append("⚠️  WEAK_PASSWORD_HASH is ENABLED (test-only setting)")
        if self.storage_backend == "memory":
            warnings.append("⚠️  STORAGE_BACKEND=memory keeps no data across restarts")

        if warnings:
            print("\n⚠️  PRODUCTION CONFIGURATION WARNINGS:", file=sys.stderr)
            for warning in warnings:
                print(f"   {warning}", file=sys.stderr)

        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()


__all__ = ["AppConfig", "DatabaseConfig", "HashingConfig", "SessionConfig", "load_config"]
