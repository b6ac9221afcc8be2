# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from functools import cached_property

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from peopledir.application.services.password_hashing import (
    WEAK_HASH_PARAMETERS, HashParameters, ScryptPasswordHasher, calibrate)
from peopledir.application.services.session_sweeper import SessionSweeper
from peopledir.application.use_cases.users.authenticate import AuthenticateUseCase
from peopledir.application.use_cases.users.login_user import LoginUserUseCase
from peopledir.application.use_cases.users.logout_user import LogoutUserUseCase
from peopledir.application.use_cases.users.update_user import UpdateUserUseCase
from peopledir.domain import Storage
from peopledir.infrastructure.db import build_engine, build_session_factory, init_db
from peopledir.infrastructure.repositories import InMemoryStorage, SqlAlchemyStorage
from peopledir.interfaces.http.auth import RequestAuthenticator
from peopledir.interfaces.http.controllers.auth_controller import AuthController
from peopledir.interfaces.http.controllers.people_controller import PeopleController
from peopledir.interfaces.http.controllers.users_controller import UsersController
from peopledir.shared.config import AppConfig
from peopledir.shared.logging import logger


class Container:
    """Builds every long-lived object once, from a single :class:`AppConfig`."""

    def __init__(self, config: AppConfig, *, storage: Storage | None = None) -> None:
        self._config = config
        if storage is not None:
            self.__dict__["storage"] = storage

    @property
    def config(self) -> AppConfig:
        return self._config

    @cached_property
    def hash_parameters(self) -> HashParameters:
        if self._config.hashing.weak:
            logger.warning("password_hashing: using weak parameters, never do this in production")
            return WEAK_HASH_PARAMETERS
        return calibrate(self._config.hashing.target)

    @cached_property
    def password_hasher(self) -> ScryptPasswordHasher:
        return ScryptPasswordHasher(self.hash_parameters)

    # persistence

    @cached_property
    def engine(self) -> Engine:
        return build_engine(self._config.database)

    @cached_property
    def session_factory(self) -> sessionmaker[Session]:
        return build_session_factory(self.engine)

    @cached_property
    def storage(self) -> Storage:
        if self._config.storage_backend == "memory":
            logger.info("storage: using in-memory backend")
            return InMemoryStorage(self.password_hasher)
        init_db(self.engine)
        logger.info(f"storage: using SQL backend ({self.engine.dialect.name})")
        return SqlAlchemyStorage(self.engine, self.session_factory, self.password_hasher)

    @cached_property
    def session_sweeper(self) -> SessionSweeper:
        return SessionSweeper(self.storage, self._config.session.sweep_interval)

    # use cases

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(storage=self.storage, session_ttl=self._config.session.ttl)

    @cached_property
    def logout_user_use_case(self) -> LogoutUserUseCase:
        return LogoutUserUseCase(storage=self.storage)

    @cached_property
    def authenticate_use_case(self) -> AuthenticateUseCase:
        return AuthenticateUseCase(storage=self.storage)

    @cached_property
    def update_user_use_case(self) -> UpdateUserUseCase:
        return UpdateUserUseCase(storage=self.storage)

    # http

    @cached_property
    def authenticator(self) -> RequestAuthenticator:
        return RequestAuthenticator(
            authenticate=self.authenticate_use_case,
            header=self._config.session.auth_header,
        )

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            login_use_case=self.login_user_use_case,
            logout_use_case=self.logout_user_use_case,
            authenticator=self.authenticator,
        )

    @cached_property
    def people_controller(self) -> PeopleController:
        return PeopleController(storage=self.storage, authenticator=self.authenticator)

    @cached_property
    def users_controller(self) -> UsersController:
        return UsersController(
            storage=self.storage,
            update_user=self.update_user_use_case,
            authenticator=self.authenticator,
        )

    def close(self) -> None:
        if "session_sweeper" in self.__dict__:
            self.session_sweeper.stop()
        if "storage" in self.__dict__:
            self.storage.close()
