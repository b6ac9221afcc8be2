# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""HTTP controller for user accounts. Mutations and listing are admin-only."""

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from peopledir.application import UpdateUserUseCase
from peopledir.domain import Storage, User
from peopledir.interfaces.http.auth import RequestAuthenticator, current_principal, requires_session
from peopledir.interfaces.http.dto.auth import OkDTO
from peopledir.interfaces.http.dto.users import UserDTO, UserPayloadDTO
from peopledir.shared.errors import ForbiddenError
from peopledir.shared.errors.validation import invariant_violation, raise_validation_error
from peopledir.shared.logging import logger


def _dump(user: User) -> dict:
    return UserDTO.model_validate(user).model_dump(mode="json")


def _payload() -> UserPayloadDTO:
    try:
        return UserPayloadDTO.model_validate(request.get_json(silent=True) or {})
    except ValidationError as exc:
        raise_validation_error(exc)


class UsersController:
    def __init__(
        self,
        *,
        storage: Storage,
        update_user: UpdateUserUseCase,
        authenticator: RequestAuthenticator,
    ) -> None:
        self._storage = storage
        self._update_user = update_user
        self._authenticator = authenticator

    @requires_session(admin=True)
    def list_users(self) -> tuple[Response, int]:
        return jsonify([_dump(user) for user in self._storage.list_users()]), 200

    @requires_session()
    def get_user(self, user_id: int) -> tuple[Response, int]:
        user = self._storage.find_user(user_id)
        self._ensure_self_or_admin(user)
        return jsonify(_dump(user)), 200

    @requires_session()
    def get_user_by_login(self, login: str) -> tuple[Response, int]:
        user = self._storage.find_user_by_login(login)
        self._ensure_self_or_admin(user)
        return jsonify(_dump(user)), 200

    @requires_session(admin=True)
    def create_user(self) -> tuple[Response, int]:
        dto = _payload()
        if dto.password is None:
            raise invariant_violation("password", "new users need a password")
        user = self._storage.insert_user(
            User(login=dto.login, admin=dto.admin, password=dto.password, version=dto.version)
        )
        logger.info(f"users.create: {user} admin={user.admin}")
        return jsonify(_dump(user)), 201

    @requires_session(admin=True)
    def update_user(self, user_id: int) -> tuple[Response, int]:
        dto = _payload()
        user = self._update_user.execute(
            user_id,
            login=dto.login,
            admin=dto.admin,
            version=dto.version,
            password=dto.password,
        )
        return jsonify(_dump(user)), 200

    @requires_session(admin=True)
    def delete_user(self, user_id: int) -> tuple[Response, int]:
        self._storage.delete_user(user_id)
        logger.info(f"users.delete: id={user_id}")
        return jsonify(OkDTO().model_dump()), 200

    @staticmethod
    def _ensure_self_or_admin(user: User) -> None:
        caller = current_principal().user
        if not caller.admin and caller.login != user.login:
            raise ForbiddenError()

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("users", __name__, url_prefix="/api")
        bp.add_url_rule("/user", view_func=self.list_users, methods=["GET"])
        bp.add_url_rule("/user", view_func=self.create_user, methods=["POST"])
        bp.add_url_rule("/user/<int:user_id>", view_func=self.get_user, methods=["GET"])
        bp.add_url_rule("/user/<int:user_id>", view_func=self.update_user, methods=["PUT"])
        bp.add_url_rule("/user/<int:user_id>", view_func=self.delete_user, methods=["DELETE"])
        bp.add_url_rule(
            "/user/by-login/<login>", view_func=self.get_user_by_login, methods=["GET"]
        )
        return bp
