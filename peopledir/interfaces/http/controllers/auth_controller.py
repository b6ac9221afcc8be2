# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from peopledir.application import LoginUserUseCase, LogoutUserUseCase
from peopledir.interfaces.http.auth import RequestAuthenticator, current_principal, requires_session
from peopledir.interfaces.http.dto.auth import LoginRequestDTO, LoginResponseDTO, OkDTO, SessionDTO
from peopledir.shared.errors import NotFoundError, UnauthorizedError
from peopledir.shared.errors.validation import raise_validation_error
from peopledir.shared.logging import logger


class AuthController:
    def __init__(
        self,
        *,
        login_use_case: LoginUserUseCase,
        logout_use_case: LogoutUserUseCase,
        authenticator: RequestAuthenticator,
    ) -> None:
        self._login_use_case = login_use_case
        self._logout_use_case = logout_use_case
        self._authenticator = authenticator

    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        session, user = self._login_use_case.execute(dto.login, dto.password)
        payload = LoginResponseDTO(
            token=session.token,
            login=session.login,
            valid_until=session.valid_until,
            admin=user.admin,
        )
        logger.info(f"auth.login: ok login={dto.login}")
        return jsonify(payload.model_dump(mode="json")), 200

    @requires_session()
    def logout(self) -> tuple[Response, int]:
        try:
            self._logout_use_case.execute(current_principal().session)
        except NotFoundError:
            # A concurrent logout already removed the session.
            raise UnauthorizedError() from None
        logger.info("auth.logout: ok")
        return jsonify(OkDTO().model_dump()), 200

    @requires_session()
    def session(self) -> tuple[Response, int]:
        principal = current_principal()
        payload = SessionDTO.model_validate(principal.session).model_dump(mode="json")
        payload["admin"] = principal.user.admin
        return jsonify(payload), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/api")
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/logout", view_func=self.logout, methods=["POST"])
        bp.add_url_rule("/session", view_func=self.session, methods=["GET"])
        return bp
