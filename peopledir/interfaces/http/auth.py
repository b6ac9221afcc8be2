# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any

from flask import g, request

from peopledir.application import AuthenticateUseCase, Principal
from peopledir.shared.errors import ForbiddenError
from peopledir.shared.logging import logger


class RequestAuthenticator:
    """Resolve the session token carried by the current request."""

    def __init__(self, *, authenticate: AuthenticateUseCase, header: str) -> None:
        self._authenticate = authenticate
        self._header = header

    def token(self) -> str:
        token = request.headers.get(self._header, "").strip()
        if token:
            return token
        auth = request.headers.get("Authorization", "")
        if auth.startswith("Bearer "):
            return auth[7:].strip()
        return ""

    def principal(self) -> Principal:
        principal = self._authenticate.execute(self.token())
        g.principal = principal
        g.login = principal.user.login
        return principal


def requires_session(*, admin: bool = False) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Guard a controller method; the controller must own ``_authenticator``."""

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        def wrapper(self, *args: Any, **kwargs: Any) -> Any:
            principal = self._authenticator.principal()
            if admin and not principal.user.admin:
                logger.warning(
                    f"Admin access denied: login={principal.user.login} "
                    f"on {request.method} {request.path}"
                )
                raise ForbiddenError()
            return func(self, *args, **kwargs)

        return wrapper

    return decorator


def current_principal() -> Principal:
    return g.principal


__all__ = ["RequestAuthenticator", "current_principal", "requires_session"]
