# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar, cast

from flask import g, request

from tasksapp.application.services.credentials import CredentialService
from tasksapp.domain.users.exceptions import InvalidAccessTokenError
from tasksapp.shared.logging import logger

ACCESS_TOKEN_COOKIE = "jwt"

F = TypeVar("F", bound=Callable[..., Any])


def _presented_access_token() -> str:
    auth = request.headers.get("Authorization", "")
    if auth.startswith("Bearer "):
        return auth[7:].strip()
    return request.cookies.get(ACCESS_TOKEN_COOKIE, "")


def access_token_required(credentials: CredentialService) -> Callable[[F], F]:
    """Admit requests carrying a valid access token.

    The token is read from ``Authorization: Bearer`` first, then the ``jwt``
    cookie. Its ``email`` and ``username`` claims are exposed on ``g``.
    """

    def decorator(view: F) -> F:
        @wraps(view)
        def inner(*args: Any, **kwargs: Any) -> Any:
            token = _presented_access_token()
            if not token:
                logger.warning(f"No access token on {request.method} {request.path}")
                raise InvalidAccessTokenError(context={"reason": "missing"})
            try:
                claims = credentials.decode_access_token(token)
            except InvalidAccessTokenError as exc:
                logger.warning(
                    f"Access token rejected on {request.method} {request.path}: "
                    f"{(exc.context or {}).get('reason')}"
                )
                raise
            g.email = claims.get("email")
            g.username = claims.get("username")
            return view(*args, **kwargs)

        return cast(F, inner)

    return decorator


__all__ = ["ACCESS_TOKEN_COOKIE", "access_token_required"]
