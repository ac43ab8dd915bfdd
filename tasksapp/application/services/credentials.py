# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Password hashing and token issuance."""

from __future__ import annotations

import base64
import hashlib
import hmac
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

import jwt
from werkzeug.security import gen_salt

from tasksapp.domain.users.exceptions import InvalidAccessTokenError
from tasksapp.shared.config import JwtConfig
from tasksapp.shared.utils.clock import Clock, utcnow

JWT_ALGORITHM = "HS256"
REFRESH_TOKEN_BYTES = 128
SALT_LENGTH = 16


@dataclass(slots=True, frozen=True)
class IssuedToken:
    token: str
    expires_at: datetime


class CredentialService:
    """Stateless credential primitives; holds configuration only."""

    def __init__(
        self,
        config: JwtConfig,
        *,
        clock: Clock | None = None,
    ) -> None:
        self._config = config
        self._clock = clock or utcnow

    def hash_password(self, password: str, salt: str = "") -> str:
        """Derive the stored hash for ``password``.

        Pure in ``(password, salt)``: the same pair always yields the same
        64-character hex digest. An empty salt gives the unsalted variant.
        """
        digest = hashlib.pbkdf2_hmac(
            "sha256",
            password.encode("utf-8"),
            salt.encode("utf-8"),
            self._config.password_hash_iterations,
        )
        return digest.hex()

    def verify_password(self, password: str, salt: str, expected_hash: str) -> bool:
        return hmac.compare_digest(self.hash_password(password, salt), expected_hash)

    @staticmethod
    def generate_salt() -> str:
        return gen_salt(SALT_LENGTH)

    @staticmethod
    def generate_refresh_token() -> str:
        return base64.b64encode(secrets.token_bytes(REFRESH_TOKEN_BYTES)).decode("ascii")

    def refresh_token_expiry(self, now: datetime) -> datetime:
        return now + timedelta(days=self._config.refresh_token_days)

    def generate_access_token(self, email: str, username: str) -> IssuedToken:
        issued_at = self._clock()
        expires_at = issued_at + timedelta(days=self._config.access_token_days)
        payload = {
            "email": email,
            "username": username,
            "iss": self._config.issuer,
            "aud": self._config.audience,
            "iat": issued_at,
            "exp": expires_at,
        }
        token = jwt.encode(payload, self._config.key, algorithm=JWT_ALGORITHM)
        return IssuedToken(token=token, expires_at=expires_at)

    def decode_access_token(self, token: str) -> dict[str, Any]:
        # Expiry is judged by the service clock, not the wall clock.
        try:
            claims = jwt.decode(
                token,
                self._config.key,
                algorithms=[JWT_ALGORITHM],
                audience=self._config.audience,
                issuer=self._config.issuer,
                options={"require": ["exp", "iat", "iss", "aud"], "verify_exp": False},
            )
        except jwt.InvalidTokenError as exc:
            raise InvalidAccessTokenError(context={"reason": "invalid"}) from exc
        if claims["exp"] <= self._clock().timestamp():
            raise InvalidAccessTokenError(context={"reason": "expired"})
        return claims


__all__ = ["CredentialService", "IssuedToken", "JWT_ALGORITHM"]
