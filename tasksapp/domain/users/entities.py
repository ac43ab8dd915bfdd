# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime

from tasksapp.domain.exceptions import InvariantViolation


@dataclass(slots=True, frozen=True)
class User:
    """Registered identity: profile fields, credentials and the current refresh token."""

    id: str
    name: str
    surname: str | None
    email: str
    username: str
    password_hash: str
    password_salt: str
    refresh_token: str | None = None
    refresh_token_expires_at: datetime | None = None
    # Store row version this identity was read at; 0 until first persisted.
    version: int = 0

    def __post_init__(self) -> None:
        if not self.password_hash:
            raise InvariantViolation("identity requires a password hash", field="password_hash")
        if (self.refresh_token is None) != (self.refresh_token_expires_at is None):
            raise InvariantViolation(
                "refresh token and its expiry must be set together",
                field="refresh_token_expires_at",
            )
        expires_at = self.refresh_token_expires_at
        if expires_at is not None and expires_at.tzinfo is None:
            raise InvariantViolation(
                "refresh token expiry must be timezone-aware",
                field="refresh_token_expires_at",
            )

    def with_refresh_token(self, token: str, expires_at: datetime, *, now: datetime) -> User:
        if not token:
            raise InvariantViolation("refresh token cannot be empty", field="refresh_token")
        if expires_at <= now:
            raise InvariantViolation(
                "refresh token must expire in the future",
                field="refresh_token_expires_at",
            )
        return replace(self, refresh_token=token, refresh_token_expires_at=expires_at)

    def refresh_token_valid_at(self, now: datetime) -> bool:
        expires_at = self.refresh_token_expires_at
        return self.refresh_token is not None and expires_at is not None and expires_at >= now
