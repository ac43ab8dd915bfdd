# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Outcome types returned by the session use cases.

Expected business failures (conflicts, unknown users, bad passwords, stale
refresh tokens) are values, not exceptions: every use case returns either
``Ok(SessionGrant)`` or ``Err(SessionFailure)``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from http import HTTPStatus
from typing import Any, Generic, TypeVar

from .entities import User

T = TypeVar("T")
E = TypeVar("E")


class Availability(StrEnum):
    BOTH_AVAILABLE = "both_available"
    EMAIL_TAKEN = "email_taken"
    USERNAME_TAKEN = "username_taken"
    BOTH_TAKEN = "both_taken"

    @classmethod
    def classify(cls, *, email_taken: bool, username_taken: bool) -> Availability:
        if email_taken and username_taken:
            return cls.BOTH_TAKEN
        if email_taken:
            return cls.EMAIL_TAKEN
        if username_taken:
            return cls.USERNAME_TAKEN
        return cls.BOTH_AVAILABLE


class FailureKind(StrEnum):
    IDENTITY_CONFLICT = "identity_conflict"
    NOT_FOUND = "not_found"
    INVALID_CREDENTIALS = "invalid_credentials"
    INVALID_OR_EXPIRED_TOKEN = "invalid_or_expired_token"


_CONFLICT_MESSAGES: dict[Availability, tuple[str, str]] = {
    Availability.EMAIL_TAKEN: (
        "Email already registered.",
        "The email provided is already in use, please try another email.",
    ),
    Availability.USERNAME_TAKEN: (
        "Username already registered.",
        "The username provided is already in use, please try another username.",
    ),
    Availability.BOTH_TAKEN: (
        "Username and email unavailable.",
        "The username and email provided are already in use, please try others.",
    ),
}


@dataclass(slots=True, frozen=True)
class SessionFailure:
    kind: FailureKind
    title: str
    description: str
    status: HTTPStatus
    conflict: Availability | None = None

    @classmethod
    def identity_conflict(cls, availability: Availability) -> SessionFailure:
        if availability is Availability.BOTH_AVAILABLE:
            raise ValueError("no conflict to report for an available identity")
        title, description = _CONFLICT_MESSAGES[availability]
        return cls(
            kind=FailureKind.IDENTITY_CONFLICT,
            title=title,
            description=description,
            status=HTTPStatus.BAD_REQUEST,
            conflict=availability,
        )

    @classmethod
    def not_found(cls) -> SessionFailure:
        return cls(
            kind=FailureKind.NOT_FOUND,
            title="User not found.",
            description="The email provided is not registered.",
            status=HTTPStatus.NOT_FOUND,
        )

    @classmethod
    def invalid_credentials(cls) -> SessionFailure:
        # Same 404 classifier as an unknown email.
        return cls(
            kind=FailureKind.INVALID_CREDENTIALS,
            title="Invalid password.",
            description="The password provided is incorrect.",
            status=HTTPStatus.NOT_FOUND,
        )

    @classmethod
    def invalid_or_expired_token(cls) -> SessionFailure:
        return cls(
            kind=FailureKind.INVALID_OR_EXPIRED_TOKEN,
            title="Invalid token.",
            description="Refresh token is invalid or expired. Please log in again.",
            status=HTTPStatus.BAD_REQUEST,
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "title": self.title,
            "description": self.description,
            "status": int(self.status),
        }
        if self.conflict is not None:
            payload["conflict"] = self.conflict.value
        return payload


@dataclass(slots=True, frozen=True)
class SessionGrant:
    id: str
    name: str
    surname: str | None
    email: str
    username: str
    access_token: str
    access_token_expires_at: datetime
    refresh_token: str
    refresh_token_expires_at: datetime

    @classmethod
    def for_user(
        cls, user: User, *, access_token: str, access_token_expires_at: datetime
    ) -> SessionGrant:
        if user.refresh_token is None or user.refresh_token_expires_at is None:
            raise ValueError("cannot grant a session to an identity without a refresh token")
        return cls(
            id=user.id,
            name=user.name,
            surname=user.surname,
            email=user.email,
            username=user.username,
            access_token=access_token,
            access_token_expires_at=access_token_expires_at,
            refresh_token=user.refresh_token,
            refresh_token_expires_at=user.refresh_token_expires_at,
        )


@dataclass(slots=True, frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(slots=True, frozen=True)
class Err(Generic[E]):
    error: E

    @property
    def is_ok(self) -> bool:
        return False


SessionResult = Ok[SessionGrant] | Err[SessionFailure]

__all__ = [
    "Availability",
    "Err",
    "FailureKind",
    "Ok",
    "SessionFailure",
    "SessionGrant",
    "SessionResult",
]
