# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

from tasksapp.shared.errors.validation_types import ValidationErrorType

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 50
USERNAME_MAX_LENGTH = 50


def _check_username(value: str) -> str:
    if not value:
        raise PydanticCustomError(
            ValidationErrorType.MISSING,
            "Username cannot be empty",
            {}
        )
    return value


def _check_email(value: str) -> str:
    if not value:
        raise PydanticCustomError(
            ValidationErrorType.MISSING,
            "Email cannot be empty",
            {}
        )
    if not _EMAIL_RE.match(value):
        raise PydanticCustomError(
            ValidationErrorType.EMAIL_INVALID,
            "Email is not valid",
            {}
        )
    return value


def _check_name_length(value: str, field: str) -> str:
    if not NAME_MIN_LENGTH <= len(value) <= NAME_MAX_LENGTH:
        raise PydanticCustomError(
            ValidationErrorType.NAME_LENGTH,
            "{field} must be between {min_length} and {max_length} characters",
            {"field": field, "min_length": NAME_MIN_LENGTH, "max_length": NAME_MAX_LENGTH}
        )
    return value


class RegisterRequestDTO(BaseModel):
    name: str
    surname: str | None = None
    email: str
    username: str = Field(max_length=USERNAME_MAX_LENGTH)
    password: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return _check_name_length(value.strip(), "Name")

    @field_validator("surname")
    @classmethod
    def validate_surname(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return _check_name_length(value.strip(), "Surname")

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _check_email(value.strip())

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        return _check_username(value.strip())

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        # Not stripped; only emptiness is rejected.
        if not value:
            raise PydanticCustomError(
                ValidationErrorType.PASSWORD_EMPTY,
                "Password cannot be empty",
                {}
            )
        return value


class LoginRequestDTO(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _check_email(value.strip())

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        if not value:
            raise PydanticCustomError(
                ValidationErrorType.PASSWORD_EMPTY,
                "Password cannot be empty",
                {}
            )
        return value


class RefreshTokenRequestDTO(BaseModel):
    username: str = Field(max_length=USERNAME_MAX_LENGTH)
    refresh_token: str | None = None

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        return _check_username(value.strip())


class CurrentIdentityDTO(BaseModel):
    email: str
    username: str


class SessionResponseDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    surname: str | None
    email: str
    username: str
    access_token: str
    access_token_expires_at: datetime
    refresh_token: str
    refresh_token_expires_at: datetime


__all__ = [
    "CurrentIdentityDTO",
    "LoginRequestDTO",
    "RefreshTokenRequestDTO",
    "RegisterRequestDTO",
    "SessionResponseDTO",
]
