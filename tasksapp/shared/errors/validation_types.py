# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from enum import StrEnum


class ValidationErrorType(StrEnum):
    MISSING = "missing"
    NAME_LENGTH = "name_length"
    EMAIL_INVALID = "email_invalid"
    PASSWORD_EMPTY = "password_empty"


__all__ = ["ValidationErrorType"]
