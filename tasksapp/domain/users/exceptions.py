# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from tasksapp.shared.errors.base import DomainError, PersistenceError


class DuplicateIdentityError(PersistenceError):
    """Commit hit the email/username unique constraint."""

    def __init__(self) -> None:
        super().__init__("duplicate_identity")


class StaleIdentityError(PersistenceError):
    """Write lost an optimistic version check against a concurrent writer."""

    def __init__(self) -> None:
        super().__init__("stale_identity")


class InvalidAccessTokenError(DomainError):
    code = "invalid_access_token"
    status = HTTPStatus.UNAUTHORIZED
