# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Steps shared by every flow that hands out a session."""

from __future__ import annotations

from datetime import datetime

from tasksapp.application.services.credentials import CredentialService
from tasksapp.domain.users.entities import User
from tasksapp.domain.users.results import SessionGrant


def rotate_refresh_token(user: User, credentials: CredentialService, now: datetime) -> User:
    return user.with_refresh_token(
        credentials.generate_refresh_token(),
        credentials.refresh_token_expiry(now),
        now=now,
    )


def grant_session(user: User, credentials: CredentialService) -> SessionGrant:
    access = credentials.generate_access_token(user.email, user.username)
    return SessionGrant.for_user(
        user,
        access_token=access.token,
        access_token_expires_at=access.expires_at,
    )
