# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import hmac
from collections.abc import Callable

from tasksapp.application.services.credentials import CredentialService
from tasksapp.application.use_cases.users.session_issuer import (
    grant_session,
    rotate_refresh_token,
)
from tasksapp.domain.users.exceptions import StaleIdentityError
from tasksapp.domain.users.repositories import UserUnitOfWork
from tasksapp.domain.users.results import Err, Ok, SessionFailure, SessionResult
from tasksapp.shared.logging import logger
from tasksapp.shared.utils.clock import Clock, utcnow


class RefreshSessionUseCase:
    """Exchange a live refresh token for a new session.

    The presented token is single-use: success rotates it, so replaying the
    old value fails. Of two concurrent refreshes with the same token at most
    one succeeds; the other loses the row version check and is reported as
    an invalid token.
    """

    def __init__(
        self,
        *,
        uow_factory: Callable[[], UserUnitOfWork],
        credentials: CredentialService,
        clock: Clock | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._credentials = credentials
        self._clock = clock or utcnow

    def execute(self, *, username: str, refresh_token: str | None) -> SessionResult:
        if not refresh_token:
            logger.info("auth.refresh: no token presented")
            return Err(SessionFailure.invalid_or_expired_token())

        now = self._clock()
        with self._uow_factory() as uow:
            user = uow.users.find_one(username=username)
            if user is None or not self._token_matches(user.refresh_token, refresh_token):
                logger.info("auth.refresh: token mismatch")
                return Err(SessionFailure.invalid_or_expired_token())
            if not user.refresh_token_valid_at(now):
                logger.info(f"auth.refresh: token expired user_id={user.id}")
                return Err(SessionFailure.invalid_or_expired_token())

            user = rotate_refresh_token(user, self._credentials, now)
            try:
                uow.users.update(user)
                uow.commit()
            except StaleIdentityError:
                logger.info(f"auth.refresh: lost rotation race user_id={user.id}")
                return Err(SessionFailure.invalid_or_expired_token())

        logger.info(f"auth.refresh: ok user_id={user.id}")
        return Ok(grant_session(user, self._credentials))

    @staticmethod
    def _token_matches(stored: str | None, presented: str) -> bool:
        if stored is None:
            return False
        return hmac.compare_digest(stored.encode("utf-8"), presented.encode("utf-8"))
