# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

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

ROTATION_ATTEMPTS = 2


class LoginUserUseCase:
    """Verify credentials and start a fresh session.

    A concurrent login for the same identity can move the stored row between
    read and write. The password was already proven, so the rotation is
    retried on a fresh read instead of surfacing a server error.
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

    def execute(self, *, email: str, password: str) -> SessionResult:
        for attempt in range(1, ROTATION_ATTEMPTS):
            try:
                return self._attempt(email=email, password=password)
            except StaleIdentityError:
                logger.info(f"auth.login: concurrent rotation, retry {attempt}")
        return self._attempt(email=email, password=password)

    def _attempt(self, *, email: str, password: str) -> SessionResult:
        with self._uow_factory() as uow:
            user = uow.users.find_one(email=email)
            if user is None:
                logger.info("auth.login: unknown email")
                return Err(SessionFailure.not_found())

            if not self._credentials.verify_password(
                password, user.password_salt, user.password_hash
            ):
                logger.info(f"auth.login: wrong password user_id={user.id}")
                return Err(SessionFailure.invalid_credentials())

            user = rotate_refresh_token(user, self._credentials, self._clock())
            uow.users.update(user)
            uow.commit()

        logger.info(f"auth.login: ok user_id={user.id}")
        return Ok(grant_session(user, self._credentials))
