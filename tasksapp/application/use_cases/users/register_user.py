# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from uuid import uuid4

from tasksapp.application.services.credentials import CredentialService
from tasksapp.application.services.uniqueness import check_availability
from tasksapp.application.use_cases.users.session_issuer import (
    grant_session,
    rotate_refresh_token,
)
from tasksapp.domain.users.entities import User
from tasksapp.domain.users.exceptions import DuplicateIdentityError
from tasksapp.domain.users.repositories import UserUnitOfWork
from tasksapp.domain.users.results import (
    Availability,
    Err,
    Ok,
    SessionFailure,
    SessionResult,
)
from tasksapp.shared.logging import logger
from tasksapp.shared.utils.clock import Clock, utcnow


class RegisterUserUseCase:
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

    def execute(
        self,
        *,
        name: str,
        surname: str | None,
        email: str,
        username: str,
        password: str,
    ) -> SessionResult:
        with self._uow_factory() as uow:
            availability = check_availability(uow.users, email, username)
            if availability is not Availability.BOTH_AVAILABLE:
                logger.info(f"auth.register: rejected {availability.value} username={username}")
                return Err(SessionFailure.identity_conflict(availability))

            salt = self._credentials.generate_salt()
            user = User(
                id=str(uuid4()),
                name=name,
                surname=surname,
                email=email,
                username=username,
                password_hash=self._credentials.hash_password(password, salt),
                password_salt=salt,
            )
            user = rotate_refresh_token(user, self._credentials, self._clock())
            uow.users.create(user)
            try:
                uow.commit()
                lost_race = False
            except DuplicateIdentityError:
                # Another registration claimed a field between check and commit.
                lost_race = True

        if lost_race:
            availability = self._reclassify(email, username)
            logger.info(f"auth.register: lost race {availability.value} username={username}")
            return Err(SessionFailure.identity_conflict(availability))

        logger.info(f"auth.register: ok user_id={user.id}")
        return Ok(grant_session(user, self._credentials))

    def _reclassify(self, email: str, username: str) -> Availability:
        with self._uow_factory() as uow:
            availability = check_availability(uow.users, email, username)
        if availability is Availability.BOTH_AVAILABLE:
            raise DuplicateIdentityError()
        return availability
