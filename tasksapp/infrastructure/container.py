# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from functools import cached_property

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from tasksapp.application.services.credentials import CredentialService
from tasksapp.application.use_cases.users.login_user import LoginUserUseCase
from tasksapp.application.use_cases.users.refresh_session import RefreshSessionUseCase
from tasksapp.application.use_cases.users.register_user import RegisterUserUseCase
from tasksapp.infrastructure.db import build_engine, build_session_factory
from tasksapp.infrastructure.unit_of_work import SqlAlchemyUnitOfWork, unit_of_work_factory
from tasksapp.interfaces.http.controllers.auth_controller import AuthController
from tasksapp.shared.config import AppConfig
from tasksapp.shared.utils.clock import Clock, utcnow


class Container:
    def __init__(self, config: AppConfig, *, clock: Clock | None = None) -> None:
        self.config = config
        self.clock = clock or utcnow

    @cached_property
    def engine(self) -> Engine:
        return build_engine(self.config.database)

    @cached_property
    def session_factory(self) -> sessionmaker[Session]:
        return build_session_factory(self.engine)

    @cached_property
    def uow_factory(self) -> Callable[[], SqlAlchemyUnitOfWork]:
        return unit_of_work_factory(self.session_factory)

    @cached_property
    def credentials(self) -> CredentialService:
        return CredentialService(self.config.jwt, clock=self.clock)

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            uow_factory=self.uow_factory,
            credentials=self.credentials,
            clock=self.clock,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            uow_factory=self.uow_factory,
            credentials=self.credentials,
            clock=self.clock,
        )

    @cached_property
    def refresh_session_use_case(self) -> RefreshSessionUseCase:
        return RefreshSessionUseCase(
            uow_factory=self.uow_factory,
            credentials=self.credentials,
            clock=self.clock,
        )

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            refresh_session_use_case=self.refresh_session_use_case,
            credentials=self.credentials,
            security=self.config.security,
        )


__all__ = ["Container"]
