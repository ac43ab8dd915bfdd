from __future__ import annotations

from collections.abc import Callable

import pytest

from tasksapp.application.services.credentials import CredentialService
from tasksapp.shared.config import (
    AppConfig,
    DatabaseConfig,
    JwtConfig,
    LoggingConfig,
    SecurityConfig,
)
from tasksapp.tests.support import (
    TEST_JWT_KEY,
    FrozenClock,
    InMemoryUnitOfWork,
    InMemoryUserStore,
)


@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture()
def jwt_config() -> JwtConfig:
    return JwtConfig(
        issuer="tasksapp-test",
        audience="tasksapp-test-clients",
        key=TEST_JWT_KEY,
        access_token_days=2,
        refresh_token_days=7,
        password_hash_iterations=1_000,
    )


@pytest.fixture()
def credentials(jwt_config: JwtConfig, clock: FrozenClock) -> CredentialService:
    return CredentialService(jwt_config, clock=clock)


@pytest.fixture()
def store() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture()
def uow_factory(store: InMemoryUserStore) -> Callable[[], InMemoryUnitOfWork]:
    return lambda: InMemoryUnitOfWork(store)


@pytest.fixture()
def app_config(jwt_config: JwtConfig, tmp_path) -> AppConfig:
    return AppConfig(
        app_env="test",
        debug_logging=False,
        database=DatabaseConfig(url="sqlite://"),
        jwt=jwt_config,
        security=SecurityConfig(cookie_secure=False, cookie_samesite="Strict"),
        logging=LoggingConfig(file=tmp_path / "app.log"),
    )
