# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .services.credentials import CredentialService, IssuedToken
from .services.uniqueness import check_availability
from .use_cases.users.login_user import LoginUserUseCase
from .use_cases.users.refresh_session import RefreshSessionUseCase
from .use_cases.users.register_user import RegisterUserUseCase

__all__ = [
    "CredentialService",
    "IssuedToken",
    "check_availability",
    "LoginUserUseCase",
    "RefreshSessionUseCase",
    "RegisterUserUseCase",
]
