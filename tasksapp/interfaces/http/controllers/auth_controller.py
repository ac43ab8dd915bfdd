# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, g, jsonify, request
from pydantic import ValidationError

from tasksapp.application.services.credentials import CredentialService
from tasksapp.application.use_cases.users.login_user import LoginUserUseCase
from tasksapp.application.use_cases.users.refresh_session import RefreshSessionUseCase
from tasksapp.application.use_cases.users.register_user import RegisterUserUseCase
from tasksapp.domain.users.results import Err, SessionGrant, SessionResult
from tasksapp.infrastructure.audit import AuditAction, audit_log
from tasksapp.interfaces.http.dto.auth import (
    CurrentIdentityDTO,
    LoginRequestDTO,
    RefreshTokenRequestDTO,
    RegisterRequestDTO,
    SessionResponseDTO,
)
from tasksapp.interfaces.http.guards import ACCESS_TOKEN_COOKIE, access_token_required
from tasksapp.shared.config import SecurityConfig
from tasksapp.shared.errors.validation import raise_validation_error
from tasksapp.shared.logging import logger

REFRESH_TOKEN_COOKIE = "refreshToken"


def _get_client_ip() -> str | None:
    ip_address = request.headers.get("X-Forwarded-For", request.remote_addr)
    if ip_address and "," in ip_address:
        ip_address = ip_address.split(",")[0].strip()
    return ip_address


class AuthController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        refresh_session_use_case: RefreshSessionUseCase,
        credentials: CredentialService,
        security: SecurityConfig,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._refresh_session_use_case = refresh_session_use_case
        self._credentials = credentials
        self._security = security

    def register(self) -> tuple[Response, int]:
        try:
            dto = RegisterRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        result = self._register_use_case.execute(
            name=dto.name,
            surname=dto.surname,
            email=dto.email,
            username=dto.username,
            password=dto.password,
        )
        self._audit(
            result,
            success_action=AuditAction.REGISTER,
            failure_action=AuditAction.REGISTER_FAILED,
            details={"username": dto.username},
        )
        return self._respond(result)

    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        result = self._login_use_case.execute(email=dto.email, password=dto.password)
        self._audit(
            result,
            success_action=AuditAction.LOGIN_SUCCESS,
            failure_action=AuditAction.LOGIN_FAILED,
        )
        return self._respond(result)

    def refresh_token(self) -> tuple[Response, int]:
        try:
            dto = RefreshTokenRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        presented = request.cookies.get(REFRESH_TOKEN_COOKIE) or dto.refresh_token
        result = self._refresh_session_use_case.execute(
            username=dto.username, refresh_token=presented
        )
        self._audit(
            result,
            success_action=AuditAction.SESSION_REFRESHED,
            failure_action=AuditAction.SESSION_REFRESH_FAILED,
            details={"username": dto.username},
        )
        return self._respond(result)

    def me(self) -> tuple[Response, int]:
        payload = CurrentIdentityDTO(email=g.email, username=g.username)
        return jsonify(payload.model_dump(mode="json")), 200

    def _respond(self, result: SessionResult) -> tuple[Response, int]:
        if isinstance(result, Err):
            failure = result.error
            return jsonify(failure.to_dict()), int(failure.status)

        grant = result.value
        g.user_id = grant.id
        payload = SessionResponseDTO.model_validate(grant).model_dump(mode="json")
        response = jsonify(payload)
        self._set_session_cookies(response, grant)
        return response, 200

    def _set_session_cookies(self, response: Response, grant: SessionGrant) -> None:
        response.set_cookie(
            ACCESS_TOKEN_COOKIE,
            grant.access_token,
            expires=grant.access_token_expires_at,
            httponly=True,
            samesite=self._security.cookie_samesite,
            secure=self._security.cookie_secure,
        )
        response.set_cookie(
            REFRESH_TOKEN_COOKIE,
            grant.refresh_token,
            expires=grant.refresh_token_expires_at,
            httponly=True,
            samesite=self._security.cookie_samesite,
            secure=self._security.cookie_secure,
        )

    @staticmethod
    def _audit(
        result: SessionResult,
        *,
        success_action: AuditAction,
        failure_action: AuditAction,
        details: dict[str, str] | None = None,
    ) -> None:
        ip_address = _get_client_ip()
        if isinstance(result, Err):
            audit_log(
                failure_action,
                ip_address=ip_address,
                details={**(details or {}), "reason": result.error.kind.value},
                success=False,
            )
            return
        audit_log(
            success_action,
            user_id=result.value.id,
            ip_address=ip_address,
            details=details,
            success=True,
        )

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/api/auth")
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/refresh-token", view_func=self.refresh_token, methods=["POST"])
        bp.add_url_rule(
            "/me",
            view_func=access_token_required(self._credentials)(self.me),
            methods=["GET"],
        )
        logger.debug("auth blueprint assembled")
        return bp


__all__ = ["ACCESS_TOKEN_COOKIE", "AuthController", "REFRESH_TOKEN_COOKIE"]
