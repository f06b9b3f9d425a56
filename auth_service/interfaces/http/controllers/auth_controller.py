# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any

from flask import Blueprint, Response, jsonify, request

from auth_service.application.use_cases.users.forgot_password import ForgotPasswordUseCase
from auth_service.application.use_cases.users.login_user import LoginUserUseCase
from auth_service.application.use_cases.users.register_user import RegisterUserUseCase
from auth_service.application.use_cases.users.reset_password import ResetPasswordUseCase
from auth_service.infrastructure.audit import AuditAction, audit_log
from auth_service.interfaces.http.dto.auth import RegisteredDTO, StatusDTO, TokenDTO, UserDTO
from auth_service.shared.errors import AppError
from auth_service.shared.middleware.rate_limit import rate_limit


def _get_client_ip() -> str | None:
    ip_address = request.headers.get("X-Forwarded-For", request.remote_addr)
    if ip_address and "," in ip_address:
        ip_address = ip_address.split(",")[0].strip()
    return ip_address


def _json_body() -> dict[str, Any]:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


class AuthController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        forgot_password_use_case: ForgotPasswordUseCase,
        reset_password_use_case: ResetPasswordUseCase,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._forgot_password_use_case = forgot_password_use_case
        self._reset_password_use_case = reset_password_use_case

    @rate_limit(limit=5, window_seconds=60.0)
    def register(self) -> tuple[Response, int]:
        body = _json_body()
        ip_address = _get_client_ip()

        try:
            user = self._register_use_case.execute(
                body.get("name"),
                body.get("email"),
                body.get("password"),
                body.get("password_confirmation"),
            )
        except AppError as exc:
            audit_log(
                AuditAction.REGISTER_FAILED,
                ip_address=ip_address,
                details={"error": exc.code},
                success=False,
            )
            raise

        audit_log(AuditAction.REGISTER, user_id=user.id, ip_address=ip_address)

        payload = RegisteredDTO(user=UserDTO.model_validate(user.to_public())).model_dump(
            mode="json"
        )
        return jsonify(payload), 201

    @rate_limit(limit=10, window_seconds=60.0)
    def login(self) -> tuple[Response, int]:
        body = _json_body()
        ip_address = _get_client_ip()

        try:
            token = self._login_use_case.execute(
                body.get("email"), body.get("password"), ip_address
            )
        except AppError as exc:
            audit_log(
                AuditAction.LOGIN_FAILED,
                ip_address=ip_address,
                details={"error": exc.code},
                success=False,
            )
            raise

        audit_log(AuditAction.LOGIN_SUCCESS, user_id=token.subject, ip_address=ip_address)

        payload = TokenDTO(access_token=token.token, expires_in=token.expires_in).model_dump()
        return jsonify(payload), 200

    @rate_limit(limit=5, window_seconds=60.0)
    def forgot_password(self) -> tuple[Response, int]:
        body = _json_body()
        self._forgot_password_use_case.execute(body.get("email"))

        # Same answer whether or not the address is registered
        audit_log(AuditAction.PASSWORD_RESET_REQUESTED, ip_address=_get_client_ip())
        return jsonify(StatusDTO(status="reset_link_sent").model_dump()), 200

    @rate_limit(limit=10, window_seconds=60.0)
    def reset_password(self) -> tuple[Response, int]:
        body = _json_body()
        ip_address = _get_client_ip()

        try:
            user_id = self._reset_password_use_case.execute(
                body.get("token"),
                body.get("password"),
                body.get("password_confirmation"),
            )
        except AppError as exc:
            audit_log(
                AuditAction.PASSWORD_RESET_FAILED,
                ip_address=ip_address,
                details={"error": exc.code},
                success=False,
            )
            raise

        audit_log(AuditAction.PASSWORD_RESET_COMPLETED, user_id=user_id, ip_address=ip_address)
        return jsonify(StatusDTO(status="password_reset").model_dump()), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/api/auth")
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/forgot-password", view_func=self.forgot_password, methods=["POST"])
        bp.add_url_rule("/reset-password", view_func=self.reset_password, methods=["POST"])
        return bp
