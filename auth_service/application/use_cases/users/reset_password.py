# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from auth_service.application.services.reset_tokens import ResetTokenService
from auth_service.application.validation import (
    PASSWORD_MIN_LENGTH,
    ResetPasswordInput,
    validate_input,
)
from auth_service.domain.users.entities import normalize_email
from auth_service.domain.users.repositories import UserRepository
from auth_service.infrastructure.auth.login_attempts import LoginAttemptsTracker


class ResetPasswordUseCase:
    def __init__(
        self,
        *,
        resets: ResetTokenService,
        users: UserRepository | None = None,
        attempts: LoginAttemptsTracker | None = None,
        password_min_length: int = PASSWORD_MIN_LENGTH,
    ) -> None:
        self._resets = resets
        self._users = users
        self._attempts = attempts
        self._password_min_length = password_min_length

    def execute(
        self,
        token: str | None,
        password: str | None,
        password_confirmation: str | None,
    ) -> int:
        raw = {
            "token": token,
            "password": password,
            "password_confirmation": password_confirmation,
        }
        data = validate_input(
            ResetPasswordInput,
            {key: value for key, value in raw.items() if value is not None},
            context={"password_min_length": self._password_min_length},
        )
        user_id = self._resets.consume(data.token, data.password)

        # a fresh password lifts any login lockout on the account
        if self._users is not None and self._attempts is not None:
            user = self._users.find_by_id(user_id)
            self._attempts.clear_attempts(normalize_email(user.email))
        return user_id
