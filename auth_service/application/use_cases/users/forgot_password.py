# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from auth_service.application.services.reset_tokens import ResetTokenService
from auth_service.application.validation import ForgotPasswordInput, validate_input
from auth_service.domain.users.entities import normalize_email


class ForgotPasswordUseCase:
    """Start a password reset; the outcome never depends on the email existing."""

    def __init__(self, *, resets: ResetTokenService) -> None:
        self._resets = resets

    def execute(self, email: str | None) -> None:
        data = validate_input(
            ForgotPasswordInput, {"email": email} if email is not None else {}
        )
        self._resets.initiate(normalize_email(str(data.email)))
