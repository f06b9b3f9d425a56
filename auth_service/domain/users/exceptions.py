# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from auth_service.shared.errors.base import DomainError, InfrastructureError


class UserAlreadyExistsError(DomainError):
    code = "user_already_exists"
    status = HTTPStatus.CONFLICT


class UserNotFoundError(DomainError):
    code = "user_not_found"
    status = HTTPStatus.NOT_FOUND


class InvalidCredentialsError(DomainError):
    code = "invalid_credentials"
    status = HTTPStatus.UNAUTHORIZED


class AccountLockedError(DomainError):
    code = "account_locked"
    status = HTTPStatus.TOO_MANY_REQUESTS

    def __init__(self, lockout_remaining: float = 0) -> None:
        super().__init__(context={"lockout_remaining_seconds": round(lockout_remaining, 1)})


class TokenVerificationError(DomainError):
    code = "invalid_token"
    status = HTTPStatus.UNAUTHORIZED


class TokenInvalidError(TokenVerificationError):
    pass


class TokenExpiredError(TokenVerificationError):
    pass


class ResetTokenNotFoundError(DomainError):
    code = "reset_token_not_found"
    status = HTTPStatus.NOT_FOUND


class ResetTokenConsumedError(DomainError):
    code = "reset_token_consumed"
    status = HTTPStatus.CONFLICT


class ResetTokenExpiredError(DomainError):
    code = "reset_token_expired"
    status = HTTPStatus.GONE


class PasswordHashingTimeoutError(InfrastructureError):
    def __init__(self, timeout: float) -> None:
        super().__init__(
            "password_hashing_timeout",
            status=HTTPStatus.SERVICE_UNAVAILABLE,
            context={"timeout_seconds": timeout},
        )
