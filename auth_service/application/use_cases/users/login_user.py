# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from auth_service.application.validation import LoginInput, validate_input
from auth_service.domain.users.entities import AccessToken, User, normalize_email
from auth_service.domain.users.exceptions import (
    AccountLockedError,
    InvalidCredentialsError,
    UserNotFoundError,
)
from auth_service.domain.users.repositories import PasswordHasher, TokenIssuer, UserRepository
from auth_service.infrastructure.auth.login_attempts import LoginAttemptsTracker
from auth_service.shared.logging import logger

DEFAULT_TOKEN_TTL_SECONDS = 60 * 60

_DUMMY_PASSWORD = "not-a-real-password"


class LoginUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
        tokens: TokenIssuer,
        attempts: LoginAttemptsTracker | None = None,
        token_ttl_seconds: int = DEFAULT_TOKEN_TTL_SECONDS,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._tokens = tokens
        self._attempts = attempts
        self._token_ttl_seconds = token_ttl_seconds
        self._dummy_hash: str | None = None

    @property
    def token_ttl_seconds(self) -> int:
        return self._token_ttl_seconds

    def execute(
        self, email: str | None, password: str | None, ip_address: str | None = None
    ) -> AccessToken:
        raw = {"email": email, "password": password}
        data = validate_input(
            LoginInput, {key: value for key, value in raw.items() if value is not None}
        )
        key = normalize_email(data.email)

        if self._attempts is not None and self._attempts.is_locked(key):
            raise AccountLockedError(
                lockout_remaining=self._attempts.get_lockout_remaining(key)
            )

        user = self._authenticate(key, data.password)
        if user is None:
            if self._attempts is not None:
                self._attempts.record_attempt(key, success=False, ip_address=ip_address)
            raise InvalidCredentialsError()

        if self._attempts is not None:
            self._attempts.record_attempt(key, success=True, ip_address=ip_address)

        token = self._tokens.issue(user.id, self._token_ttl_seconds)
        logger.info(f"auth.login: ok user_id={user.id}")
        return token

    def _authenticate(self, email: str, password: str) -> User | None:
        try:
            user = self._users.find_by_email(email)
        except UserNotFoundError:
            # Spend the same hashing work as a real check so response time
            # does not reveal whether the email is registered.
            self._password_hasher.verify(password, self._get_dummy_hash())
            return None

        if not self._password_hasher.verify(password, user.password_hash):
            return None
        return user

    def _get_dummy_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = self._password_hasher.hash(_DUMMY_PASSWORD)
        return self._dummy_hash
