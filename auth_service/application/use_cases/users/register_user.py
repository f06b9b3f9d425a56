# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from auth_service.application.validation import (
    PASSWORD_MIN_LENGTH,
    RegistrationInput,
    validate_input,
)
from auth_service.domain.users.entities import User, normalize_email
from auth_service.domain.users.exceptions import UserAlreadyExistsError, UserNotFoundError
from auth_service.domain.users.repositories import PasswordHasher, UserRepository
from auth_service.shared.logging import logger


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
        password_min_length: int = PASSWORD_MIN_LENGTH,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._password_min_length = password_min_length

    def execute(
        self,
        name: str | None,
        email: str | None,
        password: str | None,
        password_confirmation: str | None,
    ) -> User:
        raw = {
            "name": name,
            "email": email,
            "password": password,
            "password_confirmation": password_confirmation,
        }
        data = validate_input(
            RegistrationInput,
            {key: value for key, value in raw.items() if value is not None},
            context={"password_min_length": self._password_min_length},
        )
        normalized = normalize_email(str(data.email))

        try:
            self._users.find_by_email(normalized)
        except UserNotFoundError:
            pass
        else:
            raise UserAlreadyExistsError()

        hashed = self._password_hasher.hash(data.password)
        # The store's unique index decides races between concurrent registrations.
        user = self._users.create(data.name, normalized, hashed)
        logger.info(f"auth.register: created user_id={user.id}")
        return user
