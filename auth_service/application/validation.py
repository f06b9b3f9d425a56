# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Input rules shared by the auth use cases."""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationInfo, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

from auth_service.shared.errors.validation import raise_validation_error

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 128

ModelT = TypeVar("ModelT", bound=BaseModel)


def _check_password(value: str, info: ValidationInfo) -> str:
    min_length = (info.context or {}).get("password_min_length", PASSWORD_MIN_LENGTH)
    if len(value) < min_length:
        raise PydanticCustomError(
            "password_too_short",
            "Password must be at least {min_length} characters long",
            {"min_length": min_length},
        )
    return value


def _check_confirmation(value: str, info: ValidationInfo) -> str:
    password = info.data.get("password")
    if password is not None and value != password:
        raise PydanticCustomError(
            "password_mismatch",
            "Password confirmation does not match",
        )
    return value


class _Input(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=False, extra="ignore")


class RegistrationInput(_Input):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(max_length=PASSWORD_MAX_LENGTH)
    password_confirmation: str = Field(max_length=PASSWORD_MAX_LENGTH)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise PydanticCustomError("name_blank", "Name cannot be empty")
        return value.strip()

    @field_validator("password")
    @classmethod
    def _password_rules(cls, value: str, info: ValidationInfo) -> str:
        return _check_password(value, info)

    @field_validator("password_confirmation")
    @classmethod
    def _confirmation_matches(cls, value: str, info: ValidationInfo) -> str:
        return _check_confirmation(value, info)


class LoginInput(_Input):
    email: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=PASSWORD_MAX_LENGTH)


class ForgotPasswordInput(_Input):
    email: EmailStr


class ResetPasswordInput(_Input):
    token: str = Field(min_length=1, max_length=512)
    password: str = Field(max_length=PASSWORD_MAX_LENGTH)
    password_confirmation: str = Field(max_length=PASSWORD_MAX_LENGTH)

    @field_validator("password")
    @classmethod
    def _password_rules(cls, value: str, info: ValidationInfo) -> str:
        return _check_password(value, info)

    @field_validator("password_confirmation")
    @classmethod
    def _confirmation_matches(cls, value: str, info: ValidationInfo) -> str:
        return _check_confirmation(value, info)


def validate_input(
    model: type[ModelT], data: dict[str, Any], *, context: dict[str, Any] | None = None
) -> ModelT:
    """Validate ``data`` against ``model`` or raise the app's ValidationError."""
    try:
        return model.model_validate(data, context=context)
    except PydanticValidationError as exc:
        raise_validation_error(exc)


__all__ = [
    "ForgotPasswordInput",
    "LoginInput",
    "PASSWORD_MAX_LENGTH",
    "PASSWORD_MIN_LENGTH",
    "RegistrationInput",
    "ResetPasswordInput",
    "validate_input",
]
