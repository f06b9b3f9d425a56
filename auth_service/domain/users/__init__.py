# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import (
    AccessToken,
    PasswordResetNotification,
    PublicUser,
    ResetRequest,
    User,
    UserPage,
    normalize_email,
)
from .exceptions import (
    AccountLockedError,
    InvalidCredentialsError,
    PasswordHashingTimeoutError,
    ResetTokenConsumedError,
    ResetTokenExpiredError,
    ResetTokenNotFoundError,
    TokenExpiredError,
    TokenInvalidError,
    TokenVerificationError,
    UserAlreadyExistsError,
    UserNotFoundError,
)

__all__ = [
    "AccessToken",
    "AccountLockedError",
    "InvalidCredentialsError",
    "PasswordHashingTimeoutError",
    "PasswordResetNotification",
    "PublicUser",
    "ResetRequest",
    "ResetTokenConsumedError",
    "ResetTokenExpiredError",
    "ResetTokenNotFoundError",
    "TokenExpiredError",
    "TokenInvalidError",
    "TokenVerificationError",
    "User",
    "UserAlreadyExistsError",
    "UserNotFoundError",
    "UserPage",
    "normalize_email",
]
