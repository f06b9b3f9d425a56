# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Single-use password reset tokens."""

from __future__ import annotations

import hashlib
import secrets
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from auth_service.domain.users.entities import PasswordResetNotification
from auth_service.domain.users.exceptions import UserNotFoundError
from auth_service.domain.users.repositories import (
    PasswordHasher,
    ResetNotifier,
    ResetRequestRepository,
    UserRepository,
)
from auth_service.shared.logging import logger

RESET_TOKEN_MINUTES = 60
RESET_THROTTLE_SECONDS = 60.0


def hash_reset_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ResetTokenService:
    def __init__(
        self,
        *,
        users: UserRepository,
        resets: ResetRequestRepository,
        password_hasher: PasswordHasher,
        notifier: ResetNotifier,
        ttl: timedelta = timedelta(minutes=RESET_TOKEN_MINUTES),
        throttle_seconds: float = RESET_THROTTLE_SECONDS,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._users = users
        self._resets = resets
        self._password_hasher = password_hasher
        self._notifier = notifier
        self._ttl = ttl
        self._throttle = timedelta(seconds=throttle_seconds)
        self._clock = clock

    def initiate(self, email: str) -> str | None:
        """Create a reset request and hand the raw token to the notifier.

        Unknown emails and throttled repeats are silent no-ops returning
        ``None`` so callers cannot probe which addresses are registered.
        """
        try:
            user = self._users.find_by_email(email)
        except UserNotFoundError:
            logger.info("reset.initiate: no matching user, skipping")
            return None

        now = self._clock()
        latest = self._resets.latest_for_user(user.id)
        if latest is not None and now - latest.created_at < self._throttle:
            logger.info(f"reset.initiate: throttled user_id={user.id}")
            return None

        token = secrets.token_urlsafe(32)
        expires_at = now + self._ttl
        self._resets.replace_for_user(user.id, hash_reset_token(token), now, expires_at)

        self._notifier.send_reset(
            PasswordResetNotification(
                email=user.email,
                name=user.name,
                token=token,
                expires_at=expires_at,
            )
        )
        logger.info(f"reset.initiate: issued user_id={user.id} exp={expires_at.isoformat()}")
        return token

    def consume(self, token: str, new_password: str) -> int:
        """Spend ``token`` and set ``new_password``; returns the user id.

        Raises ResetTokenNotFoundError, ResetTokenExpiredError or
        ResetTokenConsumedError. Consumption and the password write share
        one transaction in the repository.
        """
        password_hash = self._password_hasher.hash(new_password)
        user_id = self._resets.consume(hash_reset_token(token), password_hash, self._clock())
        logger.info(f"reset.consume: password updated user_id={user_id}")
        return user_id


__all__ = [
    "RESET_THROTTLE_SECONDS",
    "RESET_TOKEN_MINUTES",
    "ResetTokenService",
    "hash_reset_token",
]
