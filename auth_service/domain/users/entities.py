# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


def normalize_email(email: str) -> str:
    return email.strip().lower()


@dataclass(slots=True, frozen=True)
class User:

    id: int
    name: str
    email: str
    password_hash: str
    created_at: datetime

    def to_public(self) -> PublicUser:
        return PublicUser(
            id=self.id,
            name=self.name,
            email=self.email,
            created_at=self.created_at,
        )


@dataclass(slots=True, frozen=True)
class PublicUser:
    """User projection that is safe to hand to callers (no password hash)."""

    id: int
    name: str
    email: str
    created_at: datetime


@dataclass(slots=True, frozen=True)
class UserPage:

    users: list[PublicUser]
    total: int
    page: int
    page_size: int


@dataclass(slots=True, frozen=True)
class AccessToken:

    subject: int
    token: str
    issued_at: datetime
    expires_at: datetime

    @property
    def expires_in(self) -> int:
        return max(0, int((self.expires_at - self.issued_at).total_seconds()))


@dataclass(slots=True, frozen=True)
class ResetRequest:
    """A pending or used password reset.

    Only the SHA-256 digest of the token handed to the user is kept here.
    """

    id: int
    user_id: int
    token_hash: str
    created_at: datetime
    expires_at: datetime
    consumed_at: datetime | None = None

    @property
    def consumed(self) -> bool:
        return self.consumed_at is not None

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


@dataclass(slots=True, frozen=True)
class PasswordResetNotification:

    email: str
    name: str
    token: str
    expires_at: datetime
