# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from .entities import AccessToken, PasswordResetNotification, ResetRequest, User


class UserRepository(Protocol):
    def create(self, name: str, email: str, password_hash: str) -> User: ...
    def find_by_email(self, email: str) -> User: ...
    def find_by_id(self, user_id: int) -> User: ...
    def list(self, page: int, page_size: int) -> tuple[list[User], int]: ...


class ResetRequestRepository(Protocol):
    def replace_for_user(
        self, user_id: int, token_hash: str, created_at: datetime, expires_at: datetime
    ) -> ResetRequest: ...
    def latest_for_user(self, user_id: int) -> ResetRequest | None: ...
    def consume(self, token_hash: str, password_hash: str, now: datetime) -> int: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...


class TokenIssuer(Protocol):
    def issue(self, subject_id: int, ttl_seconds: int) -> AccessToken: ...
    def verify(self, token: str) -> int: ...


class ResetNotifier(Protocol):
    def send_reset(self, notification: PasswordResetNotification) -> None: ...
