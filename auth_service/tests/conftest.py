from __future__ import annotations

import os
import tempfile
import threading
from datetime import UTC, datetime, timedelta

# Settings are read once at import time by the engine and the rate limiter,
# so the environment has to be in place before anything from auth_service loads.
_TMP_DIR = tempfile.mkdtemp(prefix="auth_service-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'auth.db')}"
os.environ["LOG_FILE"] = os.path.join(_TMP_DIR, "auth_service.log")
os.environ["SECRET_KEY"] = "test-secret-key-with-enough-entropy-123456"
os.environ["ENABLE_RATE_LIMIT"] = "0"
os.environ["PASSWORD_HASH_METHOD"] = "pbkdf2:sha256:1000"
os.environ["APP_ENV"] = "test"

import pytest  # noqa: E402

from auth_service.domain.users.entities import (  # noqa: E402
    PasswordResetNotification,
    ResetRequest,
    User,
    normalize_email,
)
from auth_service.domain.users.exceptions import (  # noqa: E402
    ResetTokenConsumedError,
    ResetTokenExpiredError,
    ResetTokenNotFoundError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from auth_service.domain.users.repositories import (  # noqa: E402
    PasswordHasher,
    ResetNotifier,
    ResetRequestRepository,
    UserRepository,
)


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._seq = 1
        self._lock = threading.Lock()

    def create(self, name: str, email: str, password_hash: str) -> User:
        key = normalize_email(email)
        with self._lock:
            if key in self._users:
                raise UserAlreadyExistsError()
            user = User(
                id=self._seq,
                name=name,
                email=key,
                password_hash=password_hash,
                created_at=datetime.now(UTC),
            )
            self._seq += 1
            self._users[key] = user
            return user

    def find_by_email(self, email: str) -> User:
        user = self._users.get(normalize_email(email))
        if user is None:
            raise UserNotFoundError()
        return user

    def find_by_id(self, user_id: int) -> User:
        for user in self._users.values():
            if user.id == user_id:
                return user
        raise UserNotFoundError()

    def list(self, page: int, page_size: int) -> tuple[list[User], int]:
        page = max(1, page)
        page_size = min(max(1, page_size), 100)
        ordered = sorted(self._users.values(), key=lambda user: user.id)
        start = (page - 1) * page_size
        return ordered[start : start + page_size], len(ordered)

    def set_password_hash(self, user_id: int, password_hash: str) -> None:
        user = self.find_by_id(user_id)
        with self._lock:
            self._users[user.email] = User(
                id=user.id,
                name=user.name,
                email=user.email,
                password_hash=password_hash,
                created_at=user.created_at,
            )


class InMemoryResetRequestRepository(ResetRequestRepository):
    def __init__(self, users: InMemoryUserRepository) -> None:
        self._users = users
        self._requests: dict[str, ResetRequest] = {}
        self._seq = 1
        self._lock = threading.Lock()

    def replace_for_user(
        self, user_id: int, token_hash: str, created_at: datetime, expires_at: datetime
    ) -> ResetRequest:
        with self._lock:
            self._requests = {
                key: value for key, value in self._requests.items() if value.user_id != user_id
            }
            request = ResetRequest(
                id=self._seq,
                user_id=user_id,
                token_hash=token_hash,
                created_at=created_at,
                expires_at=expires_at,
            )
            self._seq += 1
            self._requests[token_hash] = request
            return request

    def latest_for_user(self, user_id: int) -> ResetRequest | None:
        matching = [r for r in self._requests.values() if r.user_id == user_id]
        return max(matching, key=lambda r: r.id) if matching else None

    def consume(self, token_hash: str, password_hash: str, now: datetime) -> int:
        with self._lock:
            request = self._requests.get(token_hash)
            if request is None:
                raise ResetTokenNotFoundError()
            if request.consumed:
                raise ResetTokenConsumedError()
            if request.is_expired(now):
                raise ResetTokenExpiredError()
            self._requests[token_hash] = ResetRequest(
                id=request.id,
                user_id=request.user_id,
                token_hash=request.token_hash,
                created_at=request.created_at,
                expires_at=request.expires_at,
                consumed_at=now,
            )
            self._users.set_password_hash(request.user_id, password_hash)
            return request.user_id

    def all(self) -> list[ResetRequest]:
        return list(self._requests.values())


class DeterministicHasher(PasswordHasher):
    def __init__(self) -> None:
        self.verify_calls = 0

    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        self.verify_calls += 1
        return hashed == f"hashed:{password}"


class RecordingNotifier(ResetNotifier):
    def __init__(self) -> None:
        self.sent: list[PasswordResetNotification] = []

    def send_reset(self, notification: PasswordResetNotification) -> None:
        self.sent.append(notification)


class FakeClock:
    """Settable clock usable both as a datetime and an epoch-seconds source."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def timestamp(self) -> float:
        return self.now.timestamp()

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture()
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture()
def resets(users: InMemoryUserRepository) -> InMemoryResetRequestRepository:
    return InMemoryResetRequestRepository(users)


@pytest.fixture()
def hasher() -> DeterministicHasher:
    return DeterministicHasher()


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()
