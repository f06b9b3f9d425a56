# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time
from collections import defaultdict, deque
from collections.abc import Callable
from dataclasses import dataclass
from threading import Lock

from auth_service.shared.logging import logger


@dataclass
class LoginAttempt:
    timestamp: float
    success: bool
    ip_address: str | None = None


class LoginAttemptsTracker:
    """Per-email failure counter with temporary lockout.

    Keys are normalised emails whether or not an account exists, so a
    lockout response says nothing about registration.
    """

    def __init__(
        self,
        *,
        max_attempts: int = 5,
        lockout_duration: float = 15 * 60,
        attempt_window: float = 60 * 60,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.max_attempts = max_attempts
        self.lockout_duration = lockout_duration
        self.attempt_window = attempt_window
        self._clock = clock
        self._attempts: dict[str, deque[LoginAttempt]] = defaultdict(
            lambda: deque(maxlen=self.max_attempts * 2)
        )
        self._lock = Lock()
        self._lockouts: dict[str, float] = {}  # email -> unlock_time

    def record_attempt(
        self, key: str, success: bool, ip_address: str | None = None
    ) -> None:
        with self._lock:
            attempt = LoginAttempt(
                timestamp=self._clock(),
                success=success,
                ip_address=ip_address,
            )

            if success:
                self._attempts.pop(key, None)
                if self._lockouts.pop(key, None) is not None:
                    logger.info("login_attempts: cleared lockout")
                return

            self._attempts[key].append(attempt)
            self._check_and_lock(key)

    def is_locked(self, key: str) -> bool:
        with self._lock:
            return self._unlock_time(key) is not None

    def get_lockout_remaining(self, key: str) -> float:
        with self._lock:
            unlock_time = self._unlock_time(key)
            if unlock_time is None:
                return 0.0
            return max(0.0, unlock_time - self._clock())

    def clear_attempts(self, key: str) -> None:
        with self._lock:
            self._attempts.pop(key, None)
            self._lockouts.pop(key, None)
            logger.info("login_attempts: cleared all attempts")

    def _unlock_time(self, key: str) -> float | None:
        unlock_time = self._lockouts.get(key)
        if unlock_time is None:
            return None
        if self._clock() >= unlock_time:
            del self._lockouts[key]
            self._attempts.pop(key, None)
            logger.info("login_attempts: lockout expired")
            return None
        return unlock_time

    def _recent_failures(self, key: str) -> list[LoginAttempt]:
        if key not in self._attempts:
            return []
        cutoff = self._clock() - self.attempt_window
        return [
            attempt
            for attempt in self._attempts[key]
            if not attempt.success and attempt.timestamp > cutoff
        ]

    def _check_and_lock(self, key: str) -> None:
        failed_attempts = self._recent_failures(key)

        if len(failed_attempts) >= self.max_attempts:
            self._lockouts[key] = self._clock() + self.lockout_duration

            ips = {
                attempt.ip_address for attempt in failed_attempts if attempt.ip_address
            }
            logger.warning(
                f"login_attempts: ACCOUNT LOCKED key={key} "
                f"failed_attempts={len(failed_attempts)} "
                f"lockout_duration={self.lockout_duration}s "
                f"ip_addresses={sorted(ips) if ips else 'unknown'}"
            )


__all__ = ["LoginAttempt", "LoginAttemptsTracker"]
