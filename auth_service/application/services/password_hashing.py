"""Password hashing strategies."""

from __future__ import annotations

from collections.abc import Callable
from concurrent import futures
from typing import TypeVar

from werkzeug.security import check_password_hash, generate_password_hash

from auth_service.domain.users.exceptions import PasswordHashingTimeoutError
from auth_service.domain.users.repositories import PasswordHasher
from auth_service.shared.logging import logger

T = TypeVar("T")

DEFAULT_METHOD = "scrypt:32768:8:1"


class WerkzeugPasswordHasher(PasswordHasher):
    """Salted scrypt hashes via werkzeug, each call bounded by ``timeout``.

    werkzeug embeds the method, parameters and salt in the returned string
    and compares digests with ``hmac.compare_digest``.
    """

    def __init__(
        self,
        *,
        method: str = DEFAULT_METHOD,
        timeout: float = 5.0,
        max_workers: int = 4,
    ) -> None:
        self._method = method
        self._timeout = timeout
        self._executor = futures.ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="password-hash"
        )

    def hash(self, password: str) -> str:
        return self._bounded(lambda: str(generate_password_hash(password, method=self._method)))

    def verify(self, password: str, hashed: str) -> bool:
        def _check() -> bool:
            try:
                return bool(check_password_hash(hashed, password))
            except (ValueError, TypeError):
                return False

        return self._bounded(_check)

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)

    def _bounded(self, func: Callable[[], T]) -> T:
        future = self._executor.submit(func)
        try:
            return future.result(timeout=self._timeout)
        except futures.TimeoutError as exc:
            future.cancel()
            logger.error(f"password_hashing: exceeded timeout={self._timeout}s method={self._method}")
            raise PasswordHashingTimeoutError(self._timeout) from exc
