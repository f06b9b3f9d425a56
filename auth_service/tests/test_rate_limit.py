from __future__ import annotations

from auth_service.shared.middleware.rate_limit import InMemoryRateLimiter


class _Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_allows_up_to_limit_within_window() -> None:
    clock = _Clock()
    limiter = InMemoryRateLimiter(limit=3, window_seconds=10, clock=clock)

    assert [limiter.allow("ip") for _ in range(4)] == [True, True, True, False]
    assert limiter.allow("other-ip")

    clock.now = 10.5
    assert limiter.allow("ip")
