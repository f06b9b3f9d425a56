from __future__ import annotations

from auth_service.infrastructure.auth.login_attempts import LoginAttemptsTracker


class _Clock:
    def __init__(self) -> None:
        self.now = 1_000.0

    def __call__(self) -> float:
        return self.now


def test_locks_after_max_failures_and_unlocks_later() -> None:
    clock = _Clock()
    tracker = LoginAttemptsTracker(
        max_attempts=3, lockout_duration=60, attempt_window=600, clock=clock
    )

    for _ in range(2):
        tracker.record_attempt("ann@x.com", success=False, ip_address="10.0.0.1")
    assert not tracker.is_locked("ann@x.com")

    tracker.record_attempt("ann@x.com", success=False, ip_address="10.0.0.2")
    assert tracker.is_locked("ann@x.com")
    assert tracker.get_lockout_remaining("ann@x.com") == 60

    clock.now += 61
    assert not tracker.is_locked("ann@x.com")
    assert tracker.get_lockout_remaining("ann@x.com") == 0.0


def test_success_resets_failures() -> None:
    tracker = LoginAttemptsTracker(max_attempts=3, clock=_Clock())
    tracker.record_attempt("ann@x.com", success=False)
    tracker.record_attempt("ann@x.com", success=False)

    tracker.record_attempt("ann@x.com", success=True)
    tracker.record_attempt("ann@x.com", success=False)
    tracker.record_attempt("ann@x.com", success=False)
    assert not tracker.is_locked("ann@x.com")

    tracker.record_attempt("ann@x.com", success=False)
    assert tracker.is_locked("ann@x.com")


def test_failures_outside_window_do_not_count() -> None:
    clock = _Clock()
    tracker = LoginAttemptsTracker(max_attempts=2, attempt_window=30, clock=clock)
    tracker.record_attempt("ann@x.com", success=False)

    clock.now += 31
    tracker.record_attempt("ann@x.com", success=False)

    assert not tracker.is_locked("ann@x.com")


def test_keys_are_independent_and_clearable() -> None:
    tracker = LoginAttemptsTracker(max_attempts=1, clock=_Clock())
    tracker.record_attempt("ann@x.com", success=False)

    assert tracker.is_locked("ann@x.com")
    assert not tracker.is_locked("bob@x.com")

    tracker.clear_attempts("ann@x.com")
    assert not tracker.is_locked("ann@x.com")
