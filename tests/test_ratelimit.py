"""Tests for the fixed-window rate limiter."""

from tracker.ratelimit import FixedWindowRateLimiter


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_allows_up_to_limit():
    limiter = FixedWindowRateLimiter(3, 60, clock=FakeClock())

    results = [limiter.hit() for _ in range(4)]

    assert [r.allowed for r in results] == [True, True, True, False]
    assert [r.remaining for r in results] == [2, 1, 0, 0]


def test_window_restarts():
    clock = FakeClock()
    limiter = FixedWindowRateLimiter(1, 60, clock=clock)
    limiter.hit()
    assert not limiter.hit().allowed

    clock.now += 60

    assert limiter.hit().allowed


def test_window_is_fixed_not_rolling():
    clock = FakeClock()
    limiter = FixedWindowRateLimiter(2, 60, clock=clock)
    limiter.hit()
    clock.now += 59
    limiter.hit()
    clock.now += 1

    # Window opened at t=0, so t=60 starts a fresh one
    assert limiter.hit().remaining == 1


def test_headers():
    clock = FakeClock()
    limiter = FixedWindowRateLimiter(10, 900, clock=clock)
    clock.now += 100.5

    headers = limiter.hit().headers()

    assert headers == {
        "RateLimit-Limit": "10",
        "RateLimit-Remaining": "9",
        "RateLimit-Reset": "800",
    }
