from __future__ import annotations

from pr_relay.api.middleware import FixedWindowRateLimiter


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_limit_applies_per_key_within_window() -> None:
    clock = FakeClock()
    limiter = FixedWindowRateLimiter(2, 60.0, clock=clock)

    assert limiter.hit("1.1.1.1")[0]
    assert limiter.hit("1.1.1.1")[0]
    allowed, retry_after = limiter.hit("1.1.1.1")
    assert not allowed
    assert retry_after == 60.0
    assert limiter.hit("2.2.2.2")[0]


def test_window_resets_after_expiry() -> None:
    clock = FakeClock()
    limiter = FixedWindowRateLimiter(1, 60.0, clock=clock)

    assert limiter.hit("1.1.1.1")[0]
    clock.now = 30.0
    allowed, retry_after = limiter.hit("1.1.1.1")
    assert not allowed
    assert retry_after == 30.0

    clock.now = 60.0
    assert limiter.hit("1.1.1.1")[0]
