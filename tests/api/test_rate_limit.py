"""Fixed-window rate limiter — counting, reset, per-key isolation."""

from gtasks_mcp.api.rate_limit import FixedWindowRateLimiter


class _Clock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_allows_up_to_limit_then_blocks():
    limiter = FixedWindowRateLimiter(3, 60, clock=_Clock())
    decisions = [limiter.hit("1.2.3.4") for _ in range(4)]
    assert [d.allowed for d in decisions] == [True, True, True, False]
    assert [d.remaining for d in decisions] == [2, 1, 0, 0]


def test_window_resets():
    clock = _Clock()
    limiter = FixedWindowRateLimiter(1, 60, clock=clock)
    assert limiter.hit("ip").allowed
    assert not limiter.hit("ip").allowed
    clock.now += 60
    assert limiter.hit("ip").allowed


def test_reset_seconds_counts_down():
    clock = _Clock()
    limiter = FixedWindowRateLimiter(5, 900, clock=clock)
    assert limiter.hit("ip").reset_seconds == 900
    clock.now += 100.5
    assert limiter.hit("ip").reset_seconds == 800


def test_keys_are_independent():
    limiter = FixedWindowRateLimiter(1, 60, clock=_Clock())
    assert limiter.hit("a").allowed
    assert limiter.hit("b").allowed
    assert not limiter.hit("a").allowed


def test_headers():
    decision = FixedWindowRateLimiter(10, 60, clock=_Clock()).hit("ip")
    assert decision.headers() == {
        "RateLimit-Limit": "10",
        "RateLimit-Remaining": "9",
        "RateLimit-Reset": "60",
    }
