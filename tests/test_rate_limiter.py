"""Fixed-window rate limiting.

Invariants:
    - The first `limit` calls in a window are allowed, the rest are refused
    - A reset forgets the window immediately
    - Without Redis the in-memory window is authoritative
"""

from salonx.rate_limiter import check_rate_limit, memory_cache, rate_limit_exceeded, reset_rate_limit


def test_allows_up_to_limit():
    results = [check_rate_limit("login:a@b.in", 3, 60) for _ in range(4)]
    assert [allowed for allowed, _, _ in results] == [True, True, True, False]
    assert results[-1][1] == 3
    assert 0 < results[-1][2] <= 60


def test_keys_are_independent():
    for _ in range(2):
        check_rate_limit("k1", 2, 60)
    assert check_rate_limit("k1", 2, 60)[0] is False
    assert check_rate_limit("k2", 2, 60)[0] is True


def test_reset_forgets_window():
    for _ in range(2):
        check_rate_limit("k3", 2, 60)
    reset_rate_limit("k3")
    assert "k3" not in memory_cache
    assert check_rate_limit("k3", 2, 60)[0] is True


def test_expired_window_starts_over():
    check_rate_limit("k4", 1, 60)
    memory_cache["k4"]["reset_time"] = 0
    allowed, count, _ = check_rate_limit("k4", 1, 60)
    assert allowed is True
    assert count == 1


def test_rate_limit_exceeded_response():
    error = rate_limit_exceeded(5, 3600, 120)
    assert error.status_code == 429
    assert error.headers == {"Retry-After": "120"}
    assert error.detail["limit"] == 5
    assert error.detail["message"] == "Rate limit exceeded. Maximum 5 requests per 3600 seconds."
