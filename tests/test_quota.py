import logging
import threading

import pytest

from revgeocode import (
    ConfigError, QuotaDecision, QuotaGovernor, QuotaResetPolicy, TokenBucket, UnlimitedQuota,
)
from revgeocode.settings import Settings


def test_denies_once_ceiling_is_reached():
    governor = QuotaGovernor(daily_limit=3)

    decisions = [governor.authorize() for _ in range(4)]

    assert decisions == [QuotaDecision.ALLOWED] * 3 + [QuotaDecision.DENIED]
    assert governor.status().requests_issued == 3


def test_override_allows_and_still_counts():
    governor = QuotaGovernor(daily_limit=3, seed=3)

    assert governor.authorize(override=False) is QuotaDecision.DENIED
    assert governor.authorize(override=True) is QuotaDecision.ALLOWED
    assert governor.status().requests_issued == 4


def test_multi_unit_cost_checked_against_ceiling():
    governor = QuotaGovernor(daily_limit=10, seed=8)

    assert governor.authorize(cost=3) is QuotaDecision.DENIED
    assert governor.status().requests_issued == 8
    assert governor.authorize(cost=2) is QuotaDecision.ALLOWED
    assert governor.status().remaining == 0


def test_business_users_get_their_own_limit():
    governor = QuotaGovernor(daily_limit=1, business_daily_limit=5, seed=1)

    assert governor.authorize() is QuotaDecision.DENIED
    assert governor.authorize(business=True) is QuotaDecision.ALLOWED
    assert governor.status(business=True).daily_limit == 5


def test_invalid_cost_is_config_error():
    with pytest.raises(ConfigError):
        QuotaGovernor().authorize(cost=0)


def test_concurrent_callers_never_exceed_ceiling():
    governor = QuotaGovernor(daily_limit=50)
    allowed = []
    lock = threading.Lock()

    def worker():
        for _ in range(20):
            decision = governor.authorize()
            with lock:
                allowed.append(decision is QuotaDecision.ALLOWED)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sum(allowed) == 50
    assert governor.status().requests_issued == 50


def test_process_policy_never_resets_on_its_own():
    now = [0.0]
    governor = QuotaGovernor(daily_limit=1, clock=lambda: now[0])
    governor.authorize()

    now[0] += 3 * 24 * 60 * 60

    assert governor.authorize() is QuotaDecision.DENIED


def test_rolling_policy_forgets_requests_older_than_a_day():
    now = [1_000.0]
    governor = QuotaGovernor(daily_limit=2, reset_policy=QuotaResetPolicy.ROLLING, clock=lambda: now[0])
    governor.authorize()
    now[0] += 60
    governor.authorize()
    assert governor.authorize() is QuotaDecision.DENIED

    now[0] += 24 * 60 * 60 - 30  # first request is now older than a day
    assert governor.status().requests_issued == 1
    assert governor.authorize() is QuotaDecision.ALLOWED


def test_reset_clears_the_count():
    governor = QuotaGovernor(daily_limit=1, seed=1)
    governor.reset()
    assert governor.status().requests_issued == 0


def test_verbose_check_logs_the_url(caplog):
    governor = QuotaGovernor(daily_limit=1)
    with caplog.at_level(logging.INFO, logger="revgeocode.quota"):
        governor.authorize(url="https://maps.example/json?latlng=1,2", verbose=True)
        governor.authorize(url="https://maps.example/json?latlng=3,4", verbose=True)

    assert "latlng=1,2" in caplog.text
    assert "latlng=3,4" in caplog.text
    assert "Query max exceeded" in caplog.text


def test_quiet_check_stays_below_info(caplog):
    governor = QuotaGovernor(daily_limit=5)
    with caplog.at_level(logging.INFO, logger="revgeocode.quota"):
        governor.authorize(url="https://maps.example/json")
    assert caplog.text == ""


def test_from_settings_reads_limits_and_burst_rate():
    cfg = Settings(daily_query_limit=7, quota_seed=2, requests_per_second=None)
    governor = QuotaGovernor.from_settings(cfg)

    assert governor.status().daily_limit == 7
    assert governor.status().requests_issued == 2
    assert governor.burst_limiter is None

    paced = QuotaGovernor.from_settings(Settings(requests_per_second=5))
    assert isinstance(paced.burst_limiter, TokenBucket)
    assert paced.burst_limiter.rate == 5.0


def test_token_bucket_rejects_non_positive_rate():
    with pytest.raises(ConfigError):
        TokenBucket(0)


def test_token_bucket_serves_a_full_bucket_without_waiting():
    bucket = TokenBucket(rate=1000)
    for _ in range(5):
        bucket.acquire()
    assert bucket.tokens < bucket.capacity


def test_unlimited_quota_always_allows_and_counts():
    gate = UnlimitedQuota()
    assert all(gate.authorize() is QuotaDecision.ALLOWED for _ in range(3))
    assert gate.status().requests_issued == 3
