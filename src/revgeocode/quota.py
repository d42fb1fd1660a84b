"""
Query quota governors for the geocoding backends.

Provides a thread-safe daily request ceiling plus an optional token
bucket that paces bursts of requests.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from typing import Callable, Optional

from .base import QuotaGate
from .models import QuotaDecision, QuotaResetPolicy, QuotaStatus
from .settings import Settings, settings
from .utils.errors import ConfigError

logger = logging.getLogger(__name__)

_DAY_SECONDS = 24 * 60 * 60


class TokenBucket:
    """
    Token bucket rate limiter.

    Maintains a bucket of "tokens" that refill at a specified rate
    (requests per second). Each request consumes one token. When the
    bucket is empty, requests wait until tokens become available.

    Thread-safe implementation using a lock.
    """

    def __init__(self, rate: float, capacity: Optional[int] = None):
        """
        Initialize token bucket.

        Args:
            rate: Tokens per second (i.e., requests per second allowed)
            capacity: Maximum bucket size (defaults to rate)
        """
        if rate <= 0:
            raise ConfigError("rate must be > 0")

        self.rate = float(rate)
        self.capacity = capacity or max(1, int(rate))
        self.tokens = float(self.capacity)
        self.last_refill = time.perf_counter()
        self.lock = threading.Lock()

    def acquire(self, count: int = 1) -> None:
        """
        Acquire one or more tokens.

        Blocks until the requested number of tokens are available. Requests
        larger than the bucket drain it completely instead of waiting forever.

        Args:
            count: Number of tokens to acquire
        """
        if count <= 0:
            raise ConfigError("count must be > 0")
        needed = min(float(count), float(self.capacity))

        while True:
            with self.lock:
                now = time.perf_counter()
                elapsed = now - self.last_refill
                self.last_refill = now

                self.tokens = min(self.capacity, self.tokens + elapsed * self.rate)

                if self.tokens >= needed:
                    self.tokens -= needed
                    return

            # Sleep briefly before retrying
            time.sleep(0.005)


class QuotaGovernor(QuotaGate):
    """
    Daily request ceiling shared by every call that holds a reference to it.

    The check and the increment happen under one lock, so two threads can
    never both be granted the last remaining request.

    The reset policy decides when the count starts over:
    - QuotaResetPolicy.PROCESS: never; the count lives as long as the governor
    - QuotaResetPolicy.ROLLING: only requests from the trailing 24 hours count
    """

    def __init__(
        self,
        daily_limit: int = 2500,
        business_daily_limit: int = 100_000,
        seed: int = 0,
        reset_policy: QuotaResetPolicy = QuotaResetPolicy.PROCESS,
        burst_limiter: Optional[TokenBucket] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the governor.

        Args:
            daily_limit: Requests allowed per day for free users
            business_daily_limit: Requests allowed per day for business users
            seed: Requests already issued today (e.g. by an earlier process)
            reset_policy: When the counter starts over
            burst_limiter: Optional token bucket acquired after each allowed request
            clock: Time source in seconds, used by the rolling policy
        """
        if daily_limit < 0 or business_daily_limit < 0:
            raise ConfigError("daily limits must be >= 0")
        if seed < 0:
            raise ConfigError("seed must be >= 0")

        self.daily_limit = int(daily_limit)
        self.business_daily_limit = int(business_daily_limit)
        self.reset_policy = QuotaResetPolicy(reset_policy)
        self.burst_limiter = burst_limiter
        self.clock = clock
        self.lock = threading.Lock()

        self._issued = 0
        self._history: deque[tuple[float, int]] = deque()
        if seed:
            self._record(seed)

    @classmethod
    def from_settings(cls, cfg: Optional[Settings] = None, **overrides) -> "QuotaGovernor":
        """Build a governor from Settings, with keyword overrides taking priority."""
        cfg = cfg or settings
        burst = TokenBucket(cfg.requests_per_second) if cfg.requests_per_second else None
        values = dict(
            daily_limit=cfg.daily_query_limit,
            business_daily_limit=cfg.business_daily_query_limit,
            seed=cfg.quota_seed,
            reset_policy=cfg.quota_reset_policy,
            burst_limiter=burst,
        )
        values.update(overrides)
        return cls(**values)

    def _record(self, cost: int) -> None:
        self._issued += cost
        if self.reset_policy is QuotaResetPolicy.ROLLING:
            self._history.append((self.clock(), cost))

    def _expire(self) -> None:
        """Drop requests older than a day under the rolling policy. Caller holds the lock."""
        if self.reset_policy is not QuotaResetPolicy.ROLLING:
            return
        cutoff = self.clock() - _DAY_SECONDS
        while self._history and self._history[0][0] < cutoff:
            _, cost = self._history.popleft()
            self._issued -= cost

    def limit_for(self, business: bool = False) -> int:
        return self.business_daily_limit if business else self.daily_limit

    def authorize(
        self,
        cost: int = 1,
        override: bool = False,
        url: Optional[str] = None,
        verbose: bool = False,
        business: bool = False,
    ) -> QuotaDecision:
        if cost <= 0:
            raise ConfigError("cost must be > 0")
        limit = self.limit_for(business)

        with self.lock:
            self._expire()
            over = self._issued + cost > limit
            if over and not override:
                decision = QuotaDecision.DENIED
            else:
                decision = QuotaDecision.ALLOWED
                self._record(cost)
            issued = self._issued

        if over:
            logger.warning(
                f"Query max exceeded, current total = {issued}/{limit}"
                + (" (overridden)" if override else "")
            )
        log_level = logging.INFO if verbose else logging.DEBUG
        logger.log(log_level, f"Quota check {decision} for {url}: {issued}/{limit} requests issued")

        if decision is QuotaDecision.ALLOWED and self.burst_limiter is not None:
            self.burst_limiter.acquire(cost)

        return decision

    def status(self, business: bool = False) -> QuotaStatus:
        with self.lock:
            self._expire()
            return QuotaStatus(requests_issued=self._issued, daily_limit=self.limit_for(business))

    def reset(self) -> None:
        """Start the count over, for external daily rollovers."""
        with self.lock:
            self._issued = 0
            self._history.clear()
        logger.info("Quota counter reset")


class UnlimitedQuota(QuotaGate):
    """
    Quota gate that never denies (for testing/development).

    Requests are still counted so status() stays meaningful.
    """

    def __init__(self):
        self._issued = 0
        self.lock = threading.Lock()

    def authorize(
        self,
        cost: int = 1,
        override: bool = False,
        url: Optional[str] = None,
        verbose: bool = False,
        business: bool = False,
    ) -> QuotaDecision:
        with self.lock:
            self._issued += cost
        return QuotaDecision.ALLOWED

    def status(self, business: bool = False) -> QuotaStatus:
        with self.lock:
            return QuotaStatus(requests_issued=self._issued, daily_limit=2**31 - 1)
