from __future__ import annotations

from collections import deque
from datetime import datetime, timedelta

from giftlink.core.config import settings
from giftlink.utils.time import utc_now


class SlidingWindowLimiter:
    def __init__(self, max_attempts: int, window_seconds: int) -> None:
        self.max_attempts = max_attempts
        self.window = timedelta(seconds=window_seconds)
        self.attempts: dict[str, deque[datetime]] = {}
        self._last_sweep: datetime | None = None

    def _prune(self, bucket: deque[datetime], now: datetime) -> None:
        while bucket and now - bucket[0] > self.window:
            bucket.popleft()

    def _sweep(self, now: datetime) -> None:
        if self._last_sweep is not None and now - self._last_sweep < self.window:
            return
        self._last_sweep = now
        for key in list(self.attempts):
            bucket = self.attempts[key]
            self._prune(bucket, now)
            if not bucket:
                del self.attempts[key]

    def allow(self, key: str, now: datetime | None = None) -> bool:
        now = now or utc_now()
        self._sweep(now)
        bucket = self.attempts.setdefault(key, deque())
        self._prune(bucket, now)
        if len(bucket) >= self.max_attempts:
            return False
        bucket.append(now)
        return True

    def reset(self, key: str) -> None:
        self.attempts.pop(key, None)


login_limiter = SlidingWindowLimiter(
    settings.LOGIN_RATE_LIMIT_MAX_ATTEMPTS,
    settings.LOGIN_RATE_LIMIT_WINDOW_SEC,
)
claim_limiter = SlidingWindowLimiter(
    settings.CLAIM_RATE_LIMIT_MAX_ATTEMPTS,
    settings.CLAIM_RATE_LIMIT_WINDOW_SEC,
)
