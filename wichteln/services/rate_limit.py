from __future__ import annotations

import time
from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict


@dataclass
class RateLimitResult:
    allowed: bool
    retry_after: float


class RateLimiter:
    """Sliding-window limit of ``max_calls`` per key within ``period_seconds``."""

    def __init__(
        self,
        max_calls: int,
        period_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_calls = max_calls
        self.period_seconds = period_seconds
        self._clock = clock
        self._calls: Dict[str, Deque[float]] = defaultdict(deque)

    def allow(self, key: str) -> RateLimitResult:
        now = self._clock()
        window = self._calls[key]
        while window and now - window[0] >= self.period_seconds:
            window.popleft()
        if len(window) >= self.max_calls:
            return RateLimitResult(False, max(self.period_seconds - (now - window[0]), 0.0))
        window.append(now)
        return RateLimitResult(True, 0.0)

    def check(self, user_id: int, action: str) -> RateLimitResult:
        return self.allow(f"{user_id}:{action}")
