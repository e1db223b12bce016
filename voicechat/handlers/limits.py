"""Inbound message budget for one socket."""

from __future__ import annotations

import time
from collections import deque
from collections.abc import Callable

from voicechat.errors import RateLimitError

TimeFn = Callable[[], float]


class SlidingWindowRateLimiter:
    """At most `limit` messages in any trailing `window_seconds`.

    A non-positive limit or window turns the limiter off.
    """

    def __init__(self, *, limit: int, window_seconds: float, now_fn: TimeFn | None = None) -> None:
        self.limit = max(0, int(limit))
        self.window_seconds = max(0.0, float(window_seconds))
        self._now = now_fn or time.monotonic
        self._stamps: deque[float] = deque()

    @property
    def enabled(self) -> bool:
        return self.limit > 0 and self.window_seconds > 0

    def _expire(self, now: float) -> None:
        horizon = now - self.window_seconds
        while self._stamps and self._stamps[0] <= horizon:
            self._stamps.popleft()

    def consume(self) -> None:
        """Record one message or raise RateLimitError with the wait until a slot frees."""
        if not self.enabled:
            return
        now = self._now()
        self._expire(now)
        if len(self._stamps) < self.limit:
            self._stamps.append(now)
            return
        oldest = self._stamps[0]
        raise RateLimitError(
            retry_in=max(0.0, oldest + self.window_seconds - now),
            limit=self.limit,
            window_seconds=self.window_seconds,
        )


__all__ = ["RateLimitError", "SlidingWindowRateLimiter"]
