"""Per-socket message budget enforcement."""

from __future__ import annotations

import math

from voicechat.errors import RateLimitError
from voicechat.state.session import Emitter
from voicechat.config.websocket import EVENT_PING
from voicechat.handlers.limits import SlidingWindowRateLimiter

from .outbound import send_failure

# Keepalives never count against the message budget.
_EXEMPT_TYPES = frozenset({EVENT_PING})


def is_rate_limited_type(msg_type: str) -> bool:
    return msg_type not in _EXEMPT_TYPES


async def consume_limiter(emit: Emitter, limiter: SlidingWindowRateLimiter) -> bool:
    """Charge one message; on saturation report `rate_limited` and return False."""
    try:
        limiter.consume()
    except RateLimitError as exc:
        retry_in_s = max(1, math.ceil(exc.retry_in))
        window_s = int(exc.window_seconds)
        await send_failure(
            emit,
            exc,
            message=f"at most {exc.limit} messages per {window_s} seconds; retry in {retry_in_s} seconds",
            details={"retry_in": retry_in_s, "limit": exc.limit, "window_seconds": window_s},
        )
        return False
    return True


__all__ = ["consume_limiter", "is_rate_limited_type"]
