"""Admission control and rate limit configuration (env names and defaults)."""

from __future__ import annotations

ENV_MAX_CONCURRENT_CONNECTIONS = "MAX_CONCURRENT_CONNECTIONS"
# 0 (or any non-positive value) admits every connection.
DEFAULT_MAX_CONCURRENT_CONNECTIONS = 0

# Browser capture posts a chunk every ~100-250ms, so a minute holds a few hundred messages.
ENV_WS_MESSAGE_WINDOW_SECONDS = "WS_MESSAGE_WINDOW_SECONDS"
DEFAULT_WS_MESSAGE_WINDOW_SECONDS = 60.0

ENV_WS_MAX_MESSAGES_PER_WINDOW = "WS_MAX_MESSAGES_PER_WINDOW"
# 0 turns the per-socket message limit off.
DEFAULT_WS_MAX_MESSAGES_PER_WINDOW = 5000

__all__ = [
    "DEFAULT_MAX_CONCURRENT_CONNECTIONS",
    "DEFAULT_WS_MAX_MESSAGES_PER_WINDOW",
    "DEFAULT_WS_MESSAGE_WINDOW_SECONDS",
    "ENV_MAX_CONCURRENT_CONNECTIONS",
    "ENV_WS_MAX_MESSAGES_PER_WINDOW",
    "ENV_WS_MESSAGE_WINDOW_SECONDS",
]
