"""Session registry configuration (env names and defaults)."""

from __future__ import annotations

ENV_SESSION_IDLE_TIMEOUT_S = "SESSION_IDLE_TIMEOUT_S"
DEFAULT_SESSION_IDLE_TIMEOUT_S = 5 * 60.0

ENV_SESSION_SWEEP_INTERVAL_S = "SESSION_SWEEP_INTERVAL_S"
DEFAULT_SESSION_SWEEP_INTERVAL_S = 60.0

__all__ = [
    "DEFAULT_SESSION_IDLE_TIMEOUT_S",
    "DEFAULT_SESSION_SWEEP_INTERVAL_S",
    "ENV_SESSION_IDLE_TIMEOUT_S",
    "ENV_SESSION_SWEEP_INTERVAL_S",
]
