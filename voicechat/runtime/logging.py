"""Logging initialization."""

from __future__ import annotations

import os
import logging

from voicechat.config.logging import LOG_LEVEL, LOG_FORMAT, ENV_SHOW_GENAI_LOGS

_NOISY_LOGGERS = ("google_genai", "google_genai.live", "websockets", "httpx", "httpcore")


def configure_logging(level: str | None = None) -> None:
    # The SDK and its transports log every frame at DEBUG/INFO. Keep them tame unless explicitly enabled.
    if (os.getenv(ENV_SHOW_GENAI_LOGS) or "").strip().lower() not in {"1", "true", "yes"}:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
    logging.basicConfig(level=level or LOG_LEVEL, format=LOG_FORMAT)


__all__ = ["configure_logging"]
