"""Logging configuration."""

from __future__ import annotations

import os

LOG_LEVEL: str = (os.getenv("LOG_LEVEL") or "INFO").strip().upper()
LOG_FORMAT: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"

ENV_SHOW_GENAI_LOGS = "SHOW_GENAI_LOGS"

__all__ = ["ENV_SHOW_GENAI_LOGS", "LOG_FORMAT", "LOG_LEVEL"]
