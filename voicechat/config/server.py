"""HTTP listener configuration (env names and defaults)."""

from __future__ import annotations

from pathlib import Path

ENV_HOST = "HOST"
DEFAULT_HOST = "0.0.0.0"

ENV_PORT = "PORT"
DEFAULT_PORT = 3000

ENV_PUBLIC_DIR = "VOICECHAT_PUBLIC_DIR"
DEFAULT_PUBLIC_DIR = Path(__file__).resolve().parents[2] / "public"

__all__ = [
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "DEFAULT_PUBLIC_DIR",
    "ENV_HOST",
    "ENV_PORT",
    "ENV_PUBLIC_DIR",
]
