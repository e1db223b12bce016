"""Hosted model configuration (env names and defaults)."""

from __future__ import annotations

ENV_GEMINI_LIVE_MODEL = "GEMINI_LIVE_MODEL"
DEFAULT_GEMINI_LIVE_MODEL = "gemini-2.0-flash-live-001"

ENV_GEMINI_SYSTEM_INSTRUCTION = "GEMINI_SYSTEM_INSTRUCTION"
DEFAULT_GEMINI_SYSTEM_INSTRUCTION = (
    "You are a helpful AI assistant. Respond naturally and conversationally. "
    "Keep responses concise but informative. Always respond when the user speaks to you. "
    "Provide both text and audio responses when possible."
)

# Sent once after setup so the browser hears the connection is alive. Empty disables.
ENV_LIVE_GREETING_PROMPT = "LIVE_GREETING_PROMPT"
DEFAULT_LIVE_GREETING_PROMPT = "Hello, can you hear me? Please respond to confirm the connection is working."

ENV_LIVE_GREETING_DELAY_S = "LIVE_GREETING_DELAY_S"
DEFAULT_LIVE_GREETING_DELAY_S = 1.0

# Server-side bound on a single model turn (0 disables).
ENV_LIVE_TURN_TIMEOUT_S = "LIVE_TURN_TIMEOUT_S"
DEFAULT_LIVE_TURN_TIMEOUT_S = 30.0

__all__ = [
    "DEFAULT_GEMINI_LIVE_MODEL",
    "DEFAULT_GEMINI_SYSTEM_INSTRUCTION",
    "DEFAULT_LIVE_GREETING_DELAY_S",
    "DEFAULT_LIVE_GREETING_PROMPT",
    "DEFAULT_LIVE_TURN_TIMEOUT_S",
    "ENV_GEMINI_LIVE_MODEL",
    "ENV_GEMINI_SYSTEM_INSTRUCTION",
    "ENV_LIVE_GREETING_DELAY_S",
    "ENV_LIVE_GREETING_PROMPT",
    "ENV_LIVE_TURN_TIMEOUT_S",
]
