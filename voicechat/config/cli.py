"""Command-line recorder defaults (env names and defaults)."""

from __future__ import annotations

ENV_CLI_TURN_TIMEOUT_S = "CLI_TURN_TIMEOUT_S"
DEFAULT_CLI_TURN_TIMEOUT_S = 30.0

ENV_CLI_RESPONSE_TIMEOUT_S = "CLI_RESPONSE_TIMEOUT_S"
DEFAULT_CLI_RESPONSE_TIMEOUT_S = 45.0

# Both files are overwritten on every run.
DEFAULT_INPUT_FILE = "input.wav"
DEFAULT_RESPONSE_FILE = "response.wav"

__all__ = [
    "DEFAULT_CLI_RESPONSE_TIMEOUT_S",
    "DEFAULT_CLI_TURN_TIMEOUT_S",
    "DEFAULT_INPUT_FILE",
    "DEFAULT_RESPONSE_FILE",
    "ENV_CLI_RESPONSE_TIMEOUT_S",
    "ENV_CLI_TURN_TIMEOUT_S",
]
