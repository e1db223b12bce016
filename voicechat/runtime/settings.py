"""Environment parsing for runtime settings.

Env names and defaults live in `voicechat/config/*`; this module resolves them
into the structured dataclasses the rest of the package consumes.
"""

from __future__ import annotations

import os
from pathlib import Path

from voicechat.config.secrets import get_gemini_api_key, get_voicechat_api_key
from voicechat.config.server import (
    ENV_HOST,
    ENV_PORT,
    DEFAULT_HOST,
    DEFAULT_PORT,
    ENV_PUBLIC_DIR,
    DEFAULT_PUBLIC_DIR,
)
from voicechat.state.settings import (
    AppSettings,
    CliSettings,
    AuthSettings,
    ModelSettings,
    LimitsSettings,
    ServerSettings,
    SessionSettings,
)
from voicechat.config.sessions import (
    ENV_SESSION_IDLE_TIMEOUT_S,
    ENV_SESSION_SWEEP_INTERVAL_S,
    DEFAULT_SESSION_IDLE_TIMEOUT_S,
    DEFAULT_SESSION_SWEEP_INTERVAL_S,
)
from voicechat.config.cli import (
    ENV_CLI_TURN_TIMEOUT_S,
    ENV_CLI_RESPONSE_TIMEOUT_S,
    DEFAULT_CLI_TURN_TIMEOUT_S,
    DEFAULT_CLI_RESPONSE_TIMEOUT_S,
)
from voicechat.config.limits import (
    ENV_WS_MESSAGE_WINDOW_SECONDS,
    ENV_MAX_CONCURRENT_CONNECTIONS,
    ENV_WS_MAX_MESSAGES_PER_WINDOW,
    DEFAULT_WS_MESSAGE_WINDOW_SECONDS,
    DEFAULT_MAX_CONCURRENT_CONNECTIONS,
    DEFAULT_WS_MAX_MESSAGES_PER_WINDOW,
)
from voicechat.config.models import (
    ENV_GEMINI_LIVE_MODEL,
    ENV_LIVE_TURN_TIMEOUT_S,
    ENV_LIVE_GREETING_PROMPT,
    DEFAULT_GEMINI_LIVE_MODEL,
    ENV_LIVE_GREETING_DELAY_S,
    DEFAULT_LIVE_TURN_TIMEOUT_S,
    DEFAULT_LIVE_GREETING_PROMPT,
    ENV_GEMINI_SYSTEM_INSTRUCTION,
    DEFAULT_LIVE_GREETING_DELAY_S,
    DEFAULT_GEMINI_SYSTEM_INSTRUCTION,
)

_MAX_PORT = 65535


def _str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except Exception:
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except Exception:
        return default


def _validate_port(port: int) -> int:
    if port <= 0 or port > _MAX_PORT:
        raise ValueError(f"{ENV_PORT} must be between 1 and {_MAX_PORT}, got {port}")
    return port


def _load_auth_settings() -> AuthSettings:
    return AuthSettings(api_key=get_voicechat_api_key())


def _load_limits_settings() -> LimitsSettings:
    max_connections = _int_env(ENV_MAX_CONCURRENT_CONNECTIONS, DEFAULT_MAX_CONCURRENT_CONNECTIONS)
    msg_window = _float_env(ENV_WS_MESSAGE_WINDOW_SECONDS, DEFAULT_WS_MESSAGE_WINDOW_SECONDS)
    if msg_window <= 0:
        msg_window = DEFAULT_WS_MESSAGE_WINDOW_SECONDS
    msg_limit = _int_env(ENV_WS_MAX_MESSAGES_PER_WINDOW, DEFAULT_WS_MAX_MESSAGES_PER_WINDOW)

    return LimitsSettings(
        max_concurrent_connections=max(0, max_connections),
        ws_message_window_seconds=msg_window,
        ws_max_messages_per_window=max(0, msg_limit),
    )


def _load_session_settings() -> SessionSettings:
    idle_timeout = _float_env(ENV_SESSION_IDLE_TIMEOUT_S, DEFAULT_SESSION_IDLE_TIMEOUT_S)
    sweep_interval = _float_env(ENV_SESSION_SWEEP_INTERVAL_S, DEFAULT_SESSION_SWEEP_INTERVAL_S)
    if sweep_interval <= 0:
        sweep_interval = DEFAULT_SESSION_SWEEP_INTERVAL_S

    return SessionSettings(
        idle_timeout_s=max(0.0, idle_timeout),
        sweep_interval_s=sweep_interval,
    )


def _load_model_settings() -> ModelSettings:
    greeting_raw = os.getenv(ENV_LIVE_GREETING_PROMPT)
    # An explicitly empty value disables the greeting.
    greeting = DEFAULT_LIVE_GREETING_PROMPT if greeting_raw is None else greeting_raw.strip()

    return ModelSettings(
        api_key=get_gemini_api_key(),
        model_id=_str_env(ENV_GEMINI_LIVE_MODEL, DEFAULT_GEMINI_LIVE_MODEL),
        system_instruction=_str_env(ENV_GEMINI_SYSTEM_INSTRUCTION, DEFAULT_GEMINI_SYSTEM_INSTRUCTION),
        greeting_prompt=greeting,
        greeting_delay_s=max(0.0, _float_env(ENV_LIVE_GREETING_DELAY_S, DEFAULT_LIVE_GREETING_DELAY_S)),
        turn_timeout_s=max(0.0, _float_env(ENV_LIVE_TURN_TIMEOUT_S, DEFAULT_LIVE_TURN_TIMEOUT_S)),
    )


def _load_server_settings() -> ServerSettings:
    public_raw = os.getenv(ENV_PUBLIC_DIR)
    public_dir = Path(public_raw).expanduser() if public_raw and public_raw.strip() else DEFAULT_PUBLIC_DIR

    return ServerSettings(
        host=_str_env(ENV_HOST, DEFAULT_HOST),
        port=_validate_port(_int_env(ENV_PORT, DEFAULT_PORT)),
        public_dir=public_dir,
    )


def _load_cli_settings() -> CliSettings:
    turn_timeout = _float_env(ENV_CLI_TURN_TIMEOUT_S, DEFAULT_CLI_TURN_TIMEOUT_S)
    response_timeout = _float_env(ENV_CLI_RESPONSE_TIMEOUT_S, DEFAULT_CLI_RESPONSE_TIMEOUT_S)

    return CliSettings(
        turn_timeout_s=turn_timeout if turn_timeout > 0 else DEFAULT_CLI_TURN_TIMEOUT_S,
        response_timeout_s=response_timeout if response_timeout > 0 else DEFAULT_CLI_RESPONSE_TIMEOUT_S,
    )


def load_settings() -> AppSettings:
    return AppSettings(
        auth=_load_auth_settings(),
        limits=_load_limits_settings(),
        sessions=_load_session_settings(),
        model=_load_model_settings(),
        server=_load_server_settings(),
        cli=_load_cli_settings(),
    )


__all__ = ["load_settings"]
