"""Runtime settings (dataclasses only)."""

from __future__ import annotations

from pathlib import Path
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AuthSettings:
    api_key: str


@dataclass(frozen=True, slots=True)
class LimitsSettings:
    max_concurrent_connections: int
    ws_message_window_seconds: float
    ws_max_messages_per_window: int


@dataclass(frozen=True, slots=True)
class SessionSettings:
    idle_timeout_s: float
    sweep_interval_s: float


@dataclass(frozen=True, slots=True)
class ModelSettings:
    api_key: str
    model_id: str
    system_instruction: str
    greeting_prompt: str
    greeting_delay_s: float
    turn_timeout_s: float


@dataclass(frozen=True, slots=True)
class ServerSettings:
    host: str
    port: int
    public_dir: Path


@dataclass(frozen=True, slots=True)
class CliSettings:
    turn_timeout_s: float
    response_timeout_s: float


@dataclass(frozen=True, slots=True)
class AppSettings:
    auth: AuthSettings
    limits: LimitsSettings
    sessions: SessionSettings
    model: ModelSettings
    server: ServerSettings
    cli: CliSettings


__all__ = [
    "AppSettings",
    "AuthSettings",
    "CliSettings",
    "LimitsSettings",
    "ModelSettings",
    "ServerSettings",
    "SessionSettings",
]
