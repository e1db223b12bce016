from __future__ import annotations

import pytest

from voicechat.runtime.settings import load_settings
from voicechat.handlers.connections import ConnectionManager
from voicechat.handlers.limits import SlidingWindowRateLimiter

_ENV = [
    "PORT",
    "HOST",
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "GEMINI_LIVE_MODEL",
    "LIVE_GREETING_PROMPT",
    "SESSION_IDLE_TIMEOUT_S",
    "SESSION_SWEEP_INTERVAL_S",
    "MAX_CONCURRENT_CONNECTIONS",
    "WS_MAX_MESSAGES_PER_WINDOW",
    "VOICECHAT_API_KEY",
    "CLI_TURN_TIMEOUT_S",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    settings = load_settings()

    assert settings.server.port == 3000
    assert settings.server.host == "0.0.0.0"
    assert settings.model.model_id == "gemini-2.0-flash-live-001"
    assert settings.model.greeting_prompt.startswith("Hello, can you hear me?")
    assert settings.sessions.idle_timeout_s == 300.0
    assert settings.sessions.sweep_interval_s == 60.0
    assert settings.cli.turn_timeout_s == 30.0
    assert settings.cli.response_timeout_s == 45.0
    assert settings.auth.api_key == ""
    assert settings.limits.max_concurrent_connections == 0


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("GOOGLE_API_KEY", "g-key")
    monkeypatch.setenv("SESSION_IDLE_TIMEOUT_S", "12.5")
    monkeypatch.setenv("MAX_CONCURRENT_CONNECTIONS", "3")
    monkeypatch.setenv("LIVE_GREETING_PROMPT", "")

    settings = load_settings()

    assert settings.server.port == 8080
    assert settings.model.api_key == "g-key"
    assert settings.sessions.idle_timeout_s == 12.5
    assert settings.limits.max_concurrent_connections == 3
    assert settings.model.greeting_prompt == ""


def test_gemini_key_preferred(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "primary")
    monkeypatch.setenv("GOOGLE_API_KEY", "fallback")
    assert load_settings().model.api_key == "primary"


def test_invalid_numbers_fall_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SESSION_SWEEP_INTERVAL_S", "soon")
    monkeypatch.setenv("CLI_TURN_TIMEOUT_S", "-1")
    settings = load_settings()
    assert settings.sessions.sweep_interval_s == 60.0
    assert settings.cli.turn_timeout_s == 30.0


def test_port_out_of_range(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "70000")
    with pytest.raises(ValueError):
        load_settings()


@pytest.mark.asyncio
async def test_zero_limits_disable_admission_and_rate_caps(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MAX_CONCURRENT_CONNECTIONS", "0")
    monkeypatch.setenv("WS_MAX_MESSAGES_PER_WINDOW", "0")
    settings = load_settings()

    manager = ConnectionManager(max_connections=settings.limits.max_concurrent_connections)
    assert [await manager.admit(f"c{i}") for i in range(3)] == [True, True, True]

    limiter = SlidingWindowRateLimiter(
        limit=settings.limits.ws_max_messages_per_window,
        window_seconds=settings.limits.ws_message_window_seconds,
    )
    assert limiter.enabled is False
