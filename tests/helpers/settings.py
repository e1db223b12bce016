"""Settings builders for tests."""

from __future__ import annotations

from pathlib import Path

from voicechat.state.settings import (
    AppSettings,
    CliSettings,
    AuthSettings,
    ModelSettings,
    LimitsSettings,
    ServerSettings,
    SessionSettings,
)

PUBLIC_DIR = Path(__file__).resolve().parents[2] / "public"


def make_settings(
    *,
    api_key: str = "",
    max_connections: int = 10,
    max_messages: int = 1000,
    greeting_prompt: str = "",
    turn_timeout_s: float = 0.0,
    public_dir: Path = PUBLIC_DIR,
) -> AppSettings:
    return AppSettings(
        auth=AuthSettings(api_key=api_key),
        limits=LimitsSettings(
            max_concurrent_connections=max_connections,
            ws_message_window_seconds=60.0,
            ws_max_messages_per_window=max_messages,
        ),
        sessions=SessionSettings(idle_timeout_s=300.0, sweep_interval_s=60.0),
        model=ModelSettings(
            api_key="test-key",
            model_id="gemini-test",
            system_instruction="be brief",
            greeting_prompt=greeting_prompt,
            greeting_delay_s=0.0,
            turn_timeout_s=turn_timeout_s,
        ),
        server=ServerSettings(host="127.0.0.1", port=3000, public_dir=public_dir),
        cli=CliSettings(turn_timeout_s=30.0, response_timeout_s=45.0),
    )


__all__ = ["make_settings"]
