from __future__ import annotations

from voicechat.handlers.websocket.auth import validate_api_key


def test_validate_api_key_open_when_unconfigured() -> None:
    assert validate_api_key("", "") is True
    assert validate_api_key("anything", "") is True


def test_validate_api_key_matches() -> None:
    assert validate_api_key("secret", "secret") is True
    assert validate_api_key("wrong", "secret") is False
    assert validate_api_key("", "secret") is False
