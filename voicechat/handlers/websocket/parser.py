"""Inbound /ws message parsing."""

from __future__ import annotations

import json
from typing import Any
from dataclasses import dataclass

from voicechat.errors import PayloadValidationError
from voicechat.config.websocket import WS_KEY_TYPE, WS_KEY_PAYLOAD


@dataclass(frozen=True, slots=True)
class ClientMessage:
    type: str
    payload: dict[str, Any]

    def string_field(self, key: str) -> str | None:
        """`payload[key]` as a string; None when absent or empty.

        Raises PayloadValidationError when the value has another type.
        """
        value = self.payload.get(key)
        if value is None or value == "":
            return None
        if not isinstance(value, str):
            raise PayloadValidationError(f"payload.{key} must be a string")
        return value


def parse_client_message(raw: str) -> ClientMessage:
    """Decode one text frame into a ClientMessage; ValueError on a malformed envelope."""
    try:
        msg = json.loads(raw)
    except ValueError as exc:
        raise ValueError(f"invalid JSON: {exc}") from exc

    if not isinstance(msg, dict):
        raise ValueError("message must be a JSON object")

    msg_type = msg.get(WS_KEY_TYPE)
    if not isinstance(msg_type, str) or not msg_type.strip():
        raise ValueError("message missing non-empty 'type'")

    payload = msg.get(WS_KEY_PAYLOAD)
    if payload is None:
        payload = {}
    elif not isinstance(payload, dict):
        raise ValueError("message 'payload' must be an object")

    return ClientMessage(type=msg_type.strip(), payload=payload)


__all__ = ["ClientMessage", "parse_client_message"]
