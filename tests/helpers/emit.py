"""Recording emitter for session tests."""

from __future__ import annotations

from typing import Any


class RecordingEmitter:
    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    async def __call__(self, msg_type: str, payload: dict[str, Any]) -> None:
        self.events.append((msg_type, payload))

    @property
    def types(self) -> list[str]:
        return [t for t, _ in self.events]

    def payloads(self, msg_type: str) -> list[dict[str, Any]]:
        return [p for t, p in self.events if t == msg_type]


__all__ = ["RecordingEmitter"]
