"""Per-connection conversation state (dataclasses only)."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any
from dataclasses import field, dataclass
from collections.abc import Callable, Awaitable

if TYPE_CHECKING:
    from voicechat.live.handle import LiveHandle

Emitter = Callable[[str, dict[str, Any]], Awaitable[None]]


@dataclass(slots=True)
class Session:
    connection_id: str
    emit: Emitter
    created_at: float
    last_activity: float
    handle: LiveHandle | None = None
    setup_complete: bool = False
    # Base64 PCM fragments of the current model turn, in arrival order.
    audio_chunks: list[str] = field(default_factory=list)
    collecting_audio: bool = False
    turn_started_at: float | None = None
    closed: bool = False
    ended_emitted: bool = False
    greeting_task: asyncio.Task | None = None
    turn_timer: asyncio.TimerHandle | None = None

    def reset_audio(self) -> None:
        self.audio_chunks = []
        self.collecting_audio = False
        self.turn_started_at = None
        if self.turn_timer is not None:
            self.turn_timer.cancel()
            self.turn_timer = None


__all__ = ["Emitter", "Session"]
