"""Interface of one open live session as the registry and CLI use it."""

from __future__ import annotations

from typing import Protocol

from voicechat.config.audio import INPUT_SAMPLE_RATE_HZ


class LiveHandle(Protocol):
    @property
    def closed(self) -> bool: ...

    async def send_audio(self, pcm: bytes, sample_rate_hz: int = INPUT_SAMPLE_RATE_HZ) -> None: ...

    async def send_text(self, text: str) -> None: ...

    async def send_audio_stream_end(self) -> None: ...

    async def close(self) -> None: ...


__all__ = ["LiveHandle"]
