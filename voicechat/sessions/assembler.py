"""Per-turn response assembly.

Each Session moves Idle -> Collecting -> Assembling -> Idle. The first model
turn of a response starts collection and clears any stale fragments; text
parts are forwarded immediately while audio fragments are buffered until
generation completes, then emitted once as a single WAV artifact.
"""

from __future__ import annotations

import time
import asyncio
import logging
from collections.abc import Callable

from voicechat.errors import error_payload
from voicechat.state.session import Session
from voicechat.live.events import LiveEvent, ResponsePart
from voicechat.audio.codec import fragments_to_wav_base64
from voicechat.config.audio import WAV_FORMAT, OUTPUT_SAMPLE_RATE_HZ, RESPONSE_AUDIO_MIME_TYPE
from voicechat.config.websocket import (
    EVENT_ERROR,
    WS_ERROR_TIMEOUT,
    EVENT_AI_RESPONSE,
    EVENT_AI_AUDIO_RESPONSE,
)

logger = logging.getLogger(__name__)


def _normalize_mime(mime_type: str | None) -> str:
    return "".join((mime_type or "").split()).lower()


class ResponseAssembler:
    def __init__(
        self,
        *,
        sample_rate_hz: int = OUTPUT_SAMPLE_RATE_HZ,
        mime_type: str = RESPONSE_AUDIO_MIME_TYPE,
        turn_timeout_s: float = 0.0,
        now_fn: Callable[[], float] | None = None,
    ) -> None:
        self._sample_rate_hz = int(sample_rate_hz)
        self._mime_type = _normalize_mime(mime_type)
        self._turn_timeout_s = max(0.0, float(turn_timeout_s))
        self._now = now_fn or time.monotonic
        self._pending: set[asyncio.Task] = set()

    def accepts(self, part: ResponsePart) -> bool:
        return bool(part.data_b64) and _normalize_mime(part.mime_type) == self._mime_type

    async def handle_event(self, session: Session, event: LiveEvent) -> None:
        """Apply one inbound event. Model turn, then generation, then turn completion."""
        if event.parts is not None:
            await self._on_model_turn(session, event.parts)
        if event.generation_complete:
            await self._on_generation_complete(session)
        if event.turn_complete:
            self._on_turn_complete(session)

    async def _on_model_turn(self, session: Session, parts: tuple[ResponsePart, ...]) -> None:
        if not session.collecting_audio:
            session.reset_audio()
            session.collecting_audio = True
            session.turn_started_at = self._now()
            self._arm_turn_timer(session)

        for part in parts:
            if part.text:
                await session.emit(EVENT_AI_RESPONSE, {"text": part.text})
            if self.accepts(part):
                session.audio_chunks.append(part.data_b64)

    async def _on_generation_complete(self, session: Session) -> None:
        chunks = session.audio_chunks
        try:
            if chunks:
                wav_b64 = fragments_to_wav_base64(chunks, sample_rate_hz=self._sample_rate_hz)
                logger.info(
                    "assembled response audio connection_id=%s fragments=%s",
                    session.connection_id,
                    len(chunks),
                )
                await session.emit(EVENT_AI_AUDIO_RESPONSE, {"audio": wav_b64, "format": WAV_FORMAT})
        except Exception:
            logger.exception("failed to assemble response audio connection_id=%s", session.connection_id)
        finally:
            session.reset_audio()

    def _on_turn_complete(self, session: Session) -> None:
        # Leaves buffered fragments for a late generation-complete.
        session.collecting_audio = False
        session.turn_started_at = None
        if session.turn_timer is not None:
            session.turn_timer.cancel()
            session.turn_timer = None

    def _arm_turn_timer(self, session: Session) -> None:
        if self._turn_timeout_s <= 0:
            return
        loop = asyncio.get_running_loop()
        session.turn_timer = loop.call_later(self._turn_timeout_s, self._on_turn_timeout, session)

    def _on_turn_timeout(self, session: Session) -> None:
        session.turn_timer = None
        if session.closed or not session.collecting_audio:
            return
        started = session.turn_started_at
        elapsed_s = round(self._now() - started, 3) if started is not None else self._turn_timeout_s
        logger.warning(
            "response turn timed out connection_id=%s fragments=%s elapsed=%.1fs",
            session.connection_id,
            len(session.audio_chunks),
            elapsed_s,
        )
        session.reset_audio()
        payload = error_payload(
            WS_ERROR_TIMEOUT,
            "No complete response within the turn timeout",
            details={"timeout_s": self._turn_timeout_s, "elapsed_s": elapsed_s},
        )
        task = asyncio.get_running_loop().create_task(session.emit(EVENT_ERROR, payload))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)


__all__ = ["ResponseAssembler"]
