"""Connection id -> live conversation registry."""

from __future__ import annotations

import time
import asyncio
import logging
import contextlib
from typing import Any
from collections.abc import Callable

from voicechat.live.events import LiveEvent
from voicechat.live.connector import LiveClient
from voicechat.live.callbacks import LiveCallbacks
from voicechat.state.session import Emitter, Session
from voicechat.config.audio import INPUT_SAMPLE_RATE_HZ
from voicechat.errors import TransportError, SessionAlreadyActiveError, error_payload
from voicechat.config.websocket import (
    EVENT_ERROR,
    WS_ERROR_TRANSPORT,
    EVENT_SETUP_COMPLETE,
    EVENT_CONVERSATION_ENDED,
    EVENT_CONVERSATION_STARTED,
)

from .sweeper import IdleSweeper
from .assembler import ResponseAssembler

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Sole owner of every Session and its live handle.

    All methods run on the event loop; the map is never touched from threads.
    """

    def __init__(
        self,
        live_client: LiveClient,
        *,
        live_config: Any = None,
        idle_timeout_s: float = 300.0,
        sweep_interval_s: float = 60.0,
        greeting_prompt: str = "",
        greeting_delay_s: float = 1.0,
        assembler: ResponseAssembler | None = None,
        now_fn: Callable[[], float] | None = None,
    ) -> None:
        self._live_client = live_client
        self._live_config = live_config
        self._idle_timeout_s = max(0.0, float(idle_timeout_s))
        self._greeting_prompt = greeting_prompt
        self._greeting_delay_s = max(0.0, float(greeting_delay_s))
        self._assembler = assembler or ResponseAssembler()
        self._now = now_fn or time.monotonic
        self._sessions: dict[str, Session] = {}
        self._sweeper = IdleSweeper(self, interval_s=sweep_interval_s)

    def __len__(self) -> int:
        return len(self._sessions)

    def lookup(self, connection_id: str) -> Session | None:
        return self._sessions.get(connection_id)

    def touch(self, connection_id: str) -> None:
        session = self._sessions.get(connection_id)
        if session is not None:
            session.last_activity = self._now()

    async def open(self, connection_id: str, emit: Emitter) -> Session:
        if connection_id in self._sessions:
            raise SessionAlreadyActiveError(connection_id)

        now = self._now()
        session = Session(connection_id=connection_id, emit=emit, created_at=now, last_activity=now)
        # Registered before connecting so a concurrent open is rejected.
        self._sessions[connection_id] = session

        try:
            handle = await self._live_client.connect(self._live_config, self._callbacks_for(session))
        except Exception as exc:
            if self._sessions.get(connection_id) is session:
                del self._sessions[connection_id]
            session.closed = True
            if isinstance(exc, TransportError):
                raise
            raise TransportError(f"failed to open live session: {exc}") from exc

        session.handle = handle
        if session.closed:
            # Stopped while the connection was being established.
            await self._close_handle(session)
        else:
            logger.info("conversation opened connection_id=%s active=%s", connection_id, len(self._sessions))
        return session

    async def close(self, connection_id: str) -> None:
        session = self._sessions.pop(connection_id, None)
        if session is None or session.closed:
            return
        session.closed = True
        self._teardown(session)
        await self._close_handle(session)
        await self._emit_ended(session)
        logger.info("conversation closed connection_id=%s active=%s", connection_id, len(self._sessions))

    async def close_all(self) -> None:
        for connection_id in list(self._sessions):
            try:
                await self.close(connection_id)
            except Exception:
                logger.exception("failed to close conversation connection_id=%s", connection_id)

    async def send_audio(self, connection_id: str, pcm: bytes, sample_rate_hz: int = INPUT_SAMPLE_RATE_HZ) -> bool:
        session = self._ready_session(connection_id)
        if session is None:
            return False
        session.last_activity = self._now()
        await session.handle.send_audio(pcm, sample_rate_hz)
        return True

    async def send_text(self, connection_id: str, text: str) -> bool:
        session = self._ready_session(connection_id)
        if session is None:
            return False
        session.last_activity = self._now()
        await session.handle.send_text(text)
        return True

    async def sweep(self) -> list[str]:
        """Close every Session idle longer than the idle timeout; returns the closed ids."""
        if self._idle_timeout_s <= 0:
            return []
        now = self._now()
        expired = [
            connection_id
            for connection_id, session in self._sessions.items()
            if now - session.last_activity > self._idle_timeout_s
        ]
        for connection_id in expired:
            logger.info("closing idle conversation connection_id=%s", connection_id)
            await self.close(connection_id)
        return expired

    def start(self) -> None:
        self._sweeper.start()

    async def stop(self) -> None:
        await self._sweeper.stop()
        await self.close_all()

    def _ready_session(self, connection_id: str) -> Session | None:
        session = self._sessions.get(connection_id)
        if session is None or session.closed or session.handle is None:
            return None
        if not session.setup_complete:
            logger.debug("setup not complete; dropping send connection_id=%s", connection_id)
            return None
        return session

    def _teardown(self, session: Session) -> None:
        session.setup_complete = False
        if session.greeting_task is not None:
            session.greeting_task.cancel()
            session.greeting_task = None
        session.reset_audio()

    async def _close_handle(self, session: Session) -> None:
        handle = session.handle
        if handle is None or handle.closed:
            return
        try:
            await handle.close()
        except Exception:
            logger.exception("failed to close live session connection_id=%s", session.connection_id)

    async def _emit_ended(self, session: Session) -> None:
        if session.ended_emitted:
            return
        session.ended_emitted = True
        await session.emit(EVENT_CONVERSATION_ENDED, {})

    def _callbacks_for(self, session: Session) -> LiveCallbacks:
        async def on_open() -> None:
            if not session.closed:
                await session.emit(EVENT_CONVERSATION_STARTED, {})

        async def on_message(event: LiveEvent) -> None:
            if session.closed:
                return
            session.last_activity = self._now()
            if event.setup_complete and not session.setup_complete:
                session.setup_complete = True
                session.reset_audio()
                await session.emit(EVENT_SETUP_COMPLETE, {})
                self._schedule_greeting(session)
            await self._assembler.handle_event(session, event)

        async def on_error(exc: Exception) -> None:
            if session.closed:
                return
            await session.emit(
                EVENT_ERROR,
                error_payload(WS_ERROR_TRANSPORT, "Live session error", details={"error": str(exc)}),
            )
            if isinstance(exc, TransportError):
                # A failed send or receive leaves the live session unusable.
                await self.close(session.connection_id)

        async def on_close(reason: str) -> None:
            if self._sessions.get(session.connection_id) is session:
                del self._sessions[session.connection_id]
            if not session.closed:
                session.closed = True
                self._teardown(session)
                logger.info("live session ended connection_id=%s reason=%s", session.connection_id, reason)
            await self._close_handle(session)
            await self._emit_ended(session)

        return LiveCallbacks(on_open=on_open, on_message=on_message, on_error=on_error, on_close=on_close)

    def _schedule_greeting(self, session: Session) -> None:
        if not self._greeting_prompt:
            return
        session.greeting_task = asyncio.create_task(self._send_greeting(session))

    async def _send_greeting(self, session: Session) -> None:
        with contextlib.suppress(asyncio.CancelledError):
            await asyncio.sleep(self._greeting_delay_s)
            session.greeting_task = None
            if session.closed or not session.setup_complete or session.handle is None:
                return
            logger.info("sending greeting connection_id=%s", session.connection_id)
            await session.handle.send_text(self._greeting_prompt)


__all__ = ["SessionRegistry"]
