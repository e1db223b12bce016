"""Gemini Live session wrapper with callback delivery.

Inbound SDK messages are normalized into `LiveEvent`s, queued, and drained by
a single pump task so callbacks observe them strictly in arrival order.
`on_close` fires exactly once per handle, whether the remote side or the
caller ended the session.
"""

from __future__ import annotations

import asyncio
import logging
import contextlib
from typing import Any
from dataclasses import dataclass
from collections.abc import Callable, Awaitable

from google.genai import types
from websockets.exceptions import ConnectionClosedOK

from voicechat.errors import TransportError
from voicechat.config.audio import INPUT_SAMPLE_RATE_HZ, pcm_mime_type

from .callbacks import LiveCallbacks
from .events import SETUP_COMPLETE_EVENT, LiveEvent, parse_server_message

logger = logging.getLogger(__name__)

CLOSE_REASON_LOCAL = "closed"
CLOSE_REASON_REMOTE = "remote_closed"
CLOSE_REASON_ERROR = "error"


@dataclass(frozen=True, slots=True)
class _Failure:
    exc: Exception


@dataclass(frozen=True, slots=True)
class _End:
    reason: str


class GeminiLiveHandle:
    def __init__(self, session: Any, exit_stack: contextlib.AsyncExitStack, callbacks: LiveCallbacks) -> None:
        self._session = session
        self._stack = exit_stack
        self._callbacks = callbacks
        self._queue: asyncio.Queue[LiveEvent | _Failure | _End] = asyncio.Queue()
        self._closed = False
        self._remote_closed = False
        self._transport_released = False
        self._receive_task: asyncio.Task | None = None
        self._pump_task: asyncio.Task | None = None

    @property
    def closed(self) -> bool:
        return self._closed or self._remote_closed

    @property
    def remote_closed(self) -> bool:
        return self._remote_closed

    def start(self) -> None:
        if self._pump_task is not None:
            return
        # setup_complete is consumed inside connect(); surface it as the first event.
        self._queue.put_nowait(SETUP_COMPLETE_EVENT)
        self._receive_task = asyncio.create_task(self._receive_loop())
        self._pump_task = asyncio.create_task(self._pump())

    async def _receive_loop(self) -> None:
        reason = CLOSE_REASON_REMOTE
        try:
            while not self._closed:
                received = 0
                # receive() stops after each turn_complete; loop to keep listening.
                async for message in self._session.receive():
                    received += 1
                    event = parse_server_message(message)
                    if not event.is_empty:
                        self._queue.put_nowait(event)
                if received == 0:
                    break
        except asyncio.CancelledError:
            return
        except ConnectionClosedOK:
            pass
        except Exception as exc:
            if self._closed:
                return
            logger.warning("live session receive failed: %s", exc)
            self._queue.put_nowait(_Failure(TransportError(f"live session receive failed: {exc}")))
            reason = CLOSE_REASON_ERROR
        if not self._closed:
            self._remote_closed = True
            await self._release_transport()
            self._queue.put_nowait(_End(reason))

    async def _pump(self) -> None:
        await self._invoke(self._callbacks.on_open)
        while True:
            item = await self._queue.get()
            if isinstance(item, _End):
                await self._invoke(self._callbacks.on_close, item.reason)
                return
            if isinstance(item, _Failure):
                await self._invoke(self._callbacks.on_error, item.exc)
                continue
            await self._invoke(self._callbacks.on_message, item)

    async def _invoke(self, fn: Callable[..., Awaitable[None]], *args: Any) -> None:
        try:
            await fn(*args)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("live session callback failed")

    def _report(self, exc: Exception) -> None:
        if not self.closed:
            self._queue.put_nowait(_Failure(exc))

    async def send_audio(self, pcm: bytes, sample_rate_hz: int = INPUT_SAMPLE_RATE_HZ) -> None:
        if self.closed:
            return
        try:
            await self._session.send_realtime_input(
                audio=types.Blob(data=pcm, mime_type=pcm_mime_type(sample_rate_hz)),
            )
        except Exception as exc:
            logger.warning("live session audio send failed: %s", exc)
            self._report(TransportError(f"failed to stream audio: {exc}"))

    async def send_text(self, text: str) -> None:
        if self.closed:
            return
        try:
            await self._session.send_realtime_input(text=text)
        except Exception as exc:
            logger.warning("live session text send failed: %s", exc)
            self._report(TransportError(f"failed to send text: {exc}"))

    async def send_audio_stream_end(self) -> None:
        if self.closed:
            return
        try:
            await self._session.send_realtime_input(audio_stream_end=True)
        except Exception as exc:
            logger.warning("live session stream end failed: %s", exc)
            self._report(TransportError(f"failed to end audio stream: {exc}"))

    async def close(self) -> None:
        """Close the session; safe to call repeatedly and from inside callbacks.

        Does not wait for the pump, so `on_close` may still be pending on return.
        """
        if self._closed:
            return
        self._closed = True
        task = self._receive_task
        if task is not None and not task.done():
            # A remotely closed receive loop is already releasing the transport; let it finish.
            if not self._remote_closed:
                task.cancel()
            with contextlib.suppress(asyncio.CancelledError, Exception):
                await task
        if not self._remote_closed:
            self._queue.put_nowait(_End(CLOSE_REASON_LOCAL))
        await self._release_transport()

    async def _release_transport(self) -> None:
        # The SDK transport must be released once only.
        if self._transport_released:
            return
        self._transport_released = True
        try:
            await self._stack.aclose()
        except Exception:
            logger.debug("live session transport close failed", exc_info=True)

    async def wait_closed(self) -> None:
        if self._pump_task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await self._pump_task


__all__ = [
    "CLOSE_REASON_ERROR",
    "CLOSE_REASON_LOCAL",
    "CLOSE_REASON_REMOTE",
    "GeminiLiveHandle",
]
