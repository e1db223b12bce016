"""Dispatch handlers for conversation messages on /ws."""

from __future__ import annotations

import logging
from collections.abc import Callable, Awaitable

from voicechat.state.runtime import RuntimeDeps
from voicechat.state.session import Emitter
from voicechat.audio.codec import decode_base64_audio
from voicechat.errors import TransportError, PayloadValidationError, SessionAlreadyActiveError
from voicechat.config.websocket import (
    EVENT_SEND_TEXT,
    EVENT_AUDIO_STREAM,
    WS_ERROR_INVALID_PAYLOAD,
    EVENT_STOP_CONVERSATION,
    EVENT_START_CONVERSATION,
)

from .parser import ClientMessage
from .outbound import send_error, send_failure

logger = logging.getLogger(__name__)

HandlerFn = Callable[[RuntimeDeps, str, Emitter, ClientMessage], Awaitable[None]]


async def _handle_start(runtime_deps: RuntimeDeps, connection_id: str, emit: Emitter, _msg: ClientMessage) -> None:
    try:
        await runtime_deps.registry.open(connection_id, emit)
    except SessionAlreadyActiveError as exc:
        await send_failure(emit, exc, message="a conversation is already active; send stop-conversation first")
    except TransportError as exc:
        logger.warning("failed to start conversation connection_id=%s: %s", connection_id, exc)
        await send_failure(emit, exc, message="Failed to start conversation", details={"error": str(exc)})


async def _handle_audio(runtime_deps: RuntimeDeps, connection_id: str, emit: Emitter, msg: ClientMessage) -> None:
    try:
        audio = msg.string_field("audio")
        # Browser capture emits empty chunks between frames.
        if audio is None:
            return
        pcm = decode_base64_audio(audio)
    except PayloadValidationError as exc:
        await send_failure(emit, exc)
        return
    if not pcm:
        return

    if not await runtime_deps.registry.send_audio(connection_id, pcm):
        logger.debug("conversation not ready; audio dropped connection_id=%s", connection_id)


async def _handle_text(runtime_deps: RuntimeDeps, connection_id: str, emit: Emitter, msg: ClientMessage) -> None:
    try:
        text = msg.string_field("text")
    except PayloadValidationError as exc:
        await send_failure(emit, exc)
        return
    if text is None or not text.strip():
        await send_error(emit, WS_ERROR_INVALID_PAYLOAD, "payload.text must be a non-empty string")
        return
    if not await runtime_deps.registry.send_text(connection_id, text):
        logger.debug("conversation not ready; text dropped connection_id=%s", connection_id)


async def _handle_stop(runtime_deps: RuntimeDeps, connection_id: str, _emit: Emitter, _msg: ClientMessage) -> None:
    await runtime_deps.registry.close(connection_id)


HANDLERS: dict[str, HandlerFn] = {
    EVENT_START_CONVERSATION: _handle_start,
    EVENT_AUDIO_STREAM: _handle_audio,
    EVENT_SEND_TEXT: _handle_text,
    EVENT_STOP_CONVERSATION: _handle_stop,
}

__all__ = ["HANDLERS", "HandlerFn"]
