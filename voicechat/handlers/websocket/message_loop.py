"""WebSocket message loop for the conversation relay (/ws)."""

from __future__ import annotations

import logging

from fastapi import WebSocket, WebSocketDisconnect

from voicechat.state.runtime import RuntimeDeps
from voicechat.state.session import Emitter
from voicechat.handlers.limits import SlidingWindowRateLimiter
from voicechat.config.websocket import EVENT_PING, EVENT_PONG, WS_ERROR_INTERNAL, WS_ERROR_INVALID_MESSAGE

from .dispatch import HANDLERS
from .outbound import send_error
from .parser import ClientMessage, parse_client_message
from .limits import consume_limiter, is_rate_limited_type

logger = logging.getLogger(__name__)


async def _parse_or_report(raw: str, emit: Emitter) -> ClientMessage | None:
    try:
        return parse_client_message(raw)
    except ValueError as exc:
        await send_error(emit, WS_ERROR_INVALID_MESSAGE, str(exc))
        return None


async def run_message_loop(
    ws: WebSocket,
    connection_id: str,
    emit: Emitter,
    message_limiter: SlidingWindowRateLimiter,
    runtime_deps: RuntimeDeps,
) -> None:
    """Read frames until disconnect; every reply is written through `emit`."""
    while True:
        try:
            raw = await ws.receive_text()
        except WebSocketDisconnect:
            return

        msg = await _parse_or_report(raw, emit)
        if msg is None:
            continue

        if is_rate_limited_type(msg.type) and not await consume_limiter(emit, message_limiter):
            continue

        if msg.type == EVENT_PING:
            await emit(EVENT_PONG, {})
            continue

        handler = HANDLERS.get(msg.type)
        if handler is None:
            await send_error(emit, WS_ERROR_INVALID_MESSAGE, f"message type '{msg.type}' is not supported")
            continue

        # Activity on the socket keeps the conversation out of the idle sweep.
        runtime_deps.registry.touch(connection_id)
        try:
            await handler(runtime_deps, connection_id, emit, msg)
        except WebSocketDisconnect:
            return
        except Exception:
            logger.exception("handler failed type=%s connection_id=%s", msg.type, connection_id)
            await send_error(emit, WS_ERROR_INTERNAL, "internal error while handling message")


__all__ = ["run_message_loop"]
