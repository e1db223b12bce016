"""Outbound /ws envelopes: encoding, guarded sends and per-socket emitters."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import orjson
from fastapi import WebSocket, WebSocketDisconnect

from voicechat.state.session import Emitter
from voicechat.errors import error_payload, error_code_for
from voicechat.config.websocket import (
    EVENT_ERROR,
    WS_KEY_TYPE,
    WS_KEY_PAYLOAD,
    WS_KEY_CONNECTION_ID,
    WS_UNKNOWN_CONNECTION_ID,
)

logger = logging.getLogger(__name__)


def encode_envelope(msg_type: str, connection_id: str, payload: dict[str, Any] | None = None) -> str:
    envelope = {
        WS_KEY_TYPE: msg_type,
        WS_KEY_CONNECTION_ID: connection_id or WS_UNKNOWN_CONNECTION_ID,
        WS_KEY_PAYLOAD: payload or {},
    }
    return orjson.dumps(envelope).decode("utf-8")


async def send_envelope(
    ws: WebSocket,
    msg_type: str,
    connection_id: str,
    payload: dict[str, Any] | None = None,
) -> bool:
    """Send one envelope; a closed or failing socket yields False instead of raising."""
    try:
        await ws.send_text(encode_envelope(msg_type, connection_id, payload))
    except WebSocketDisconnect:
        return False
    except Exception:
        logger.debug("WebSocket send failed connection_id=%s", connection_id, exc_info=True)
        return False
    return True


async def send_error(
    emit: Emitter,
    code: str,
    message: str,
    *,
    details: dict[str, Any] | None = None,
) -> None:
    await emit(EVENT_ERROR, error_payload(code, message, details=details))


async def send_failure(
    emit: Emitter,
    exc: Exception,
    *,
    message: str | None = None,
    details: dict[str, Any] | None = None,
) -> None:
    """Report `exc` with the error code its type maps to."""
    await send_error(emit, error_code_for(exc), message or str(exc), details=details)


def make_emitter(ws: WebSocket, connection_id: str) -> Emitter:
    """Single writer for an accepted socket; every envelope after accept goes through it."""
    lock = asyncio.Lock()

    async def emit(msg_type: str, payload: dict[str, Any]) -> None:
        async with lock:
            await send_envelope(ws, msg_type, connection_id, payload)

    return emit


async def reject_connection(ws: WebSocket, *, code: str, message: str, close_code: int) -> None:
    """Accept only to deliver a structured error, then close with `close_code`."""
    try:
        await ws.accept()
    except Exception:
        return
    await send_envelope(ws, EVENT_ERROR, WS_UNKNOWN_CONNECTION_ID, error_payload(code, message))
    try:
        await ws.close(code=close_code, reason=message)
    except Exception:
        logger.debug("WebSocket close after rejection failed", exc_info=True)


__all__ = [
    "encode_envelope",
    "make_emitter",
    "reject_connection",
    "send_envelope",
    "send_error",
    "send_failure",
]
