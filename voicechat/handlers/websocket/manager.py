"""Primary WebSocket connection handler orchestration."""

from __future__ import annotations

import uuid
import logging
import contextlib

from fastapi import WebSocket

from voicechat.state.runtime import RuntimeDeps
from voicechat.handlers.limits import SlidingWindowRateLimiter
from voicechat.config.websocket import (
    WS_CLOSE_BUSY_CODE,
    WS_ERROR_AUTH_FAILED,
    WS_CLOSE_UNAUTHORIZED_CODE,
    WS_ERROR_SERVER_AT_CAPACITY,
)

from .auth import authenticate_websocket
from .message_loop import run_message_loop
from .outbound import make_emitter, reject_connection

logger = logging.getLogger(__name__)


def _create_rate_limiter(runtime_deps: RuntimeDeps) -> SlidingWindowRateLimiter:
    return SlidingWindowRateLimiter(
        limit=runtime_deps.settings.limits.ws_max_messages_per_window,
        window_seconds=runtime_deps.settings.limits.ws_message_window_seconds,
    )


async def _prepare_connection(ws: WebSocket, connection_id: str, runtime_deps: RuntimeDeps) -> bool:
    if not await authenticate_websocket(ws, expected_api_key=runtime_deps.settings.auth.api_key):
        await reject_connection(
            ws,
            code=WS_ERROR_AUTH_FAILED,
            message=(
                "Authentication required. Provide valid API key via 'api_key' query parameter or 'X-API-Key' header."
            ),
            close_code=WS_CLOSE_UNAUTHORIZED_CODE,
        )
        return False

    if not await runtime_deps.connections.admit(connection_id):
        await reject_connection(
            ws,
            code=WS_ERROR_SERVER_AT_CAPACITY,
            message="Server cannot accept new connections. Please try again later.",
            close_code=WS_CLOSE_BUSY_CODE,
        )
        return False

    try:
        await ws.accept()
    except Exception:
        with contextlib.suppress(Exception):
            await runtime_deps.connections.release(connection_id)
        raise
    return True


async def handle_websocket_connection(ws: WebSocket, runtime_deps: RuntimeDeps) -> None:
    admitted = False
    connection_id = uuid.uuid4().hex
    try:
        if not await _prepare_connection(ws, connection_id, runtime_deps):
            return
        admitted = True

        emit = make_emitter(ws, connection_id)
        message_limiter = _create_rate_limiter(runtime_deps)

        logger.info(
            "WebSocket connection accepted connection_id=%s. Active: %s",
            connection_id,
            runtime_deps.connections.get_connection_count(),
        )
        await run_message_loop(ws, connection_id, emit, message_limiter, runtime_deps)
    finally:
        if admitted:
            # A dropped socket ends its conversation.
            try:
                await runtime_deps.registry.close(connection_id)
            except Exception:
                logger.exception("failed to close conversation connection_id=%s", connection_id)
            with contextlib.suppress(Exception):
                await runtime_deps.connections.release(connection_id)
            logger.info(
                "WebSocket connection closed connection_id=%s. Active: %s",
                connection_id,
                runtime_deps.connections.get_connection_count(),
            )


__all__ = ["handle_websocket_connection"]
