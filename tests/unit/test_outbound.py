from __future__ import annotations

import json
import asyncio
from typing import Any

import pytest
from fastapi import WebSocketDisconnect

from tests.helpers import RecordingEmitter
from voicechat.handlers.limits import SlidingWindowRateLimiter
from voicechat.handlers.websocket.message_loop import run_message_loop
from voicechat.handlers.websocket.outbound import make_emitter, encode_envelope


class _SlowSocket:
    def __init__(self, frames: list[str] | None = None) -> None:
        self.frames = list(frames or [])
        self.log: list[str] = []
        self.sent: list[dict[str, Any]] = []

    async def send_text(self, text: str) -> None:
        msg = json.loads(text)
        self.log.append(f"start:{msg['type']}")
        await asyncio.sleep(0.01)
        self.sent.append(msg)
        self.log.append(f"end:{msg['type']}")

    async def receive_text(self) -> str:
        if not self.frames:
            raise WebSocketDisconnect(code=1000)
        return self.frames.pop(0)


def test_encode_envelope_shape() -> None:
    assert json.loads(encode_envelope("pong", "c1")) == {"type": "pong", "connection_id": "c1", "payload": {}}
    assert json.loads(encode_envelope("error", "", {"code": "x"}))["connection_id"] == "unknown"


@pytest.mark.asyncio
async def test_emitter_serializes_concurrent_writes() -> None:
    ws = _SlowSocket()
    emit = make_emitter(ws, "c1")

    await asyncio.gather(emit("ai-response", {"text": "a"}), emit("pong", {}))

    assert ws.log == ["start:ai-response", "end:ai-response", "start:pong", "end:pong"]
    assert all(msg["connection_id"] == "c1" for msg in ws.sent)


@pytest.mark.asyncio
async def test_message_loop_replies_through_emitter() -> None:
    ws = _SlowSocket(["not json", json.dumps({"type": "ping"}), json.dumps({"type": "dance"})])
    emit = RecordingEmitter()
    limiter = SlidingWindowRateLimiter(limit=0, window_seconds=0)

    await run_message_loop(ws, "c1", emit, limiter, runtime_deps=None)

    assert emit.types == ["error", "pong", "error"]
    assert [p["code"] for p in emit.payloads("error")] == ["invalid_message", "invalid_message"]
    assert ws.sent == []
