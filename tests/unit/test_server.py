from __future__ import annotations

import time
import base64

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from voicechat.server import create_app
from voicechat.state.settings import AppSettings
from tests.helpers import FakeLiveClient, make_settings
from voicechat.runtime.dependencies import build_runtime_deps
from voicechat.live.events import LiveEvent, ResponsePart

PCM = b"\x01\x00\x02\x00"

REPLY = [
    LiveEvent(
        parts=(
            ResponsePart(text="hello back"),
            ResponsePart(mime_type="audio/pcm;rate=24000", data_b64=base64.b64encode(PCM).decode("ascii")),
        )
    ),
    LiveEvent(generation_complete=True),
    LiveEvent(turn_complete=True),
]


def _client(live: FakeLiveClient, settings: AppSettings | None = None) -> TestClient:
    settings = settings or make_settings()

    async def factory():
        return await build_runtime_deps(settings=settings, live_client=live)

    return TestClient(create_app(factory))


def _start(ws) -> None:
    ws.send_json({"type": "start-conversation"})
    assert ws.receive_json()["type"] == "conversation-started"
    assert ws.receive_json()["type"] == "setup-complete"


def test_health_and_index() -> None:
    with _client(FakeLiveClient()) as client:
        assert client.get("/health").json() == {"status": "ok", "sessions": 0}
        page = client.get("/")
        assert page.status_code == 200
        assert "text/html" in page.headers["content-type"]


def test_zero_length_audio_is_dropped_silently() -> None:
    live = FakeLiveClient(auto_setup=True)
    with _client(live) as client, client.websocket_connect("/ws") as ws:
        _start(ws)
        ws.send_json({"type": "audio-stream", "payload": {"audio": ""}})
        ws.send_json({"type": "ping"})

        # The pong arriving next proves no error was emitted in between.
        assert ws.receive_json()["type"] == "pong"
        assert live.handles[0].audio == []


def test_conversation_round_trip() -> None:
    live = FakeLiveClient(auto_setup=True, reply=REPLY)
    with _client(live) as client, client.websocket_connect("/ws") as ws:
        _start(ws)
        assert client.get("/health").json()["sessions"] == 1

        ws.send_json({"type": "audio-stream", "payload": {"audio": base64.b64encode(b"\x00\x00" * 8).decode()}})
        ws.send_json({"type": "send-text", "payload": {"text": "hi"}})

        text = ws.receive_json()
        assert text["type"] == "ai-response"
        assert text["payload"] == {"text": "hello back"}

        audio = ws.receive_json()
        assert audio["type"] == "ai-audio-response"
        assert audio["payload"]["format"] == "wav"
        assert base64.b64decode(audio["payload"]["audio"]).endswith(PCM)
        assert audio["connection_id"] == text["connection_id"]

        ws.send_json({"type": "stop-conversation"})
        assert ws.receive_json()["type"] == "conversation-ended"

        handle = live.handles[0]
        assert handle.audio == [(b"\x00\x00" * 8, 16000)]
        assert handle.texts == ["hi"]
        assert handle.closed


def test_second_start_is_rejected() -> None:
    live = FakeLiveClient(auto_setup=True)
    with _client(live) as client, client.websocket_connect("/ws") as ws:
        _start(ws)
        ws.send_json({"type": "start-conversation"})
        err = ws.receive_json()
        assert err["type"] == "error"
        assert err["payload"]["code"] == "conversation_already_active"
    assert len(live.handles) == 1


def test_connect_failure_reports_transport_error() -> None:
    live = FakeLiveClient(fail=RuntimeError("no route"))
    with _client(live) as client, client.websocket_connect("/ws") as ws:
        ws.send_json({"type": "start-conversation"})
        err = ws.receive_json()
        assert err["type"] == "error"
        assert err["payload"]["code"] == "transport_error"
        assert client.get("/health").json()["sessions"] == 0


def test_invalid_messages_are_reported() -> None:
    live = FakeLiveClient(auto_setup=True)
    with _client(live) as client, client.websocket_connect("/ws") as ws:
        ws.send_text("not json")
        assert ws.receive_json()["payload"]["code"] == "invalid_message"

        ws.send_json({"type": "dance"})
        assert ws.receive_json()["payload"]["code"] == "invalid_message"

        _start(ws)
        ws.send_json({"type": "audio-stream", "payload": {"audio": "AA$A"}})
        assert ws.receive_json()["payload"]["code"] == "invalid_payload"

        ws.send_json({"type": "send-text", "payload": {"text": "   "}})
        assert ws.receive_json()["payload"]["code"] == "invalid_payload"


def test_disconnect_closes_conversation() -> None:
    live = FakeLiveClient(auto_setup=True)
    with _client(live) as client:
        with client.websocket_connect("/ws") as ws:
            _start(ws)

        sessions = None
        for _ in range(100):
            sessions = client.get("/health").json()["sessions"]
            if sessions == 0:
                break
            time.sleep(0.01)
        assert sessions == 0
        assert live.handles[0].closed


def test_api_key_required_when_configured() -> None:
    with _client(FakeLiveClient(), make_settings(api_key="secret")) as client:
        with client.websocket_connect("/ws") as ws:
            err = ws.receive_json()
            assert err["payload"]["code"] == "authentication_failed"
            with pytest.raises(WebSocketDisconnect):
                ws.receive_json()

        with client.websocket_connect("/ws?api_key=secret") as ws:
            ws.send_json({"type": "ping"})
            assert ws.receive_json()["type"] == "pong"


def test_rate_limit() -> None:
    with _client(FakeLiveClient(), make_settings(max_messages=1)) as client:
        with client.websocket_connect("/ws") as ws:
            ws.send_json({"type": "stop-conversation"})
            ws.send_json({"type": "stop-conversation"})
            err = ws.receive_json()
            assert err["payload"]["code"] == "rate_limited"
