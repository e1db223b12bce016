from __future__ import annotations

import asyncio
import contextlib
from typing import Any

import pytest
from google.genai import types

from voicechat.errors import TransportError
from voicechat.live.client import GeminiLiveClient
from voicechat.live.callbacks import LiveCallbacks
from voicechat.live.gemini_handle import GeminiLiveHandle


class _FakeSession:
    """Mimics AsyncSession.receive(): one generator pass per queued turn."""

    def __init__(self) -> None:
        self.turns: asyncio.Queue[list[Any] | Exception | None] = asyncio.Queue()
        self.sent: list[dict[str, Any]] = []
        self.fail_sends = False

    async def receive(self):
        turn = await self.turns.get()
        if isinstance(turn, Exception):
            raise turn
        if turn is None:
            return
        for message in turn:
            yield message

    async def send_realtime_input(self, **kwargs: Any) -> None:
        if self.fail_sends:
            raise RuntimeError("socket gone")
        self.sent.append(kwargs)


class _Recorder:
    def __init__(self) -> None:
        self.opened = 0
        self.events: list[Any] = []
        self.errors: list[Exception] = []
        self.closes: list[str] = []
        self.closed = asyncio.Event()

    def callbacks(self) -> LiveCallbacks:
        async def on_open() -> None:
            self.opened += 1

        async def on_message(event) -> None:
            self.events.append(event)

        async def on_error(exc: Exception) -> None:
            self.errors.append(exc)

        async def on_close(reason: str) -> None:
            self.closes.append(reason)
            self.closed.set()

        return LiveCallbacks(on_open=on_open, on_message=on_message, on_error=on_error, on_close=on_close)


def _handle(session: _FakeSession, recorder: _Recorder) -> tuple[GeminiLiveHandle, list[int]]:
    released: list[int] = []
    stack = contextlib.AsyncExitStack()

    async def _release() -> None:
        released.append(1)

    stack.push_async_callback(_release)
    handle = GeminiLiveHandle(session, stack, recorder.callbacks())
    handle.start()
    return handle, released


def _text_turn(text: str) -> list[types.LiveServerMessage]:
    return [
        types.LiveServerMessage(
            server_content=types.LiveServerContent(
                model_turn=types.Content(role="model", parts=[types.Part(text=text)]),
            )
        ),
        types.LiveServerMessage(server_content=types.LiveServerContent(turn_complete=True)),
    ]


@pytest.mark.asyncio
async def test_setup_event_first_then_messages_in_order() -> None:
    session = _FakeSession()
    recorder = _Recorder()
    handle, released = _handle(session, recorder)

    session.turns.put_nowait(_text_turn("one"))
    session.turns.put_nowait(_text_turn("two"))
    session.turns.put_nowait(None)
    await asyncio.wait_for(recorder.closed.wait(), timeout=1.0)

    assert recorder.opened == 1
    assert recorder.events[0].setup_complete is True
    texts = [e.parts[0].text for e in recorder.events if e.parts]
    assert texts == ["one", "two"]
    assert recorder.closes == ["remote_closed"]
    assert handle.remote_closed
    assert released == [1]

    # Closing after the remote side did must not release the transport again.
    await handle.close()
    await handle.close()
    assert released == [1]
    assert recorder.closes == ["remote_closed"]


@pytest.mark.asyncio
async def test_local_close_fires_on_close_once() -> None:
    session = _FakeSession()
    recorder = _Recorder()
    handle, released = _handle(session, recorder)

    await handle.close()
    await handle.close()
    await handle.wait_closed()

    assert recorder.closes == ["closed"]
    assert released == [1]
    assert handle.closed


@pytest.mark.asyncio
async def test_sends_use_realtime_input() -> None:
    session = _FakeSession()
    recorder = _Recorder()
    handle, _ = _handle(session, recorder)

    await handle.send_audio(b"\x00\x01", 16000)
    await handle.send_text("hello")
    await handle.send_audio_stream_end()

    blob = session.sent[0]["audio"]
    assert blob.data == b"\x00\x01"
    assert blob.mime_type == "audio/pcm;rate=16000"
    assert session.sent[1] == {"text": "hello"}
    assert session.sent[2] == {"audio_stream_end": True}

    await handle.close()


@pytest.mark.asyncio
async def test_send_failure_reported_not_raised() -> None:
    session = _FakeSession()
    session.fail_sends = True
    recorder = _Recorder()
    handle, _ = _handle(session, recorder)

    await handle.send_text("hello")
    await asyncio.sleep(0.01)

    assert len(recorder.errors) == 1
    assert isinstance(recorder.errors[0], TransportError)
    await handle.close()


@pytest.mark.asyncio
async def test_close_from_error_callback_after_receive_failure() -> None:
    session = _FakeSession()
    recorder = _Recorder()
    released: list[int] = []
    stack = contextlib.AsyncExitStack()

    async def _release() -> None:
        await asyncio.sleep(0.01)
        released.append(1)

    stack.push_async_callback(_release)
    callbacks = recorder.callbacks()
    record_error = callbacks.on_error

    async def on_error(exc: Exception) -> None:
        await record_error(exc)
        await handle.close()

    callbacks.on_error = on_error
    handle = GeminiLiveHandle(session, stack, callbacks)
    handle.start()

    session.turns.put_nowait(RuntimeError("connection reset"))
    await asyncio.wait_for(recorder.closed.wait(), timeout=1.0)
    await asyncio.wait_for(handle.wait_closed(), timeout=1.0)

    assert len(recorder.errors) == 1
    assert isinstance(recorder.errors[0], TransportError)
    assert recorder.closes == ["error"]
    assert released == [1]


@pytest.mark.asyncio
async def test_sends_after_close_are_ignored() -> None:
    session = _FakeSession()
    handle, _ = _handle(session, _Recorder())

    await handle.close()
    await handle.send_text("late")
    assert session.sent == []


class _FailingLive:
    def connect(self, *, model: str, config: Any):
        raise RuntimeError("bad key")


class _FailingAio:
    live = _FailingLive()


class _FailingClient:
    aio = _FailingAio()


@pytest.mark.asyncio
async def test_connect_failure_raises_transport_error() -> None:
    client = GeminiLiveClient(_FailingClient(), "gemini-test")
    with pytest.raises(TransportError):
        await client.connect(None, LiveCallbacks())
