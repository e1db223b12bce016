from __future__ import annotations

import base64
import asyncio
from pathlib import Path

import pytest

from tests.helpers import FakeLiveClient
from voicechat.audio.wav import WAV_HEADER_BYTES, read_wav_header
from voicechat.errors import TransportError, ResponseTimeoutError
from voicechat.live.events import LiveEvent, ResponsePart
from voicechat.cli import RoundTripResult, write_response, run_round_trip


def _audio(data: bytes) -> ResponsePart:
    return ResponsePart(mime_type="audio/pcm;rate=24000", data_b64=base64.b64encode(data).decode("ascii"))


REPLY = [
    LiveEvent(input_transcription="what's up"),
    LiveEvent(parts=(_audio(b"\x01\x00"),)),
    LiveEvent(parts=(ResponsePart(text="not much"), _audio(b"\x02\x00"))),
    LiveEvent(output_transcription="not much"),
    LiveEvent(generation_complete=True),
    LiveEvent(turn_complete=True),
]


@pytest.mark.asyncio
async def test_round_trip_collects_until_turn_complete() -> None:
    client = FakeLiveClient(auto_setup=True, reply=REPLY)

    result = await run_round_trip(b"\x00\x00" * 160, live_client=client, config={"model": "x"})

    handle = client.handles[0]
    assert handle.audio == [(b"\x00\x00" * 160, 16000)]
    assert handle.stream_ends == 1
    assert handle.closed
    assert result.texts == ["not much"]
    assert result.input_transcript == "what's up"
    assert result.output_transcript == "not much"
    assert result.audio_pcm() == b"\x01\x00\x02\x00"


@pytest.mark.asyncio
async def test_round_trip_times_out_per_message() -> None:
    client = FakeLiveClient(auto_setup=True)

    with pytest.raises(ResponseTimeoutError):
        await run_round_trip(b"\x00\x00", live_client=client, config={}, turn_timeout_s=0.05, response_timeout_s=1.0)
    assert client.handles[0].closed


@pytest.mark.asyncio
async def test_round_trip_times_out_overall() -> None:
    client = FakeLiveClient(auto_setup=True)

    async def trickle() -> None:
        while True:
            await asyncio.sleep(0.02)
            if client.handles:
                await client.handles[0].deliver(LiveEvent(parts=(ResponsePart(text="..."),)))

    task = asyncio.create_task(trickle())
    try:
        with pytest.raises(ResponseTimeoutError):
            await run_round_trip(b"\x00\x00", live_client=client, config={}, turn_timeout_s=1.0, response_timeout_s=0.1)
    finally:
        task.cancel()


@pytest.mark.asyncio
async def test_round_trip_remote_close_is_transport_error() -> None:
    client = FakeLiveClient()

    async def close_soon() -> None:
        await asyncio.sleep(0.02)
        await client.handles[0].remote_close()

    task = asyncio.create_task(close_soon())
    with pytest.raises(TransportError):
        await run_round_trip(b"\x00\x00", live_client=client, config={}, turn_timeout_s=1.0)
    await task


def test_write_response(tmp_path: Path) -> None:
    result = RoundTripResult()
    result.audio_fragments = [base64.b64encode(b"\x01\x00\x02\x00\x03").decode("ascii")]

    out = tmp_path / "response.wav"
    assert write_response(result, out) == 4

    wav = out.read_bytes()
    header = read_wav_header(wav)
    assert header.sample_rate_hz == 24000
    assert wav[WAV_HEADER_BYTES:] == b"\x01\x00\x02\x00"
