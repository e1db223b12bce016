"""Command-line recorder: capture one utterance, send it to Gemini Live, play the reply."""

from __future__ import annotations

import sys
import asyncio
import logging
import argparse
from typing import Any
from pathlib import Path
from dataclasses import field, dataclass

from dotenv import load_dotenv

from voicechat.audio.wav import pcm16_to_wav
from voicechat.audio.playback import play_wav
from voicechat.live.events import LiveEvent
from voicechat.live.connector import LiveClient
from voicechat.audio.codec import join_fragments
from voicechat.live.callbacks import LiveCallbacks
from voicechat.live.config import build_cli_config
from voicechat.runtime.settings import load_settings
from voicechat.audio.convert import file_to_pcm16_mono
from voicechat.runtime.logging import configure_logging
from voicechat.audio.capture import record_until_interrupt
from voicechat.runtime.dependencies import build_live_client
from voicechat.config.audio import PCM_MIME_PREFIX, INPUT_SAMPLE_RATE_HZ, OUTPUT_SAMPLE_RATE_HZ
from voicechat.config.cli import (
    DEFAULT_INPUT_FILE,
    DEFAULT_RESPONSE_FILE,
    DEFAULT_CLI_TURN_TIMEOUT_S,
    DEFAULT_CLI_RESPONSE_TIMEOUT_S,
)
from voicechat.errors import ResourceError, TransportError, VoiceChatError, ResponseTimeoutError

logger = logging.getLogger(__name__)

_CLOSED = object()


@dataclass(slots=True)
class RoundTripResult:
    texts: list[str] = field(default_factory=list)
    input_transcripts: list[str] = field(default_factory=list)
    output_transcripts: list[str] = field(default_factory=list)
    audio_fragments: list[str] = field(default_factory=list)

    @property
    def input_transcript(self) -> str:
        return "".join(self.input_transcripts).strip()

    @property
    def output_transcript(self) -> str:
        return "".join(self.output_transcripts).strip()

    def audio_pcm(self) -> bytes:
        return join_fragments(self.audio_fragments)

    def absorb(self, event: LiveEvent) -> None:
        for part in event.parts or ():
            if part.text:
                self.texts.append(part.text)
            if part.data_b64 and (part.mime_type or "").lower().startswith(PCM_MIME_PREFIX):
                self.audio_fragments.append(part.data_b64)
        if event.input_transcription:
            self.input_transcripts.append(event.input_transcription)
        if event.output_transcription:
            self.output_transcripts.append(event.output_transcription)


async def _collect_turn(queue: asyncio.Queue, *, turn_timeout_s: float) -> RoundTripResult:
    result = RoundTripResult()
    while True:
        try:
            item = await asyncio.wait_for(queue.get(), timeout=turn_timeout_s)
        except TimeoutError:
            raise ResponseTimeoutError(f"no message from the live session within {turn_timeout_s:g}s") from None
        if item is _CLOSED:
            raise TransportError("live session closed before the turn completed")
        if isinstance(item, Exception):
            raise item
        if item.setup_complete and not item.has_model_turn:
            continue
        result.absorb(item)
        if item.turn_complete:
            return result


async def run_round_trip(
    pcm: bytes,
    *,
    live_client: LiveClient,
    config: Any = None,
    sample_rate_hz: int = INPUT_SAMPLE_RATE_HZ,
    turn_timeout_s: float = DEFAULT_CLI_TURN_TIMEOUT_S,
    response_timeout_s: float = DEFAULT_CLI_RESPONSE_TIMEOUT_S,
) -> RoundTripResult:
    """Send one utterance and collect everything up to turn completion.

    Raises ResponseTimeoutError when a single message takes longer than
    `turn_timeout_s` or the whole turn longer than `response_timeout_s`.
    """
    queue: asyncio.Queue = asyncio.Queue()

    async def on_message(event: LiveEvent) -> None:
        queue.put_nowait(event)

    async def on_error(exc: Exception) -> None:
        queue.put_nowait(exc if isinstance(exc, VoiceChatError) else TransportError(str(exc)))

    async def on_close(_reason: str) -> None:
        queue.put_nowait(_CLOSED)

    callbacks = LiveCallbacks(on_message=on_message, on_error=on_error, on_close=on_close)
    handle = await live_client.connect(config if config is not None else build_cli_config(), callbacks)
    try:
        logger.info("sending %s bytes of audio", len(pcm))
        await handle.send_audio(pcm, sample_rate_hz)
        await handle.send_audio_stream_end()
        try:
            return await asyncio.wait_for(
                _collect_turn(queue, turn_timeout_s=turn_timeout_s),
                timeout=response_timeout_s,
            )
        except ResponseTimeoutError:
            raise
        except TimeoutError:
            raise ResponseTimeoutError(f"no complete response within {response_timeout_s:g}s") from None
    finally:
        await handle.close()


def write_response(result: RoundTripResult, path: str | Path) -> int:
    """Write the response audio as WAV; returns the number of PCM bytes written."""
    pcm = result.audio_pcm()
    try:
        Path(path).write_bytes(pcm16_to_wav(pcm, sample_rate_hz=OUTPUT_SAMPLE_RATE_HZ))
    except OSError as exc:
        raise ResourceError(f"failed to write {path}: {exc}") from exc
    return len(pcm) - (len(pcm) % 2)


def _print_result(result: RoundTripResult) -> None:
    if result.input_transcript:
        print(f"You said: {result.input_transcript}")
    for text in result.texts:
        print(f"Text response: {text}")
    if result.output_transcript:
        print(f"Transcription: {result.output_transcript}")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Record one utterance and hear Gemini Live reply")
    p.add_argument("--from-file", default=None, help="Send an existing audio file instead of recording")
    p.add_argument("--input", default=DEFAULT_INPUT_FILE, help="Where to save the recording")
    p.add_argument("--output", default=DEFAULT_RESPONSE_FILE, help="Where to save the reply")
    p.add_argument("--no-play", action="store_true", help="Save the reply without playing it")
    p.add_argument("--log-level", default=None)
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = parse_args(argv)
    configure_logging(args.log_level)

    try:
        settings = load_settings()
        source = args.from_file
        if source is None:
            source = args.input
            print("Recording... press Ctrl+C to stop.")
            duration = record_until_interrupt(source)
            print(f"Saved {duration:.1f}s to {source}")

        pcm = file_to_pcm16_mono(source, target_sr=INPUT_SAMPLE_RATE_HZ)
        if not pcm:
            raise ResourceError(f"{source} contains no audio")

        live_client = build_live_client(settings)
        print("Waiting for Gemini...")
        result = asyncio.run(
            run_round_trip(
                pcm,
                live_client=live_client,
                turn_timeout_s=settings.cli.turn_timeout_s,
                response_timeout_s=settings.cli.response_timeout_s,
            )
        )
        _print_result(result)

        if not result.audio_fragments:
            print("No audio in the response.")
            return 0
        written = write_response(result, args.output)
        print(f"Saved {written} bytes of audio to {args.output}")
        if not args.no_play:
            play_wav(args.output)
        return 0
    except VoiceChatError as exc:
        logger.error("%s: %s", type(exc).__name__, exc)
        return 1
    except ValueError as exc:
        logger.error("configuration error: %s", exc)
        return 2


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
