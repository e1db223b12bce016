"""Audio format constants shared by the CLI and the relay server."""

from __future__ import annotations

# Browser and CLI capture is sent upstream as PCM16 mono @ 16kHz.
INPUT_SAMPLE_RATE_HZ: int = 16000

# Gemini Live synthesizes PCM16 mono @ 24kHz.
OUTPUT_SAMPLE_RATE_HZ: int = 24000

AUDIO_CHANNELS: int = 1
AUDIO_BIT_DEPTH: int = 16

PCM_MIME_PREFIX = "audio/pcm"


def pcm_mime_type(sample_rate_hz: int) -> str:
    return f"{PCM_MIME_PREFIX};rate={int(sample_rate_hz)}"


# Only inline audio carrying this tag is collected into a response artifact.
RESPONSE_AUDIO_MIME_TYPE: str = pcm_mime_type(OUTPUT_SAMPLE_RATE_HZ)

WAV_FORMAT = "wav"

__all__ = [
    "AUDIO_BIT_DEPTH",
    "AUDIO_CHANNELS",
    "INPUT_SAMPLE_RATE_HZ",
    "OUTPUT_SAMPLE_RATE_HZ",
    "PCM_MIME_PREFIX",
    "RESPONSE_AUDIO_MIME_TYPE",
    "WAV_FORMAT",
    "pcm_mime_type",
]
