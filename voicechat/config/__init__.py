"""Configuration module exports (env names, defaults and protocol constants only)."""

from .audio import (
    AUDIO_CHANNELS,
    AUDIO_BIT_DEPTH,
    INPUT_SAMPLE_RATE_HZ,
    OUTPUT_SAMPLE_RATE_HZ,
    RESPONSE_AUDIO_MIME_TYPE,
)

__all__ = [
    "AUDIO_BIT_DEPTH",
    "AUDIO_CHANNELS",
    "INPUT_SAMPLE_RATE_HZ",
    "OUTPUT_SAMPLE_RATE_HZ",
    "RESPONSE_AUDIO_MIME_TYPE",
]
