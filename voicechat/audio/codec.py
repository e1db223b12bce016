"""Base64 fragment codec for streamed PCM audio."""

from __future__ import annotations

import re
import base64
import binascii
from collections.abc import Iterable

from voicechat.errors import PayloadValidationError

from .wav import pcm16_to_wav

_PADDING_RUN = re.compile(r"=+")
_WHITESPACE = re.compile(r"\s+")


def _decode_segment(segment: str) -> bytes:
    # A lone leftover character carries fewer than 8 bits and decodes to nothing.
    if len(segment) % 4 == 1:
        segment = segment[:-1]
    if not segment:
        return b""
    padded = segment + "=" * (-len(segment) % 4)
    try:
        return base64.b64decode(padded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise PayloadValidationError(f"invalid base64 audio: {exc}") from exc


def decode_base64_audio(data: str) -> bytes:
    """Decode one base64 string leniently.

    Padding inside the string (left over from concatenating independently
    encoded fragments) splits it into segments that are decoded on their own.
    """
    cleaned = _WHITESPACE.sub("", data)
    if not cleaned:
        return b""
    return b"".join(_decode_segment(part) for part in _PADDING_RUN.split(cleaned))


def encode_base64_audio(pcm: bytes) -> str:
    return base64.b64encode(pcm).decode("ascii")


def join_fragments(fragments: Iterable[str]) -> bytes:
    """Concatenate base64 fragments in order and decode the result."""
    return decode_base64_audio("".join(fragments))


def fragments_to_wav_base64(fragments: Iterable[str], *, sample_rate_hz: int) -> str:
    wav = pcm16_to_wav(join_fragments(fragments), sample_rate_hz=sample_rate_hz)
    return encode_base64_audio(wav)


__all__ = ["decode_base64_audio", "encode_base64_audio", "fragments_to_wav_base64", "join_fragments"]
