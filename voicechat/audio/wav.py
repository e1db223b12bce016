"""Minimal 44-byte PCM WAV container helpers."""

from __future__ import annotations

import struct
from dataclasses import dataclass

import numpy as np

from voicechat.config.audio import AUDIO_CHANNELS, AUDIO_BIT_DEPTH, OUTPUT_SAMPLE_RATE_HZ

WAV_HEADER_BYTES = 44
_PCM_FORMAT_CODE = 1
# RIFF size covers everything after the 8-byte RIFF preamble.
_RIFF_OVERHEAD = WAV_HEADER_BYTES - 8
_HEADER_STRUCT = struct.Struct("<4sI4s4sIHHIIHH4sI")


@dataclass(frozen=True, slots=True)
class WavHeader:
    sample_rate_hz: int
    channels: int
    bit_depth: int
    data_size: int
    riff_size: int


def build_wav_header(
    data_size: int,
    *,
    sample_rate_hz: int = OUTPUT_SAMPLE_RATE_HZ,
    channels: int = AUDIO_CHANNELS,
    bit_depth: int = AUDIO_BIT_DEPTH,
) -> bytes:
    if data_size < 0:
        raise ValueError("data_size must be non-negative")
    block_align = channels * (bit_depth // 8)
    byte_rate = sample_rate_hz * block_align
    return _HEADER_STRUCT.pack(
        b"RIFF",
        _RIFF_OVERHEAD + data_size,
        b"WAVE",
        b"fmt ",
        16,
        _PCM_FORMAT_CODE,
        channels,
        sample_rate_hz,
        byte_rate,
        block_align,
        bit_depth,
        b"data",
        data_size,
    )


def pcm16_to_wav(
    pcm: bytes,
    *,
    sample_rate_hz: int = OUTPUT_SAMPLE_RATE_HZ,
    channels: int = AUDIO_CHANNELS,
) -> bytes:
    """Wrap little-endian 16-bit PCM in a WAV header.

    A trailing odd byte cannot form a sample and is dropped, so the declared
    data size always equals twice the sample count.
    """
    samples = np.frombuffer(pcm[: len(pcm) - (len(pcm) % 2)], dtype="<i2")
    data = samples.tobytes()
    header = build_wav_header(len(data), sample_rate_hz=sample_rate_hz, channels=channels, bit_depth=16)
    return header + data


def read_wav_header(blob: bytes) -> WavHeader:
    if len(blob) < WAV_HEADER_BYTES:
        raise ValueError(f"WAV blob shorter than {WAV_HEADER_BYTES} bytes")
    (
        riff,
        riff_size,
        wave,
        fmt,
        _fmt_size,
        format_code,
        channels,
        sample_rate_hz,
        _byte_rate,
        _block_align,
        bit_depth,
        data_tag,
        data_size,
    ) = _HEADER_STRUCT.unpack_from(blob, 0)
    if riff != b"RIFF" or wave != b"WAVE" or fmt != b"fmt " or data_tag != b"data":
        raise ValueError("not a minimal RIFF/WAVE PCM header")
    if format_code != _PCM_FORMAT_CODE:
        raise ValueError(f"unsupported WAV format code {format_code}")
    return WavHeader(
        sample_rate_hz=sample_rate_hz,
        channels=channels,
        bit_depth=bit_depth,
        data_size=data_size,
        riff_size=riff_size,
    )


__all__ = ["WAV_HEADER_BYTES", "WavHeader", "build_wav_header", "pcm16_to_wav", "read_wav_header"]
