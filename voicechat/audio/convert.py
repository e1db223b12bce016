"""Load arbitrary audio files and convert them to transport PCM."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import soxr
import soundfile as sf

from voicechat.errors import ResourceError
from voicechat.config.audio import INPUT_SAMPLE_RATE_HZ


def to_mono(x: np.ndarray) -> np.ndarray:
    if getattr(x, "ndim", 1) > 1:
        return x.mean(axis=1)
    return x


def resample(x: np.ndarray, sr: int, target_sr: int = INPUT_SAMPLE_RATE_HZ) -> np.ndarray:
    """Resample mono float audio to `target_sr`."""
    if sr == target_sr or x.size == 0:
        return x.astype(np.float32, copy=False)
    # soxr expects float32 for best results.
    y = soxr.resample(x.astype(np.float32, copy=False), sr, target_sr)
    return y.astype(np.float32, copy=False)


def float_to_pcm16(x: np.ndarray) -> bytes:
    x = np.clip(x, -1.0, 1.0)
    return (x * 32767.0).astype("<i2").tobytes()


def file_to_pcm16_mono(path: str | Path, *, target_sr: int = INPUT_SAMPLE_RATE_HZ) -> bytes:
    """Load an audio file and return PCM16 mono bytes at `target_sr`."""
    try:
        x, sr = sf.read(str(path), dtype="float32", always_2d=False)
    except Exception as exc:
        raise ResourceError(f"failed to read audio file {path}: {exc}") from exc
    return float_to_pcm16(resample(to_mono(x), int(sr), target_sr))


__all__ = ["file_to_pcm16_mono", "float_to_pcm16", "resample", "to_mono"]
