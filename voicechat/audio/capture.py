"""Microphone capture into a WAV file."""

from __future__ import annotations

import queue
import logging
from pathlib import Path
from collections.abc import Callable

import numpy as np
import soundfile as sf

try:
    import sounddevice as sd  # Needs PortAudio; only required for live capture
except Exception:  # pragma: no cover
    sd = None

from voicechat.errors import ResourceError
from voicechat.config.audio import AUDIO_CHANNELS, INPUT_SAMPLE_RATE_HZ

logger = logging.getLogger(__name__)

_BLOCKSIZE = 1024
_QUEUE_POLL_S = 0.1


def _require_sounddevice():
    if sd is None:
        raise ResourceError("sounddevice (PortAudio) is not available; use --from-file instead")
    return sd


def record_until_interrupt(
    path: str | Path,
    *,
    sample_rate_hz: int = INPUT_SAMPLE_RATE_HZ,
    channels: int = AUDIO_CHANNELS,
    on_start: Callable[[], None] | None = None,
) -> float:
    """Record from the default input device until Ctrl+C.

    Writes a 16-bit PCM WAV to `path` and returns the captured duration in seconds.
    """
    device = _require_sounddevice()
    chunks: queue.Queue[np.ndarray] = queue.Queue()

    def _callback(indata: np.ndarray, _frames: int, _time_info, status) -> None:
        if status:
            logger.warning("audio input status: %s", status)
        # indata buffer is reused by PortAudio
        chunks.put(indata.copy())

    frames = 0
    try:
        with (
            sf.SoundFile(
                str(path),
                mode="w",
                samplerate=sample_rate_hz,
                channels=channels,
                subtype="PCM_16",
            ) as out,
            device.InputStream(
                samplerate=sample_rate_hz,
                channels=channels,
                dtype="int16",
                blocksize=_BLOCKSIZE,
                callback=_callback,
            ),
        ):
            if on_start is not None:
                on_start()
            try:
                while True:
                    try:
                        block = chunks.get(timeout=_QUEUE_POLL_S)
                    except queue.Empty:
                        continue
                    out.write(block)
                    frames += len(block)
            except KeyboardInterrupt:
                while not chunks.empty():
                    block = chunks.get_nowait()
                    out.write(block)
                    frames += len(block)
    except ResourceError:
        raise
    except Exception as exc:
        raise ResourceError(f"audio capture failed: {exc}") from exc

    return frames / float(sample_rate_hz)


__all__ = ["record_until_interrupt"]
