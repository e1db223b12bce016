"""Local playback of response audio."""

from __future__ import annotations

from pathlib import Path

import soundfile as sf

try:
    import sounddevice as sd  # Needs PortAudio; only required for playback
except Exception:  # pragma: no cover
    sd = None

from voicechat.errors import ResourceError


def play_wav(path: str | Path) -> None:
    """Play a WAV file on the default output device and block until done."""
    if sd is None:
        raise ResourceError("sounddevice (PortAudio) is not available; cannot play audio")
    try:
        data, sr = sf.read(str(path), dtype="int16", always_2d=False)
        sd.play(data, int(sr))
        sd.wait()
    except Exception as exc:
        raise ResourceError(f"audio playback failed: {exc}") from exc


__all__ = ["play_wav"]
