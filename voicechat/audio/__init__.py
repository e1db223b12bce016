"""Audio container, codec and conversion helpers."""

from .wav import WavHeader, pcm16_to_wav, read_wav_header, build_wav_header
from .codec import join_fragments, decode_base64_audio, encode_base64_audio, fragments_to_wav_base64

__all__ = [
    "WavHeader",
    "build_wav_header",
    "decode_base64_audio",
    "encode_base64_audio",
    "fragments_to_wav_base64",
    "join_fragments",
    "pcm16_to_wav",
    "read_wav_header",
]
