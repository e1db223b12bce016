"""Live session configuration builders."""

from __future__ import annotations

from google.genai import types

from voicechat.state.settings import ModelSettings


def build_server_config(model: ModelSettings) -> types.LiveConnectConfig:
    config = types.LiveConnectConfig(response_modalities=[types.Modality.AUDIO])
    if model.system_instruction:
        config.system_instruction = types.Content(parts=[types.Part(text=model.system_instruction)])
    return config


def build_cli_config(system_instruction: str | None = None) -> types.LiveConnectConfig:
    # The CLI prints what it heard and what it answered alongside the audio.
    config = types.LiveConnectConfig(
        response_modalities=[types.Modality.AUDIO],
        input_audio_transcription=types.AudioTranscriptionConfig(),
        output_audio_transcription=types.AudioTranscriptionConfig(),
    )
    if system_instruction:
        config.system_instruction = types.Content(parts=[types.Part(text=system_instruction)])
    return config


__all__ = ["build_cli_config", "build_server_config"]
