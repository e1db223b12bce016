"""Normalized inbound events from a Gemini Live session.

Only the shapes the relay and the CLI depend on are carried; everything else
the SDK reports (tool calls, usage metadata, go-away notices) is ignored.
"""

from __future__ import annotations

from typing import Any
from dataclasses import dataclass

from voicechat.audio.codec import encode_base64_audio


@dataclass(frozen=True, slots=True)
class ResponsePart:
    text: str | None = None
    mime_type: str | None = None
    # Inline audio is carried base64-encoded so fragments can be buffered as strings.
    data_b64: str | None = None


@dataclass(frozen=True, slots=True)
class LiveEvent:
    setup_complete: bool = False
    # None when the message had no model turn; an empty tuple is still a model turn.
    parts: tuple[ResponsePart, ...] | None = None
    turn_complete: bool = False
    generation_complete: bool = False
    input_transcription: str | None = None
    output_transcription: str | None = None

    @property
    def has_model_turn(self) -> bool:
        return self.parts is not None

    @property
    def is_empty(self) -> bool:
        return not (
            self.setup_complete
            or self.parts is not None
            or self.turn_complete
            or self.generation_complete
            or self.input_transcription
            or self.output_transcription
        )


SETUP_COMPLETE_EVENT = LiveEvent(setup_complete=True)


def _transcription_text(value: Any) -> str | None:
    if value is None:
        return None
    text = getattr(value, "text", None)
    return text if isinstance(text, str) and text else None


def _parse_part(part: Any) -> ResponsePart:
    text = getattr(part, "text", None)
    inline = getattr(part, "inline_data", None)
    mime_type: str | None = None
    data_b64: str | None = None
    if inline is not None:
        mime_type = getattr(inline, "mime_type", None)
        data = getattr(inline, "data", None)
        if isinstance(data, (bytes, bytearray)):
            data_b64 = encode_base64_audio(bytes(data))
        elif isinstance(data, str):
            data_b64 = data
    return ResponsePart(
        text=text if isinstance(text, str) and text else None,
        mime_type=mime_type,
        data_b64=data_b64,
    )


def parse_server_message(message: Any) -> LiveEvent:
    """Map a `google.genai.types.LiveServerMessage` onto a `LiveEvent`."""
    setup = getattr(message, "setup_complete", None) is not None
    content = getattr(message, "server_content", None)
    if content is None:
        return LiveEvent(setup_complete=setup)

    parts: tuple[ResponsePart, ...] | None = None
    model_turn = getattr(content, "model_turn", None)
    if model_turn is not None:
        parts = tuple(_parse_part(p) for p in (getattr(model_turn, "parts", None) or []))

    return LiveEvent(
        setup_complete=setup,
        parts=parts,
        turn_complete=bool(getattr(content, "turn_complete", False)),
        generation_complete=bool(getattr(content, "generation_complete", False)),
        input_transcription=_transcription_text(getattr(content, "input_transcription", None)),
        output_transcription=_transcription_text(getattr(content, "output_transcription", None)),
    )


__all__ = ["SETUP_COMPLETE_EVENT", "LiveEvent", "ResponsePart", "parse_server_message"]
