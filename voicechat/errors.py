"""Shared error types for the voice chat relay and CLI."""

from __future__ import annotations

from typing import Any
from dataclasses import dataclass

from voicechat.config.websocket import (
    WS_ERROR_TIMEOUT,
    WS_ERROR_INTERNAL,
    WS_ERROR_TRANSPORT,
    WS_ERROR_RATE_LIMITED,
    WS_ERROR_ALREADY_ACTIVE,
    WS_ERROR_INVALID_PAYLOAD,
)


class VoiceChatError(Exception):
    """Base class for errors surfaced to a connection or the CLI."""


class TransportError(VoiceChatError):
    """The hosted live endpoint failed to connect, send or receive."""


class PayloadValidationError(VoiceChatError):
    """An inbound payload could not be decoded; the message is dropped."""


class ResponseTimeoutError(VoiceChatError, TimeoutError):
    """No terminal signal arrived within the configured bound."""


class ResourceError(VoiceChatError):
    """A local file or audio device could not be used."""


class SessionAlreadyActiveError(VoiceChatError):
    """A conversation is already open for this connection id."""

    def __init__(self, connection_id: str) -> None:
        super().__init__(f"conversation already active for {connection_id}")
        self.connection_id = connection_id


@dataclass(frozen=True, slots=True)
class RateLimitError(Exception):
    """Raised when a sliding-window rate limiter is saturated."""

    retry_in: float
    limit: int
    window_seconds: float


_ERROR_CODES: tuple[tuple[type[BaseException], str], ...] = (
    (SessionAlreadyActiveError, WS_ERROR_ALREADY_ACTIVE),
    (PayloadValidationError, WS_ERROR_INVALID_PAYLOAD),
    (ResponseTimeoutError, WS_ERROR_TIMEOUT),
    (TransportError, WS_ERROR_TRANSPORT),
    (RateLimitError, WS_ERROR_RATE_LIMITED),
)


def error_code_for(exc: BaseException) -> str:
    """Map an exception to the `payload.code` of an outbound `error` event."""
    for exc_type, code in _ERROR_CODES:
        if isinstance(exc, exc_type):
            return code
    return WS_ERROR_INTERNAL


def error_payload(code: str, message: str, *, details: dict[str, Any] | None = None) -> dict[str, Any]:
    return {"code": code, "message": message, "details": dict(details or {})}


__all__ = [
    "PayloadValidationError",
    "RateLimitError",
    "ResourceError",
    "ResponseTimeoutError",
    "SessionAlreadyActiveError",
    "TransportError",
    "VoiceChatError",
    "error_code_for",
    "error_payload",
]
