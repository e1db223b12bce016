"""Gemini Live session client."""

from .handle import LiveHandle
from .connector import LiveClient
from .callbacks import LiveCallbacks
from .client import GeminiLiveClient
from .gemini_handle import GeminiLiveHandle
from .events import LiveEvent, ResponsePart, parse_server_message

__all__ = [
    "GeminiLiveClient",
    "GeminiLiveHandle",
    "LiveCallbacks",
    "LiveClient",
    "LiveEvent",
    "LiveHandle",
    "ResponsePart",
    "parse_server_message",
]
