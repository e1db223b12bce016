"""WebSocket protocol configuration and constants."""

from __future__ import annotations

WS_ENDPOINT_PATH = "/ws"

# Envelope keys
WS_KEY_TYPE = "type"
WS_KEY_CONNECTION_ID = "connection_id"
WS_KEY_PAYLOAD = "payload"

WS_UNKNOWN_CONNECTION_ID = "unknown"

# Client -> server events
EVENT_START_CONVERSATION = "start-conversation"
EVENT_AUDIO_STREAM = "audio-stream"
EVENT_SEND_TEXT = "send-text"
EVENT_STOP_CONVERSATION = "stop-conversation"
EVENT_PING = "ping"

# Server -> client events
EVENT_CONVERSATION_STARTED = "conversation-started"
EVENT_SETUP_COMPLETE = "setup-complete"
EVENT_AI_RESPONSE = "ai-response"
EVENT_AI_AUDIO_RESPONSE = "ai-audio-response"
EVENT_CONVERSATION_ENDED = "conversation-ended"
EVENT_ERROR = "error"
EVENT_PONG = "pong"

# Close codes
WS_CLOSE_UNAUTHORIZED_CODE = 4001
WS_CLOSE_BUSY_CODE = 4002

# Errors (payload.code values)
WS_ERROR_AUTH_FAILED = "authentication_failed"
WS_ERROR_SERVER_AT_CAPACITY = "server_at_capacity"
WS_ERROR_INVALID_MESSAGE = "invalid_message"
WS_ERROR_INVALID_PAYLOAD = "invalid_payload"
WS_ERROR_RATE_LIMITED = "rate_limited"
WS_ERROR_ALREADY_ACTIVE = "conversation_already_active"
WS_ERROR_TRANSPORT = "transport_error"
WS_ERROR_TIMEOUT = "response_timeout"
WS_ERROR_INTERNAL = "internal_error"

__all__ = [
    "WS_ENDPOINT_PATH",
    "WS_KEY_TYPE",
    "WS_KEY_CONNECTION_ID",
    "WS_KEY_PAYLOAD",
    "WS_UNKNOWN_CONNECTION_ID",
    "EVENT_START_CONVERSATION",
    "EVENT_AUDIO_STREAM",
    "EVENT_SEND_TEXT",
    "EVENT_STOP_CONVERSATION",
    "EVENT_PING",
    "EVENT_CONVERSATION_STARTED",
    "EVENT_SETUP_COMPLETE",
    "EVENT_AI_RESPONSE",
    "EVENT_AI_AUDIO_RESPONSE",
    "EVENT_CONVERSATION_ENDED",
    "EVENT_ERROR",
    "EVENT_PONG",
    "WS_CLOSE_UNAUTHORIZED_CODE",
    "WS_CLOSE_BUSY_CODE",
    "WS_ERROR_AUTH_FAILED",
    "WS_ERROR_SERVER_AT_CAPACITY",
    "WS_ERROR_INVALID_MESSAGE",
    "WS_ERROR_INVALID_PAYLOAD",
    "WS_ERROR_RATE_LIMITED",
    "WS_ERROR_ALREADY_ACTIVE",
    "WS_ERROR_TRANSPORT",
    "WS_ERROR_TIMEOUT",
    "WS_ERROR_INTERNAL",
]
