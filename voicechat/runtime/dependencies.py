"""Runtime dependency construction (Gemini Live client + admission control)."""

from __future__ import annotations

import logging

from google import genai

from voicechat.state import RuntimeDeps
from voicechat.state.settings import AppSettings
from voicechat.live.connector import LiveClient
from voicechat.live.client import GeminiLiveClient
from voicechat.config.secrets import ENV_GEMINI_API_KEY
from voicechat.sessions.registry import SessionRegistry
from voicechat.live.config import build_server_config
from voicechat.sessions.assembler import ResponseAssembler
from voicechat.handlers.connections import ConnectionManager

from .settings import load_settings

logger = logging.getLogger(__name__)


def build_live_client(settings: AppSettings) -> GeminiLiveClient:
    if not settings.model.api_key:
        raise ValueError(f"{ENV_GEMINI_API_KEY} is not set; the live client cannot authenticate")
    client = genai.Client(api_key=settings.model.api_key)
    return GeminiLiveClient(client, settings.model.model_id)


def build_registry(settings: AppSettings, live_client: LiveClient) -> SessionRegistry:
    assembler = ResponseAssembler(turn_timeout_s=settings.model.turn_timeout_s)
    return SessionRegistry(
        live_client,
        live_config=build_server_config(settings.model),
        idle_timeout_s=settings.sessions.idle_timeout_s,
        sweep_interval_s=settings.sessions.sweep_interval_s,
        greeting_prompt=settings.model.greeting_prompt,
        greeting_delay_s=settings.model.greeting_delay_s,
        assembler=assembler,
    )


async def build_runtime_deps(
    settings: AppSettings | None = None,
    live_client: LiveClient | None = None,
) -> RuntimeDeps:
    settings = settings or load_settings()
    live_client = live_client or build_live_client(settings)

    registry = build_registry(settings, live_client)
    connections = ConnectionManager(max_connections=settings.limits.max_concurrent_connections)

    logger.info(
        "runtime: model=%s max_connections=%s idle_timeout_s=%s",
        settings.model.model_id,
        settings.limits.max_concurrent_connections,
        settings.sessions.idle_timeout_s,
    )
    return RuntimeDeps(connections=connections, registry=registry, settings=settings)


__all__ = ["RuntimeDeps", "build_live_client", "build_registry", "build_runtime_deps"]
