"""Typed runtime state objects for dependency wiring."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from voicechat.state.settings import AppSettings
    from voicechat.sessions.registry import SessionRegistry
    from voicechat.handlers.connections import ConnectionManager


@dataclass(slots=True)
class RuntimeDeps:
    connections: ConnectionManager
    registry: SessionRegistry
    settings: AppSettings

    def start(self) -> None:
        self.registry.start()

    async def shutdown(self) -> None:
        try:
            await self.registry.stop()
        except Exception:
            logger.exception("runtime shutdown failed")


__all__ = ["RuntimeDeps"]
