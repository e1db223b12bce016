"""Interface of a factory for live sessions."""

from __future__ import annotations

from typing import Any, Protocol

from .handle import LiveHandle
from .callbacks import LiveCallbacks


class LiveClient(Protocol):
    async def connect(self, config: Any, callbacks: LiveCallbacks) -> LiveHandle: ...


__all__ = ["LiveClient"]
