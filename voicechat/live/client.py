"""Factory for Gemini Live sessions.

`GeminiLiveClient.connect` opens one `client.aio.live.connect` session and
returns a started `GeminiLiveHandle`.
"""

from __future__ import annotations

import logging
import contextlib
from typing import Any

from voicechat.errors import TransportError

from .callbacks import LiveCallbacks
from .gemini_handle import GeminiLiveHandle

logger = logging.getLogger(__name__)


class GeminiLiveClient:
    """Factory for Gemini Live sessions bound to one model id."""

    def __init__(self, client: Any, model: str) -> None:
        self._client = client
        self._model = model

    async def connect(self, config: Any, callbacks: LiveCallbacks) -> GeminiLiveHandle:
        stack = contextlib.AsyncExitStack()
        try:
            session = await stack.enter_async_context(
                self._client.aio.live.connect(model=self._model, config=config),
            )
        except Exception as exc:
            with contextlib.suppress(Exception):
                await stack.aclose()
            raise TransportError(f"failed to open live session: {exc}") from exc

        handle = GeminiLiveHandle(session, stack, callbacks)
        handle.start()
        logger.info("live session opened model=%s", self._model)
        return handle


__all__ = ["GeminiLiveClient"]
