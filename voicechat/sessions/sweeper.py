"""Background idle sweep for the session registry."""

from __future__ import annotations

import asyncio
import logging
import contextlib
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .registry import SessionRegistry

logger = logging.getLogger(__name__)


class IdleSweeper:
    def __init__(self, registry: SessionRegistry, *, interval_s: float) -> None:
        self._registry = registry
        self._interval_s = float(interval_s) if interval_s > 0 else 60.0
        self._stop_event = asyncio.Event()
        self._task: asyncio.Task | None = None

    def start(self) -> asyncio.Task:
        if self._task is None:
            self._stop_event.clear()
            self._task = asyncio.create_task(self._sweep_loop())
        return self._task

    async def stop(self) -> None:
        self._stop_event.set()
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(Exception, asyncio.CancelledError):
            await self._task
        self._task = None

    async def _sweep_loop(self) -> None:
        try:
            while not self._stop_event.is_set():
                await asyncio.sleep(self._interval_s)
                if self._stop_event.is_set():
                    break
                try:
                    closed = await self._registry.sweep()
                except Exception:
                    logger.exception("idle sweep failed")
                    continue
                if closed:
                    logger.info("idle sweep closed %s conversation(s)", len(closed))
        except asyncio.CancelledError:
            return


__all__ = ["IdleSweeper"]
