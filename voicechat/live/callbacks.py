"""Callback bundle a live session reports through."""

from __future__ import annotations

from typing import Any
from dataclasses import field, dataclass
from collections.abc import Callable, Awaitable

from .events import LiveEvent


async def _noop(*_args: Any) -> None:
    return None


@dataclass(slots=True)
class LiveCallbacks:
    on_open: Callable[[], Awaitable[None]] = field(default=_noop)
    on_message: Callable[[LiveEvent], Awaitable[None]] = field(default=_noop)
    on_error: Callable[[Exception], Awaitable[None]] = field(default=_noop)
    on_close: Callable[[str], Awaitable[None]] = field(default=_noop)


__all__ = ["LiveCallbacks"]
