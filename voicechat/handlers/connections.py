"""Per-process admission cap for /ws connections."""

from __future__ import annotations

import asyncio


class ConnectionManager:
    """Tracks admitted connection ids; each one owns at most one conversation.

    A non-positive `max_connections` disables the cap.
    """

    def __init__(self, *, max_connections: int) -> None:
        self._max = max(0, int(max_connections))
        self._lock = asyncio.Lock()
        self._admitted: set[str] = set()

    async def admit(self, connection_id: str) -> bool:
        """Reserve a slot before the socket is accepted; False when at capacity."""
        async with self._lock:
            if connection_id in self._admitted:
                return True
            if self._max and len(self._admitted) >= self._max:
                return False
            self._admitted.add(connection_id)
            return True

    async def release(self, connection_id: str) -> None:
        async with self._lock:
            self._admitted.discard(connection_id)

    def get_connection_count(self) -> int:
        return len(self._admitted)


__all__ = ["ConnectionManager"]
