"""
Per-room locks.

Operations on the same room run one at a time inside this process;
operations on different rooms never wait on each other. A room's lock
lives only while some task holds it or waits for it.
"""

from __future__ import annotations

import asyncio
import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict


class RoomLocks:
    """``asyncio.Lock`` per room id, dropped once nobody uses it."""

    def __init__(self) -> None:
        self._locks: Dict[uuid.UUID, asyncio.Lock] = {}
        self._users: Dict[uuid.UUID, int] = {}

    @asynccontextmanager
    async def hold(self, room_id: uuid.UUID) -> AsyncIterator[None]:
        lock = self._locks.setdefault(room_id, asyncio.Lock())
        self._users[room_id] = self._users.get(room_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[room_id] -= 1
            if self._users[room_id] == 0:
                del self._users[room_id]
                del self._locks[room_id]

    def __contains__(self, room_id: uuid.UUID) -> bool:
        return room_id in self._locks

    def __len__(self) -> int:
        return len(self._locks)
