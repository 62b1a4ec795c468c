"""
In-process fan-out of room updates to WebSocket subscribers.

Each connected client owns a bounded queue. Clients that cannot keep
up are dropped instead of slowing down the game.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Any, Awaitable, Callable, Dict, Optional, Set

logger = logging.getLogger(__name__)

SnapshotProvider = Callable[[uuid.UUID], Awaitable[Dict[str, Any]]]


class RoomHub:
    """Room-scoped broadcaster; also the game service's notifier."""

    def __init__(self, max_queue: int = 100):
        self.max_queue = max_queue
        self._clients: Dict[uuid.UUID, Set[asyncio.Queue]] = {}
        self._provider: Optional[SnapshotProvider] = None

    def bind(self, provider: SnapshotProvider) -> None:
        """Set the coroutine used to build a serialized snapshot for a room."""
        self._provider = provider

    # Subscription management for WS
    async def subscribe(self, room_id: uuid.UUID) -> asyncio.Queue:
        q: asyncio.Queue = asyncio.Queue(maxsize=self.max_queue)
        self._clients.setdefault(room_id, set()).add(q)
        return q

    async def unsubscribe(self, room_id: uuid.UUID, q: asyncio.Queue) -> None:
        clients = self._clients.get(room_id)
        if clients is None:
            return
        clients.discard(q)
        if not clients:
            del self._clients[room_id]

    def subscriber_count(self, room_id: uuid.UUID) -> int:
        return len(self._clients.get(room_id, ()))

    async def publish(self, room_id: uuid.UUID, payload: Dict[str, Any]) -> None:
        clients = self._clients.get(room_id)
        if not clients:
            return
        for q in list(clients):
            try:
                q.put_nowait(payload)
            except asyncio.QueueFull:
                # Drop client if it cannot keep up
                clients.discard(q)
                logger.warning(f"Dropped slow subscriber from room {room_id}")

    async def notify_room_state_changed(self, room_id: uuid.UUID) -> None:
        if not self._clients.get(room_id) or self._provider is None:
            return
        snapshot = await self._provider(room_id)
        await self.publish(
            room_id,
            {"type": "snapshot", "room_id": str(room_id), "snapshot": snapshot},
        )
