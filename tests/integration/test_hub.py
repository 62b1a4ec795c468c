"""
Tests for the room broadcast hub.
"""

import uuid

import pytest

from server.hub import RoomHub


@pytest.mark.asyncio
async def test_notify_pushes_snapshot_to_room_subscribers():
    hub = RoomHub()
    room_a, room_b = uuid.uuid4(), uuid.uuid4()

    async def provider(room_id):
        return {"room_id": str(room_id), "phase": "rolling"}

    hub.bind(provider)
    qa = await hub.subscribe(room_a)
    qb = await hub.subscribe(room_b)

    await hub.notify_room_state_changed(room_a)

    msg = qa.get_nowait()
    assert msg["type"] == "snapshot"
    assert msg["room_id"] == str(room_a)
    assert msg["snapshot"]["phase"] == "rolling"
    assert qb.empty()


@pytest.mark.asyncio
async def test_notify_without_subscribers_skips_provider():
    hub = RoomHub()
    calls = []

    async def provider(room_id):
        calls.append(room_id)
        return {}

    hub.bind(provider)
    await hub.notify_room_state_changed(uuid.uuid4())

    assert calls == []


@pytest.mark.asyncio
async def test_slow_subscriber_is_dropped():
    hub = RoomHub(max_queue=1)
    room = uuid.uuid4()
    q = await hub.subscribe(room)

    await hub.publish(room, {"type": "trade"})
    await hub.publish(room, {"type": "trade"})

    assert hub.subscriber_count(room) == 0
    assert q.qsize() == 1


@pytest.mark.asyncio
async def test_unsubscribe():
    hub = RoomHub()
    room = uuid.uuid4()
    q = await hub.subscribe(room)

    await hub.unsubscribe(room, q)
    await hub.publish(room, {"type": "turn_ended"})

    assert hub.subscriber_count(room) == 0
    assert q.empty()
