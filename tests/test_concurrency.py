"""
Tests for serialized access to a room under concurrent requests.
"""

import asyncio
import uuid

import pytest

from src.core.exceptions import GameNotFoundError, InvalidTransactionError
from src.core.game.dice import StockType
from src.services import RoomLocks


@pytest.mark.asyncio
async def test_concurrent_buys_never_overspend(service, trading_room):
    """Four 2000-share buys at $1.00 against $5000.00: exactly two fit."""
    results = await asyncio.gather(
        *[
            service.buy_stock(trading_room.room_id, trading_room.alice, "gold", 2000)
            for _ in range(4)
        ],
        return_exceptions=True,
    )

    accepted = [r for r in results if not isinstance(r, Exception)]
    rejected = [r for r in results if isinstance(r, Exception)]
    assert len(accepted) == 2
    assert len(rejected) == 2
    assert all(isinstance(r, InvalidTransactionError) for r in rejected)
    assert all(r.reason == "INSUFFICIENT_FUNDS" for r in rejected)

    alice = (await service.get_game_state(trading_room.room_id)).player(trading_room.alice)
    assert alice.cash == 100000
    assert alice.holdings[StockType.GOLD] == 4000


@pytest.mark.asyncio
async def test_concurrent_sells_never_go_negative(service, tweaks, trading_room):
    await tweaks.set_shares(trading_room.bob, StockType.OIL, 2000)

    results = await asyncio.gather(
        *[
            service.sell_stock(trading_room.room_id, trading_room.bob, "oil", 1000)
            for _ in range(3)
        ],
        return_exceptions=True,
    )

    assert sum(not isinstance(r, Exception) for r in results) == 2

    bob = (await service.get_game_state(trading_room.room_id)).player(trading_room.bob)
    assert bob.holdings[StockType.OIL] == 0
    assert bob.cash == 700000


@pytest.mark.asyncio
async def test_transaction_sequence_has_no_gaps(service, trading_room):
    await asyncio.gather(
        *[
            service.buy_stock(trading_room.room_id, player, "bonds", 500)
            for player in (trading_room.alice, trading_room.bob) * 3
        ]
    )

    history = await service.list_transactions(trading_room.room_id)
    assert sorted(t.sequence_number for t in history) == list(range(6))


@pytest.mark.asyncio
async def test_snapshot_never_sees_half_a_roll(service, dice, tweaks, started_room):
    await tweaks.set_price(started_room.room_id, StockType.GOLD, 190)
    await tweaks.set_shares(started_room.alice, StockType.GOLD, 1000)
    dice.push(1, 3, 5)

    _, snapshot = await asyncio.gather(
        service.roll_dice(started_room.room_id, started_room.alice),
        service.get_game_state(started_room.room_id),
    )

    gold_price = snapshot.prices[StockType.GOLD]
    gold_shares = snapshot.player(started_room.alice).holdings[StockType.GOLD]
    assert (gold_price, gold_shares) in {(190, 1000), (100, 2000)}


@pytest.mark.asyncio
async def test_room_lock_serializes_one_room_only():
    locks = RoomLocks()
    a, b = uuid.uuid4(), uuid.uuid4()
    order = []

    async def worker(room_id, label, release):
        async with locks.hold(room_id):
            order.append(f"{label} in")
            await release.wait()
            order.append(f"{label} out")

    first_done, second_done = asyncio.Event(), asyncio.Event()
    first = asyncio.create_task(worker(a, "a1", first_done))
    second = asyncio.create_task(worker(a, "a2", second_done))
    await asyncio.sleep(0)

    async with locks.hold(b):
        order.append("b")

    assert order == ["a1 in", "b"]
    assert len(locks) == 1

    first_done.set()
    second_done.set()
    await asyncio.gather(first, second)

    assert order == ["a1 in", "b", "a1 out", "a2 in", "a2 out"]
    assert len(locks) == 0


@pytest.mark.asyncio
async def test_room_lock_released_after_error():
    locks = RoomLocks()
    room_id = uuid.uuid4()

    with pytest.raises(RuntimeError):
        async with locks.hold(room_id):
            assert room_id in locks
            raise RuntimeError("boom")

    assert room_id not in locks
    assert len(locks) == 0


@pytest.mark.asyncio
async def test_unknown_rooms_leave_no_locks(service):
    for _ in range(50):
        with pytest.raises(GameNotFoundError):
            await service.get_game_state(uuid.uuid4())
        with pytest.raises(GameNotFoundError):
            await service.end_turn(uuid.uuid4())

    assert len(service.locks) == 0


@pytest.mark.asyncio
async def test_finished_operations_leave_no_locks(service, trading_room):
    await service.buy_stock(trading_room.room_id, trading_room.alice, "gold", 500)
    await service.end_turn(trading_room.room_id)
    await service.get_game_state(trading_room.room_id)

    assert len(service.locks) == 0
