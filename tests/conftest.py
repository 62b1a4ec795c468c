"""Shared test fixtures for Stock Ticker tests."""

import uuid
from collections import deque
from dataclasses import dataclass

import pytest
import pytest_asyncio
from sqlalchemy import update
from sqlalchemy.ext.asyncio import create_async_engine

from src.core.game.dice import StockType, resolve_dice
from src.data.models import Base, Holding, Player, Stock
from src.data.session import build_session_factory, session_scope
from src.services import GameService

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class ScriptedDice:
    """Dice that return queued faces in order."""

    def __init__(self, *rolls):
        self.rolls = deque(rolls)

    def push(self, stock_die: int, action_die: int, amount_die: int) -> None:
        self.rolls.append((stock_die, action_die, amount_die))

    def roll(self):
        return resolve_dice(*self.rolls.popleft())


class RecordingNotifier:
    """Collects the room ids it was notified about."""

    def __init__(self):
        self.calls = []

    async def notify_room_state_changed(self, room_id):
        self.calls.append(room_id)


@dataclass
class StartedRoom:
    room_id: uuid.UUID
    invite_code: str
    alice: uuid.UUID
    bob: uuid.UUID


class Tweaks:
    """Direct writes that put a room into a state the dice would take long to reach."""

    def __init__(self, session_factory):
        self.session_factory = session_factory

    async def set_price(self, room_id, stock: StockType, price: int) -> None:
        async with session_scope(self.session_factory) as session:
            await session.execute(
                update(Stock)
                .where(Stock.room_id == room_id, Stock.stock_type == stock.value)
                .values(price=price)
            )

    async def set_shares(self, player_id, stock: StockType, shares: int) -> None:
        async with session_scope(self.session_factory) as session:
            await session.execute(
                update(Holding)
                .where(Holding.player_id == player_id, Holding.stock_type == stock.value)
                .values(shares=shares)
            )

    async def set_cash(self, player_id, cash: int) -> None:
        async with session_scope(self.session_factory) as session:
            await session.execute(update(Player).where(Player.id == player_id).values(cash=cash))


@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return build_session_factory(db_engine)


@pytest.fixture
def dice():
    return ScriptedDice()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def service(session_factory, notifier, dice):
    return GameService(session_factory, notifier=notifier, dice=dice)


@pytest.fixture
def tweaks(session_factory):
    return Tweaks(session_factory)


@pytest_asyncio.fixture
async def started_room(service):
    """Two-player room, started, Alice to roll."""
    created = await service.create_room("Table 1")
    alice = await service.join_room(created.invite_code, "Alice")
    bob = await service.join_room(created.invite_code, "Bob")
    await service.start_game(created.room_id)
    return StartedRoom(
        room_id=created.room_id,
        invite_code=created.invite_code,
        alice=alice.player_id,
        bob=bob.player_id,
    )


@pytest_asyncio.fixture
async def trading_room(started_room, dice, service):
    """Started room after Alice rolled bonds up 5 (gold untouched at 100)."""
    dice.push(3, 3, 1)
    await service.roll_dice(started_room.room_id, started_room.alice)
    return started_room
