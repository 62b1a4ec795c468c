"""
Tests for buying and selling stock through the game service.
"""

import uuid

import pytest

from src.core.exceptions import (
    ErrorKind,
    InvalidTransactionError,
    PlayerNotFoundError,
    UnauthorizedError,
    ValidationError,
)
from src.core.game.dice import StockType


@pytest.mark.asyncio
async def test_buy_debits_cash_and_credits_shares(service, trading_room):
    receipt = await service.buy_stock(trading_room.room_id, trading_room.alice, "gold", 1000)

    assert receipt.stock == StockType.GOLD
    assert receipt.action == "buy"
    assert receipt.price_per_share == 100
    assert receipt.total_amount == 100000
    assert receipt.cash_after == 400000
    assert receipt.shares_after == 1000

    alice = (await service.get_game_state(trading_room.room_id)).player(trading_room.alice)
    assert alice.cash == 400000
    assert alice.holdings[StockType.GOLD] == 1000
    assert alice.net_worth == 500000


@pytest.mark.asyncio
async def test_buy_uses_current_price(service, tweaks, trading_room):
    await tweaks.set_price(trading_room.room_id, StockType.OIL, 135)

    receipt = await service.buy_stock(trading_room.room_id, trading_room.alice, StockType.OIL, 2000)

    assert receipt.total_amount == 270000
    assert receipt.cash_after == 230000


@pytest.mark.asyncio
async def test_sell_credits_cash(service, tweaks, trading_room):
    await tweaks.set_shares(trading_room.alice, StockType.GRAIN, 2000)
    await tweaks.set_price(trading_room.room_id, StockType.GRAIN, 120)

    receipt = await service.sell_stock(trading_room.room_id, trading_room.alice, "grain", 500)

    assert receipt.action == "sell"
    assert receipt.total_amount == 60000
    assert receipt.cash_after == 560000
    assert receipt.shares_after == 1500


@pytest.mark.asyncio
async def test_round_trip_at_same_price(service, trading_room):
    await service.buy_stock(trading_room.room_id, trading_room.alice, "silver", 2000)
    await service.sell_stock(trading_room.room_id, trading_room.alice, "silver", 2000)

    alice = (await service.get_game_state(trading_room.room_id)).player(trading_room.alice)
    assert alice.cash == 500000
    assert alice.holdings[StockType.SILVER] == 0

    history = await service.list_transactions(trading_room.room_id)
    assert [t.action for t in history] == ["sell", "buy"]


@pytest.mark.asyncio
async def test_invalid_lot(service, trading_room):
    with pytest.raises(InvalidTransactionError) as exc:
        await service.buy_stock(trading_room.room_id, trading_room.alice, "gold", 700)

    err = exc.value
    assert err.code == "INVALID_TRANSACTION"
    assert err.reason == "INVALID_LOT"
    assert err.kind == ErrorKind.VALIDATION
    assert err.message == "Invalid share amount. Must be one of: 500, 1000, 2000, 5000"


@pytest.mark.asyncio
async def test_insufficient_funds_changes_nothing(service, tweaks, trading_room):
    await tweaks.set_cash(trading_room.alice, 40000)

    with pytest.raises(InvalidTransactionError) as exc:
        await service.buy_stock(trading_room.room_id, trading_room.alice, "gold", 500)

    assert exc.value.kind == ErrorKind.INSUFFICIENT_FUNDS
    assert exc.value.message == "Insufficient funds. Need $500.00, have $400.00"

    alice = (await service.get_game_state(trading_room.room_id)).player(trading_room.alice)
    assert alice.cash == 40000
    assert alice.holdings[StockType.GOLD] == 0
    assert await service.list_transactions(trading_room.room_id) == []


@pytest.mark.asyncio
async def test_cannot_sell_unowned_shares(service, tweaks, trading_room):
    await tweaks.set_shares(trading_room.alice, StockType.BONDS, 500)

    with pytest.raises(InvalidTransactionError) as exc:
        await service.sell_stock(trading_room.room_id, trading_room.alice, "bonds", 1000)

    assert exc.value.kind == ErrorKind.INSUFFICIENT_SHARES
    assert exc.value.reason == "INSUFFICIENT_SHARES"

    alice = (await service.get_game_state(trading_room.room_id)).player(trading_room.alice)
    assert alice.holdings[StockType.BONDS] == 500


@pytest.mark.asyncio
async def test_any_seated_player_may_trade(service, trading_room):
    receipt = await service.buy_stock(trading_room.room_id, trading_room.bob, "oil", 500)
    assert receipt.player_id == trading_room.bob


@pytest.mark.asyncio
async def test_stock_type_is_case_insensitive(service, trading_room):
    receipt = await service.buy_stock(trading_room.room_id, trading_room.alice, "Industrials", 500)
    assert receipt.stock == StockType.INDUSTRIALS


@pytest.mark.asyncio
async def test_unknown_stock(service, trading_room):
    with pytest.raises(ValidationError) as exc:
        await service.buy_stock(trading_room.room_id, trading_room.alice, "copper", 500)
    assert exc.value.code == "INVALID_STOCK_TYPE"


@pytest.mark.asyncio
@pytest.mark.parametrize("shares", ["500", 500.0, True, None])
async def test_non_integer_shares(service, trading_room, shares):
    with pytest.raises(ValidationError) as exc:
        await service.buy_stock(trading_room.room_id, trading_room.alice, "gold", shares)
    assert exc.value.code == "INVALID_SHARES"


@pytest.mark.asyncio
async def test_player_from_another_room(service, trading_room):
    other = await service.create_room("Elsewhere")
    stranger = await service.join_room(other.invite_code, "Mallory")

    with pytest.raises(UnauthorizedError) as exc:
        await service.buy_stock(trading_room.room_id, stranger.player_id, "gold", 500)
    assert exc.value.code == "PLAYER_NOT_IN_ROOM"


@pytest.mark.asyncio
async def test_unknown_player(service, trading_room):
    with pytest.raises(PlayerNotFoundError) as exc:
        await service.sell_stock(trading_room.room_id, uuid.uuid4(), "gold", 500)
    assert exc.value.kind == ErrorKind.NOT_FOUND
