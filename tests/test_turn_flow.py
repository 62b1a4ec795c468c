"""
Tests for turn progression, phase enforcement and the win condition.
"""

import uuid

import pytest

from src.core.exceptions import ErrorKind, GameNotFoundError, UnauthorizedError, WrongPhaseError
from src.core.game.config import GameConfig
from src.core.game.phases import ActionType, GamePhase, RoomStatus
from src.services import GameService


@pytest.mark.asyncio
async def test_roll_then_end_turn_passes_to_next_player(service, dice, started_room):
    dice.push(3, 3, 1)
    await service.roll_dice(started_room.room_id, started_room.alice)

    result = await service.end_turn(started_room.room_id)

    assert result.turn == 1
    assert result.current_player_id == started_room.bob
    assert result.phase == GamePhase.ROLLING

    state = await service.get_game_state(started_room.room_id)
    assert state.current_player_id == started_room.bob
    assert state.legal_actions == [ActionType.ROLL_DICE, ActionType.END_TURN]


@pytest.mark.asyncio
async def test_turns_wrap_around(service, started_room):
    await service.end_turn(started_room.room_id)
    result = await service.end_turn(started_room.room_id)

    assert result.turn == 2
    assert result.current_player_id == started_room.alice


@pytest.mark.asyncio
async def test_three_players_rotate_in_join_order(service):
    created = await service.create_room("Three")
    p0 = await service.join_room(created.invite_code, "P0")
    p1 = await service.join_room(created.invite_code, "P1")
    p2 = await service.join_room(created.invite_code, "P2")
    await service.start_game(created.room_id)

    state = await service.get_game_state(created.room_id)
    assert state.current_turn == 0
    assert state.current_player_id == p0.player_id

    results = [await service.end_turn(created.room_id) for _ in range(3)]

    assert [r.turn for r in results] == [1, 2, 3]
    assert [r.current_player_id for r in results] == [
        p1.player_id,
        p2.player_id,
        p0.player_id,
    ]
    assert all(r.phase == GamePhase.ROLLING for r in results)


@pytest.mark.asyncio
async def test_end_turn_without_rolling(service, started_room):
    result = await service.end_turn(started_room.room_id)

    assert result.current_player_id == started_room.bob
    assert result.phase == GamePhase.ROLLING


@pytest.mark.asyncio
async def test_roll_out_of_turn(service, dice, started_room):
    dice.push(1, 3, 1)

    with pytest.raises(UnauthorizedError) as exc:
        await service.roll_dice(started_room.room_id, started_room.bob)

    assert exc.value.code == "NOT_YOUR_TURN"
    assert exc.value.kind == ErrorKind.UNAUTHORIZED
    assert len(dice.rolls) == 1


@pytest.mark.asyncio
async def test_roll_twice_in_one_turn(service, dice, started_room):
    dice.push(1, 3, 1)
    dice.push(1, 3, 1)
    await service.roll_dice(started_room.room_id, started_room.alice)

    with pytest.raises(WrongPhaseError):
        await service.roll_dice(started_room.room_id, started_room.alice)


@pytest.mark.asyncio
async def test_trading_before_roll(service, started_room):
    with pytest.raises(WrongPhaseError):
        await service.buy_stock(started_room.room_id, started_room.alice, "gold", 500)
    with pytest.raises(WrongPhaseError):
        await service.sell_stock(started_room.room_id, started_room.alice, "gold", 500)


@pytest.mark.asyncio
async def test_roll_in_waiting_room(service):
    created = await service.create_room("Table")
    alice = await service.join_room(created.invite_code, "Alice")

    with pytest.raises(WrongPhaseError):
        await service.roll_dice(created.room_id, alice.player_id)
    with pytest.raises(WrongPhaseError):
        await service.end_turn(created.room_id)


@pytest.mark.asyncio
async def test_end_turn_unknown_game(service):
    with pytest.raises(GameNotFoundError) as exc:
        await service.end_turn(uuid.uuid4())
    assert exc.value.code == "GAME_NOT_FOUND"


@pytest.mark.asyncio
async def test_reaching_target_ends_game(service, dice, tweaks, started_room):
    await tweaks.set_cash(started_room.bob, 1500000)

    result = await service.end_turn(started_room.room_id)

    assert result.phase == GamePhase.GAME_OVER
    assert result.turn == 0
    assert result.current_player_id == started_room.alice

    state = await service.get_game_state(started_room.room_id)
    assert state.room_status == RoomStatus.FINISHED
    assert state.winner_ids == [started_room.bob]
    assert state.legal_actions == []

    dice.push(1, 3, 1)
    with pytest.raises(WrongPhaseError):
        await service.roll_dice(started_room.room_id, started_room.alice)
    with pytest.raises(WrongPhaseError):
        await service.end_turn(started_room.room_id)


@pytest.mark.asyncio
async def test_tied_winners(service, tweaks, started_room):
    await tweaks.set_cash(started_room.alice, 1600000)
    await tweaks.set_cash(started_room.bob, 1600000)

    await service.end_turn(started_room.room_id)

    state = await service.get_game_state(started_room.room_id)
    assert set(state.winner_ids) == {started_room.alice, started_room.bob}


@pytest.mark.asyncio
async def test_win_check_can_be_disabled(session_factory, tweaks):
    service = GameService(session_factory, config=GameConfig(win_net_worth=None))
    created = await service.create_room("Endless")
    alice = await service.join_room(created.invite_code, "Alice")
    await service.join_room(created.invite_code, "Bob")
    await service.start_game(created.room_id)
    await tweaks.set_cash(alice.player_id, 10_000_000)

    result = await service.end_turn(created.room_id)

    assert result.phase == GamePhase.ROLLING
    assert result.turn == 1
