"""
Tests for dice resolution.
"""

import pytest

from src.core.game.dice import Dice, DiceAction, StockType, resolve_dice


@pytest.mark.parametrize(
    "face, stock",
    [
        (1, StockType.GOLD),
        (2, StockType.SILVER),
        (3, StockType.BONDS),
        (4, StockType.OIL),
        (5, StockType.INDUSTRIALS),
        (6, StockType.GRAIN),
    ],
)
def test_stock_die_table(face, stock):
    assert resolve_dice(face, 3, 1).stock == stock


def test_action_die_table():
    """1-2 move down, 3-4 move up, 5-6 pay a dividend."""
    actions = [resolve_dice(1, face, 1).action for face in range(1, 7)]
    assert actions == [
        DiceAction.DOWN,
        DiceAction.DOWN,
        DiceAction.UP,
        DiceAction.UP,
        DiceAction.DIVIDEND,
        DiceAction.DIVIDEND,
    ]


def test_amount_die_table():
    amounts = [resolve_dice(1, 1, face).amount for face in range(1, 7)]
    assert amounts == [5, 5, 10, 10, 20, 20]


def test_result_keeps_raw_faces():
    result = resolve_dice(6, 5, 4)

    assert (result.stock_die, result.action_die, result.amount_die) == (6, 5, 4)
    assert result.to_dict() == {
        "stock_die": 6,
        "action_die": 5,
        "amount_die": 4,
        "stock": "grain",
        "action": "dividend",
        "amount": 10,
    }


@pytest.mark.parametrize("faces", [(0, 1, 1), (1, 7, 1), (1, 1, -2)])
def test_faces_outside_range_rejected(faces):
    with pytest.raises(ValueError):
        resolve_dice(*faces)


def test_seeded_dice_are_reproducible():
    a, b = Dice(seed=7), Dice(seed=7)

    assert [a.roll() for _ in range(20)] == [b.roll() for _ in range(20)]


def test_rolls_stay_on_the_die():
    dice = Dice(seed=1)
    for _ in range(200):
        result = dice.roll()
        assert 1 <= result.stock_die <= 6
        assert 1 <= result.action_die <= 6
        assert 1 <= result.amount_die <= 6
