"""
Dice resolution.

Each roll is three independent dice: one picks the stock, one the
direction, and one the amount in cents.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional


class StockType(str, Enum):
    """The six stocks traded in every room."""

    GOLD = "gold"
    SILVER = "silver"
    BONDS = "bonds"
    OIL = "oil"
    INDUSTRIALS = "industrials"
    GRAIN = "grain"


class DiceAction(str, Enum):
    """What the action die does to the selected stock."""

    UP = "up"
    DOWN = "down"
    DIVIDEND = "dividend"


STOCK_DIE: Dict[int, StockType] = {
    1: StockType.GOLD,
    2: StockType.SILVER,
    3: StockType.BONDS,
    4: StockType.OIL,
    5: StockType.INDUSTRIALS,
    6: StockType.GRAIN,
}

ACTION_DIE: Dict[int, DiceAction] = {
    1: DiceAction.DOWN,
    2: DiceAction.DOWN,
    3: DiceAction.UP,
    4: DiceAction.UP,
    5: DiceAction.DIVIDEND,
    6: DiceAction.DIVIDEND,
}

AMOUNT_DIE: Dict[int, int] = {
    1: 5,
    2: 5,
    3: 10,
    4: 10,
    5: 20,
    6: 20,
}


@dataclass(frozen=True)
class DiceResult:
    """Raw faces of one roll and what they mean."""

    stock_die: int
    action_die: int
    amount_die: int
    stock: StockType
    action: DiceAction
    amount: int

    def to_dict(self) -> Dict[str, object]:
        return {
            "stock_die": self.stock_die,
            "action_die": self.action_die,
            "amount_die": self.amount_die,
            "stock": self.stock.value,
            "action": self.action.value,
            "amount": self.amount,
        }


def resolve_dice(stock_die: int, action_die: int, amount_die: int) -> DiceResult:
    """
    Interpret three die faces.

    Raises:
        ValueError: If any face is outside 1-6
    """
    for face in (stock_die, action_die, amount_die):
        if face not in STOCK_DIE:
            raise ValueError(f"Die face must be between 1 and 6, got {face}")

    return DiceResult(
        stock_die=stock_die,
        action_die=action_die,
        amount_die=amount_die,
        stock=STOCK_DIE[stock_die],
        action=ACTION_DIE[action_die],
        amount=AMOUNT_DIE[amount_die],
    )


class Dice:
    """Three six-sided dice backed by a seedable RNG."""

    def __init__(self, seed: Optional[int] = None):
        self.rng = random.Random(seed)

    def roll(self) -> DiceResult:
        return resolve_dice(
            self.rng.randint(1, 6),
            self.rng.randint(1, 6),
            self.rng.randint(1, 6),
        )
