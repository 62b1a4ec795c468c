"""
Core domain layer for Stock Ticker.

Exposes the pure game engine primitives: dice, pricing, trade
validation, the phase state machine and snapshot value objects.
"""

from src.core.game import (
    ActionType,
    Dice,
    DiceAction,
    DiceResult,
    GameConfig,
    GamePhase,
    GameSnapshot,
    RoomStatus,
    StockType,
    resolve_dice,
)

__all__ = [
    "ActionType",
    "Dice",
    "DiceAction",
    "DiceResult",
    "GameConfig",
    "GamePhase",
    "GameSnapshot",
    "RoomStatus",
    "StockType",
    "resolve_dice",
]
