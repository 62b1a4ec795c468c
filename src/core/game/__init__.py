from src.core.game.config import GameConfig
from src.core.game.dice import Dice, DiceAction, DiceResult, StockType, resolve_dice
from src.core.game.phases import ActionType, GamePhase, RoomStatus
from src.core.game.snapshot import GameSnapshot, PlayerSnapshot, serialize_snapshot

__all__ = [
    "GameConfig",
    "Dice",
    "DiceAction",
    "DiceResult",
    "StockType",
    "resolve_dice",
    "ActionType",
    "GamePhase",
    "RoomStatus",
    "GameSnapshot",
    "PlayerSnapshot",
    "serialize_snapshot",
]
