"""
Turn and phase state machine.

    WAITING --start--> ROLLING --roll--> TRADING --end_turn--> ROLLING ...
                       ROLLING/TRADING --finish--> GAME_OVER

Buying and selling keep the game in TRADING. Ending a turn from ROLLING
skips the roll.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet, List

from src.core.exceptions import WrongPhaseError


class GamePhase(str, Enum):
    """Phase of the current turn."""

    WAITING = "waiting"
    ROLLING = "rolling"
    TRADING = "trading"
    GAME_OVER = "game_over"


class RoomStatus(str, Enum):
    """Lifecycle of a room. Never moves backwards."""

    WAITING = "waiting"
    PLAYING = "playing"
    FINISHED = "finished"


class ActionType(str, Enum):
    """Types of actions that change game state."""

    START_GAME = "start_game"
    ROLL_DICE = "roll_dice"
    BUY_STOCK = "buy_stock"
    SELL_STOCK = "sell_stock"
    END_TURN = "end_turn"
    FINISH_GAME = "finish_game"


# action -> phases it is legal in
_LEGAL_IN: Dict[ActionType, FrozenSet[GamePhase]] = {
    ActionType.START_GAME: frozenset({GamePhase.WAITING}),
    ActionType.ROLL_DICE: frozenset({GamePhase.ROLLING}),
    ActionType.BUY_STOCK: frozenset({GamePhase.TRADING}),
    ActionType.SELL_STOCK: frozenset({GamePhase.TRADING}),
    ActionType.END_TURN: frozenset({GamePhase.ROLLING, GamePhase.TRADING}),
    ActionType.FINISH_GAME: frozenset({GamePhase.ROLLING, GamePhase.TRADING}),
}

_NEXT_PHASE: Dict[ActionType, GamePhase] = {
    ActionType.START_GAME: GamePhase.ROLLING,
    ActionType.ROLL_DICE: GamePhase.TRADING,
    ActionType.BUY_STOCK: GamePhase.TRADING,
    ActionType.SELL_STOCK: GamePhase.TRADING,
    ActionType.END_TURN: GamePhase.ROLLING,
    ActionType.FINISH_GAME: GamePhase.GAME_OVER,
}


def is_legal(phase: GamePhase, action: ActionType) -> bool:
    return phase in _LEGAL_IN[action]


def require_phase(phase: GamePhase, action: ActionType) -> None:
    """
    Raise if ``action`` is not allowed in ``phase``.

    Raises:
        WrongPhaseError: With the phases the action is legal in
    """
    if not is_legal(phase, action):
        allowed = ", ".join(sorted(p.value for p in _LEGAL_IN[action]))
        raise WrongPhaseError(
            f"Cannot {action.value.replace('_', ' ')} during the {phase.value} phase "
            f"(allowed: {allowed})"
        )


def transition(phase: GamePhase, action: ActionType) -> GamePhase:
    """Validate ``action`` against ``phase`` and return the phase that follows it."""
    require_phase(phase, action)
    return _NEXT_PHASE[action]


def legal_actions(phase: GamePhase) -> List[ActionType]:
    """List the actions available in a phase, in a stable order."""
    return [action for action in ActionType if is_legal(phase, action) and action != ActionType.FINISH_GAME]
