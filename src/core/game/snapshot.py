"""
Point-in-time views of a room and their public serialization.

These are plain value objects assembled by the service from one
consistent read; nothing here touches the database.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from src.core.game.dice import DiceResult, StockType
from src.core.game.phases import ActionType, GamePhase, RoomStatus
from src.core.game.pricing import price_table


@dataclass(frozen=True)
class PlayerSnapshot:
    player_id: uuid.UUID
    name: str
    turn_order: int
    cash: int
    holdings: Dict[StockType, int]
    net_worth: int
    is_connected: bool = False


@dataclass(frozen=True)
class GameSnapshot:
    """Everything a client needs to render a room."""

    room_id: uuid.UUID
    room_status: RoomStatus
    current_turn: int
    current_player_id: Optional[uuid.UUID]
    phase: GamePhase
    prices: Dict[StockType, int]
    players: List[PlayerSnapshot]
    legal_actions: List[ActionType] = field(default_factory=list)
    winner_ids: List[uuid.UUID] = field(default_factory=list)

    def player(self, player_id: uuid.UUID) -> PlayerSnapshot:
        for p in self.players:
            if p.player_id == player_id:
                return p
        raise KeyError(player_id)


@dataclass(frozen=True)
class RoomPlayer:
    player_id: uuid.UUID
    name: str
    turn_order: int
    is_connected: bool


@dataclass(frozen=True)
class RoomInfo:
    room_id: uuid.UUID
    name: str
    invite_code: str
    status: RoomStatus
    max_players: int
    players: List[RoomPlayer]
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class RoomCreated:
    room_id: uuid.UUID
    invite_code: str
    name: str


@dataclass(frozen=True)
class RoomJoined:
    room_id: uuid.UUID
    player_id: uuid.UUID
    player_name: str
    turn_order: int


@dataclass(frozen=True)
class RollOutcome:
    """Result of a committed dice roll."""

    dice: DiceResult
    split_occurred: bool
    old_price: int
    new_price: int
    dividends: Dict[uuid.UUID, int] = field(default_factory=dict)


@dataclass(frozen=True)
class TradeReceipt:
    player_id: uuid.UUID
    stock: StockType
    action: str
    shares: int
    price_per_share: int
    total_amount: int
    cash_after: int
    shares_after: int


@dataclass(frozen=True)
class TurnAdvanced:
    turn: int
    current_player_id: Optional[uuid.UUID]
    phase: GamePhase


@dataclass(frozen=True)
class TransactionEntry:
    """One row of the trade and dividend history."""

    sequence_number: int
    player_id: uuid.UUID
    turn_number: int
    stock: StockType
    action: str
    shares: int
    price_per_share: int
    total_amount: int
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class DiceRollEntry:
    player_id: uuid.UUID
    turn_number: int
    dice: DiceResult
    split_occurred: bool
    created_at: Optional[datetime] = None


def _uid(value: Optional[uuid.UUID]) -> Optional[str]:
    return str(value) if value is not None else None


def serialize_snapshot(snapshot: GameSnapshot) -> Dict[str, Any]:
    """Serialize a GameSnapshot into a public, stable JSON dict.

    The snapshot includes:
    - turn, phase and current player
    - stock prices keyed by stock name
    - players in turn order with cash, holdings and net worth
    - legal actions for the current phase and winners once the game is over
    """
    players: List[Dict[str, Any]] = []
    for p in sorted(snapshot.players, key=lambda p: p.turn_order):
        players.append(
            {
                "player_id": str(p.player_id),
                "name": p.name,
                "turn_order": p.turn_order,
                "cash": p.cash,
                "holdings": price_table(p.holdings),
                "net_worth": p.net_worth,
                "is_connected": p.is_connected,
            }
        )

    return {
        "room_id": str(snapshot.room_id),
        "room_status": snapshot.room_status.value,
        "current_turn": snapshot.current_turn,
        "current_player_id": _uid(snapshot.current_player_id),
        "phase": snapshot.phase.value,
        "prices": price_table(snapshot.prices),
        "players": players,
        "legal_actions": [a.value for a in snapshot.legal_actions],
        "winner_ids": [str(w) for w in snapshot.winner_ids],
    }
