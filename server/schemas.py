from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


# ---- Requests ----


class CreateRoomRequest(BaseModel):
    name: str


class JoinRoomRequest(BaseModel):
    invite_code: str
    player_name: str


class PlayerActionRequest(BaseModel):
    player_id: str


class TradeRequest(BaseModel):
    player_id: str
    stock_type: str
    shares: int


# ---- Responses ----


class ErrorDetail(BaseModel):
    code: str
    message: str
    kind: str
    reason: Optional[str] = None


class ErrorResponse(BaseModel):
    detail: ErrorDetail


class RoomCreatedResponse(BaseModel):
    room_id: str
    invite_code: str
    name: str


class RoomJoinedResponse(BaseModel):
    room_id: str
    player_id: str
    player_name: str
    turn_order: int


class RoomPlayerDTO(BaseModel):
    player_id: str
    name: str
    turn_order: int
    is_connected: bool


class RoomInfoResponse(BaseModel):
    room_id: str
    name: str
    invite_code: str
    status: str
    max_players: int
    created_at: Optional[datetime] = None
    players: List[RoomPlayerDTO] = Field(default_factory=list)


class DiceDTO(BaseModel):
    stock_die: int
    action_die: int
    amount_die: int
    stock: str
    action: str
    amount: int


class RollResponse(BaseModel):
    dice: DiceDTO
    split_occurred: bool
    old_price: int
    new_price: int
    dividends: Dict[str, int] = Field(default_factory=dict)


class TradeResponse(BaseModel):
    player_id: str
    stock_type: str
    action: str
    shares: int
    price_per_share: int
    total_amount: int
    cash_after: int
    shares_after: int


class TurnResponse(BaseModel):
    turn: int
    current_player_id: Optional[str] = None
    phase: str


class TransactionDTO(BaseModel):
    sequence_number: int
    player_id: str
    turn_number: int
    stock_type: str
    action: str
    shares: int
    price_per_share: int
    total_amount: int
    created_at: Optional[datetime] = None


class TransactionListResponse(BaseModel):
    transactions: List[TransactionDTO]
    limit: int
    offset: int


class DiceRollDTO(BaseModel):
    player_id: str
    turn_number: int
    dice: DiceDTO
    split_occurred: bool
    created_at: Optional[datetime] = None


class DiceRollListResponse(BaseModel):
    rolls: List[DiceRollDTO]
    limit: int
