"""
Custom exception hierarchy for the Stock Ticker engine and services.

Provides typed errors that can be handled consistently across
the core engine, services, and API layer. Every error carries a
``kind`` (the broad category callers branch on) and a ``code``
(the specific condition, stable for clients).
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Broad error categories."""

    NOT_FOUND = "NOT_FOUND"
    VALIDATION = "VALIDATION"
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    INSUFFICIENT_SHARES = "INSUFFICIENT_SHARES"
    UNAUTHORIZED = "UNAUTHORIZED"
    INTERNAL = "INTERNAL"


class TickerError(Exception):
    """Base exception for all game-related errors."""

    kind: ErrorKind = ErrorKind.INTERNAL
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, *, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "kind": self.kind.value, "message": self.message}


class NotFoundError(TickerError):
    """Room, game, player or stock does not exist."""

    kind = ErrorKind.NOT_FOUND
    code = "NOT_FOUND"


class RoomNotFoundError(NotFoundError):
    code = "ROOM_NOT_FOUND"


class GameNotFoundError(NotFoundError):
    code = "GAME_NOT_FOUND"


class PlayerNotFoundError(NotFoundError):
    code = "PLAYER_NOT_FOUND"


class StockNotFoundError(NotFoundError):
    code = "STOCK_NOT_FOUND"


class ValidationError(TickerError):
    """Input validation failed. User-correctable."""

    kind = ErrorKind.VALIDATION
    code = "VALIDATION_ERROR"


class WrongPhaseError(ValidationError):
    """Action is not legal in the current game phase."""

    code = "WRONG_PHASE"


class InvalidTransactionError(TickerError):
    """
    A buy or sell was refused by the trade validator.

    ``reason`` is the validator's rejection code; ``kind`` follows it so
    that funds and share shortfalls stay distinguishable.
    """

    code = "INVALID_TRANSACTION"

    _KINDS = {
        "INVALID_LOT": ErrorKind.VALIDATION,
        "INSUFFICIENT_FUNDS": ErrorKind.INSUFFICIENT_FUNDS,
        "INSUFFICIENT_SHARES": ErrorKind.INSUFFICIENT_SHARES,
    }

    def __init__(self, reason: str, message: str):
        super().__init__(message)
        self.reason = reason
        self.kind = self._KINDS.get(reason, ErrorKind.VALIDATION)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["reason"] = self.reason
        return data


class UnauthorizedError(TickerError):
    """Caller acted for a player or room it does not own."""

    kind = ErrorKind.UNAUTHORIZED
    code = "UNAUTHORIZED"


class PersistenceError(TickerError):
    """Database operation failed. The transaction was rolled back."""

    kind = ErrorKind.INTERNAL
    code = "INTERNAL_ERROR"
