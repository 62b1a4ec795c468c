"""
Trade validation for buying and selling stock.
Checks lot sizes, affordability, and ownership before a trade is committed.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from src.core.game.config import LOT_SIZES
from src.core.game.pricing import format_cents


class TradeAction(str, Enum):
    """Kinds of cash movement recorded in the transaction log."""
    BUY = "buy"
    SELL = "sell"
    DIVIDEND = "dividend"


class TradeRejection(str, Enum):
    """Reasons a trade can be refused."""
    INVALID_LOT = "INVALID_LOT"
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    INSUFFICIENT_SHARES = "INSUFFICIENT_SHARES"


@dataclass(frozen=True)
class TradeCheck:
    """Result of validating a trade."""
    reason: Optional[TradeRejection] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.reason is None

    def __bool__(self) -> bool:
        return self.ok


ACCEPTED = TradeCheck()


def _check_lot(shares: int, lot_sizes: Sequence[int]) -> Optional[TradeCheck]:
    if shares not in lot_sizes:
        allowed = ", ".join(str(lot) for lot in lot_sizes)
        return TradeCheck(
            TradeRejection.INVALID_LOT,
            f"Invalid share amount. Must be one of: {allowed}",
        )
    return None


def validate_buy(
    shares: int,
    price: int,
    cash: int,
    lot_sizes: Sequence[int] = LOT_SIZES,
) -> TradeCheck:
    """Check that a purchase uses a valid lot and the player can pay for it."""
    bad_lot = _check_lot(shares, lot_sizes)
    if bad_lot is not None:
        return bad_lot

    total_cost = shares * price
    if total_cost > cash:
        return TradeCheck(
            TradeRejection.INSUFFICIENT_FUNDS,
            f"Insufficient funds. Need {format_cents(total_cost)}, have {format_cents(cash)}",
        )
    return ACCEPTED


def validate_sell(
    shares: int,
    owned_shares: int,
    lot_sizes: Sequence[int] = LOT_SIZES,
) -> TradeCheck:
    """Check that a sale uses a valid lot and does not exceed the shares owned."""
    bad_lot = _check_lot(shares, lot_sizes)
    if bad_lot is not None:
        return bad_lot

    if shares > owned_shares:
        return TradeCheck(
            TradeRejection.INSUFFICIENT_SHARES,
            f"Cannot sell {shares} shares. You only own {owned_shares} shares.",
        )
    return ACCEPTED
