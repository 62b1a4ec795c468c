"""
Stock pricing rules: price moves, splits, dividends and net worth.

All functions are pure. Prices and money are integer cents.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, TypeVar

from src.core.game.config import RESET_PRICE, SPLIT_PRICE, STARTING_PRICE
from src.core.game.dice import DiceAction, StockType

K = TypeVar("K")


@dataclass(frozen=True)
class PriceMove:
    """Outcome of applying one dice roll to a stock price."""

    old_price: int
    new_price: int
    split: bool = False
    reset: bool = False


def next_price(
    current_price: int,
    action: DiceAction,
    amount: int,
    starting_price: int = STARTING_PRICE,
) -> int:
    """
    Calculate the raw new price after a roll.

    A DOWN move that lands at or below zero resets the stock to the
    starting price instead of leaving it worthless.
    """
    if action == DiceAction.UP:
        return current_price + amount
    if action == DiceAction.DOWN:
        new_price = current_price - amount
        return starting_price if new_price <= RESET_PRICE else new_price
    return current_price


def should_split(price: int, split_price: int = SPLIT_PRICE) -> bool:
    """Check if a stock has reached the split threshold."""
    return price >= split_price


def split_shares(shares: int) -> int:
    return shares * 2


def apply_move(
    current_price: int,
    action: DiceAction,
    amount: int,
    starting_price: int = STARTING_PRICE,
    split_price: int = SPLIT_PRICE,
) -> PriceMove:
    """
    Apply a roll to a price, resolving splits and resets.

    When the split threshold is reached the stock goes back to the
    starting price; the raw computed price is never returned.
    """
    raw = next_price(current_price, action, amount, starting_price)
    reset = action == DiceAction.DOWN and current_price - amount <= RESET_PRICE

    if should_split(raw, split_price):
        return PriceMove(old_price=current_price, new_price=starting_price, split=True)

    return PriceMove(old_price=current_price, new_price=raw, reset=reset)


def dividend(
    stock_price: int,
    shares: int,
    amount_per_share: int,
    starting_price: int = STARTING_PRICE,
) -> int:
    """
    Calculate a dividend payout.

    Stocks trading below the starting price pay nothing. The price is
    only an eligibility gate; the payout is shares times the dice amount.
    """
    if stock_price < starting_price or shares <= 0:
        return 0
    return shares * amount_per_share


def net_worth(
    cash: int,
    holdings: Mapping[StockType, int],
    prices: Mapping[StockType, int],
) -> int:
    """Cash plus the market value of every holding."""
    return cash + sum(shares * prices.get(stock, 0) for stock, shares in holdings.items())


def winners(net_worths: Mapping[K, int]) -> List[K]:
    """Return every key tied at the highest net worth."""
    if not net_worths:
        return []
    best = max(net_worths.values())
    return [key for key, value in net_worths.items() if value == best]


def reached_target(values: Iterable[int], target: int) -> bool:
    return any(value >= target for value in values)


def format_cents(cents: int) -> str:
    """Render integer cents as a dollar string, e.g. 500000 -> $5000.00."""
    sign = "-" if cents < 0 else ""
    dollars, rem = divmod(abs(cents), 100)
    return f"{sign}${dollars}.{rem:02d}"


def price_table(prices: Dict[StockType, int]) -> Dict[str, int]:
    """Stable, JSON-friendly mapping of stock name to price."""
    return {stock.value: prices[stock] for stock in StockType if stock in prices}
