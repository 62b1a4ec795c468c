"""
Game configuration settings.
"""

import string
from dataclasses import dataclass
from typing import Optional, Tuple

STARTING_CASH = 500000  # $5000.00 in cents
STARTING_PRICE = 100  # $1.00 in cents
SPLIT_PRICE = 200  # $2.00 in cents
RESET_PRICE = 0
LOT_SIZES: Tuple[int, ...] = (500, 1000, 2000, 5000)
MAX_PLAYERS = 6
MIN_PLAYERS = 2
WIN_NET_WORTH = 1500000  # $15,000.00 in cents


@dataclass(frozen=True)
class GameConfig:
    """Configuration for a Stock Ticker room."""

    starting_cash: int = STARTING_CASH
    starting_price: int = STARTING_PRICE
    split_price: int = SPLIT_PRICE
    lot_sizes: Tuple[int, ...] = LOT_SIZES

    max_players: int = MAX_PLAYERS
    min_players: int = MIN_PLAYERS

    invite_code_length: int = 6
    invite_code_alphabet: str = string.ascii_uppercase + string.digits
    invite_code_attempts: int = 10

    # None disables the win check and the game runs until abandoned
    win_net_worth: Optional[int] = WIN_NET_WORTH
