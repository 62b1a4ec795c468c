"""
Tests for buy/sell validation.
"""

from src.core.game.trading import TradeRejection, validate_buy, validate_sell


def test_buy_accepts_every_lot_size():
    for lot in (500, 1000, 2000, 5000):
        assert validate_buy(lot, 100, 500000).ok


def test_buy_rejects_odd_lot():
    check = validate_buy(700, 100, 500000)

    assert not check
    assert check.reason == TradeRejection.INVALID_LOT
    assert check.message == "Invalid share amount. Must be one of: 500, 1000, 2000, 5000"


def test_buy_rejects_zero_and_negative():
    assert validate_buy(0, 100, 500000).reason == TradeRejection.INVALID_LOT
    assert validate_buy(-500, 100, 500000).reason == TradeRejection.INVALID_LOT


def test_buy_rejects_overspend():
    check = validate_buy(5000, 101, 500000)

    assert check.reason == TradeRejection.INSUFFICIENT_FUNDS
    assert check.message == "Insufficient funds. Need $5050.00, have $5000.00"


def test_buy_may_spend_everything():
    assert validate_buy(5000, 100, 500000).ok


def test_lot_checked_before_funds():
    assert validate_buy(700, 100, 0).reason == TradeRejection.INVALID_LOT


def test_sell_rejects_more_than_owned():
    check = validate_sell(1000, 500)

    assert check.reason == TradeRejection.INSUFFICIENT_SHARES
    assert check.message == "Cannot sell 1000 shares. You only own 500 shares."


def test_sell_whole_position():
    assert validate_sell(500, 500).ok


def test_sell_rejects_odd_lot():
    assert validate_sell(250, 5000).reason == TradeRejection.INVALID_LOT


def test_custom_lot_sizes():
    assert validate_buy(100, 100, 500000, lot_sizes=(100,)).ok
    assert not validate_sell(500, 500, lot_sizes=(100,))
