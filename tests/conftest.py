"""
Pytest configuration and shared fixtures.
"""

import os
from decimal import Decimal

import pytest

# Set test environment
os.environ["DEBUG_MODE"] = "true"
os.environ["LOG_LEVEL"] = "DEBUG"
os.environ["MIN_PROFIT"] = "0.005"
os.environ["MIN_TRADABLE_SIZE"] = "1"
os.environ["OPPORTUNITY_COOLDOWN_SECONDS"] = "10"


@pytest.fixture(autouse=True)
def fresh_config():
    """Start every test from the environment configuration."""
    from ratio_arb.config import reload_config
    return reload_config()


@pytest.fixture
def make_side():
    """Build an instrument with a book from (price, size) pairs."""
    from ratio_arb.models import Instrument, InstrumentId, InstrumentWithData, MarketData

    def _make_side(symbol, bids=(), offers=(), last="0", factor="1", with_data=True):
        instrument = Instrument(
            instrument_id=InstrumentId(symbol=symbol),
            price_conversion_factor=Decimal(factor),
        )
        data = MarketData.from_levels(bids=bids, offers=offers, last=last) if with_data else None
        return InstrumentWithData(instrument, data)

    return _make_side


@pytest.fixture
def scenario_trade(make_side):
    """
    Ratio trade whose four books are:
    owned sell bid 100 @ 10, cheap buy offer 1000 @ 9,
    arbitrage sell bid 50 @ 9.5, owned buy offer 1000 @ 9.9.
    """
    from ratio_arb.engine import BuySellTrade, RatioTrade

    sell_then_buy = BuySellTrade(
        buy=make_side("AL30", offers=[("9.9", "1000")]),
        sell=make_side("AL30D", bids=[("10", "100")]),
    )
    buy_then_sell = BuySellTrade(
        buy=make_side("GD30", bids=[("9.5", "50")]),
        sell=make_side("GD30D", offers=[("9", "1000")]),
    )
    return RatioTrade(sell_then_buy, buy_then_sell)
