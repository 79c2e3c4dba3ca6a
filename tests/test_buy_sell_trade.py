"""
Tests for leg pricing and refresh.
"""

from decimal import Decimal

import pytest

from ratio_arb.models import InstrumentId, MarketData
from ratio_arb.market_data import MarketDataStore
from ratio_arb.engine import BuySellTrade


@pytest.fixture
def mep_leg(make_side):
    """AL30 in pesos against AL30D in dollars, both quoted per 100 nominal."""
    return BuySellTrade(
        buy=make_side(
            "AL30", bids=[("25000", "500")], offers=[("25100", "800")], last="25050", factor="0.01"
        ),
        sell=make_side(
            "AL30D", bids=[("24.9", "1000")], offers=[("25.1", "700")], last="25", factor="0.01"
        ),
    )


class TestPrices:
    """Tests for implied conversion rates."""

    def test_buy_price_lifts_offer_and_hits_bid(self, mep_leg):
        assert mep_leg.buy_price == Decimal("251") / Decimal("0.249")

    def test_sell_price_hits_bid_and_lifts_offer(self, mep_leg):
        assert mep_leg.sell_price == Decimal("250") / Decimal("0.251")

    def test_buy_price_is_above_sell_price(self, mep_leg):
        assert mep_leg.buy_price > mep_leg.sell_price

    def test_last_uses_last_trades(self, mep_leg):
        assert mep_leg.last == Decimal("1002")

    def test_missing_offer_gives_zero_buy_price(self, mep_leg):
        mep_leg.buy.data = MarketData.from_levels(bids=[("25000", "500")])

        assert mep_leg.buy_price == 0
        assert mep_leg.sell_price > 0

    def test_missing_data_gives_zero_prices(self, mep_leg):
        mep_leg.sell.data = None

        assert mep_leg.buy_price == 0
        assert mep_leg.sell_price == 0
        assert mep_leg.last == 0

    def test_missing_side_gives_zero_prices(self, mep_leg):
        mep_leg.buy = None

        assert mep_leg.buy_price == 0
        assert mep_leg.sell_price == 0
        assert mep_leg.last == 0
        assert mep_leg.name == "?-AL30D"

    def test_no_last_trade_gives_zero(self, make_side):
        leg = BuySellTrade(
            buy=make_side("GD30", bids=[("100", "1")]),
            sell=make_side("GD30D", offers=[("1", "1")]),
        )

        assert leg.last == 0

    def test_name_defaults_to_symbols(self, mep_leg):
        assert mep_leg.name == "AL30-AL30D"

    def test_explicit_name(self, make_side):
        leg = BuySellTrade(make_side("AL30"), make_side("AL30C"), name="CCL AL30")

        assert leg.name == "CCL AL30"


class TestRefresh:
    """Tests for pulling books from the store."""

    def test_refresh_replaces_books(self, make_side):
        store = MarketDataStore()
        leg = BuySellTrade(make_side("AL30"), make_side("AL30D"), store=store)
        fresh = MarketData.from_levels(bids=[("25000", "10")])
        store.update(InstrumentId("AL30"), fresh)

        leg.refresh_data()

        assert leg.buy.data is fresh

    def test_refresh_keeps_books_without_updates(self, make_side):
        store = MarketDataStore()
        leg = BuySellTrade(make_side("AL30", bids=[("1", "1")]), make_side("AL30D"), store=store)
        previous = leg.buy.data

        leg.refresh_data()

        assert leg.buy.data is previous

    def test_refresh_without_store_is_noop(self, mep_leg):
        previous = mep_leg.sell.data

        mep_leg.refresh_data()

        assert mep_leg.sell.data is previous
