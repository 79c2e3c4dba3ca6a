"""
A single leg of a ratio trade.
Pairs the instrument bought with the instrument sold to convert between denominations.
"""

from decimal import Decimal
from typing import Optional, Tuple

from ratio_arb.models import ZERO, InstrumentWithData, MarketData
from ratio_arb.market_data import MarketDataStore
from ratio_arb.logger import get_logger


logger = get_logger("buy_sell_trade")


def _cash_price(price: Decimal, side: InstrumentWithData) -> Decimal:
    if side.instrument is None:
        return ZERO
    return price * side.instrument.price_conversion_factor


def _symbol_of(side: Optional[InstrumentWithData]) -> str:
    if side is None or side.instrument is None:
        return "?"
    return side.symbol


def _implied_rate(paid: Decimal, received: Decimal) -> Decimal:
    if paid <= 0 or received <= 0:
        return ZERO
    return paid / received


class BuySellTrade:
    """
    Buys one instrument and sells its twin quoted in another denomination.

    For AL30 (pesos) against AL30D (dollars), `buy_price` is the pesos paid
    per dollar obtained by lifting the AL30 offer and hitting the AL30D bid.
    `sell_price` is the pesos obtained per dollar when going the other way.
    All prices are zero when the books needed for them are empty.
    """

    def __init__(
        self,
        buy: InstrumentWithData,
        sell: InstrumentWithData,
        store: Optional[MarketDataStore] = None,
        name: Optional[str] = None,
    ):
        self.buy = buy
        self.sell = sell
        self.store = store
        self._name = name

    @property
    def name(self) -> str:
        if self._name:
            return self._name
        return f"{_symbol_of(self.buy)}-{_symbol_of(self.sell)}"

    def _books(self) -> Tuple[Optional[MarketData], Optional[MarketData]]:
        if self.buy is None or self.sell is None:
            return None, None
        return self.buy.data, self.sell.data

    @property
    def buy_price(self) -> Decimal:
        buy_data, sell_data = self._books()
        if buy_data is None or sell_data is None:
            return ZERO
        if not buy_data.has_offers() or not sell_data.has_bids():
            return ZERO

        return _implied_rate(
            _cash_price(buy_data.get_top_offer_price(), self.buy),
            _cash_price(sell_data.get_top_bid_price(), self.sell),
        )

    @property
    def sell_price(self) -> Decimal:
        buy_data, sell_data = self._books()
        if buy_data is None or sell_data is None:
            return ZERO
        if not buy_data.has_bids() or not sell_data.has_offers():
            return ZERO

        return _implied_rate(
            _cash_price(buy_data.get_top_bid_price(), self.buy),
            _cash_price(sell_data.get_top_offer_price(), self.sell),
        )

    @property
    def last(self) -> Decimal:
        buy_data, sell_data = self._books()
        if buy_data is None or sell_data is None:
            return ZERO

        return _implied_rate(
            _cash_price(buy_data.last, self.buy),
            _cash_price(sell_data.last, self.sell),
        )

    def refresh_data(self) -> None:
        """Pull the latest book snapshot for both instruments from the store."""
        if self.store is None:
            return

        for side in (self.buy, self.sell):
            if side is None or side.instrument is None:
                continue
            latest: Optional[MarketData] = self.store.get(side.instrument.instrument_id)
            if latest is None:
                logger.debug("No market data received yet", symbol=side.symbol)
                continue
            side.data = latest

    def __repr__(self) -> str:
        return f"BuySellTrade({self.name})"
