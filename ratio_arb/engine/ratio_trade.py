"""
Ratio trade evaluation.
Computes the profitability and the executable size of a two-leg conversion cycle.
"""

from dataclasses import dataclass
from decimal import ROUND_FLOOR, Decimal
from typing import Optional

from ratio_arb.models import (
    ZERO, BookReadiness, BookStatus, InstrumentWithData, RatioSnapshot
)
from ratio_arb.engine.buy_sell_trade import BuySellTrade
from ratio_arb.logger import get_logger


logger = get_logger("ratio_trade")

# Returned by the profit accessors when a pairing cannot be priced right now
NOT_TRADABLE = Decimal("-100")


def _profit(sell_price: Decimal, buy_price: Decimal) -> Decimal:
    if sell_price > 0 and buy_price > 0:
        return (sell_price / buy_price) - 1
    return NOT_TRADABLE


@dataclass(frozen=True)
class RatioTrade:
    """
    Dollar arbitrage (MEP or CCL) between two legs.

    The cycle is: sell the relatively expensive instrument we hold
    (`sell_then_buy.sell`), buy the cheap one (`buy_then_sell.sell`), sell what
    was bought on the arbitrage leg (`buy_then_sell.buy`) and buy back the
    original instrument (`sell_then_buy.buy`).

    Every derived value is recomputed from the current books on each access.
    Nothing here raises on missing or degenerate market data: sizes collapse
    to 0 and profits to NOT_TRADABLE.
    """
    sell_then_buy: BuySellTrade
    buy_then_sell: BuySellTrade

    @property
    def name(self) -> str:
        try:
            return f"{self.sell_then_buy.name} / {self.buy_then_sell.name}"
        except AttributeError:
            return "<incomplete ratio trade>"

    @property
    def profit(self) -> Decimal:
        """Round-trip return at the best quotes (0.02 = 2%)."""
        if self.sell_then_buy is None or self.buy_then_sell is None:
            return NOT_TRADABLE
        return _profit(self.buy_then_sell.sell_price, self.sell_then_buy.buy_price)

    @property
    def profit_last(self) -> Decimal:
        """Round-trip return at the last traded prices."""
        if self.sell_then_buy is None or self.buy_then_sell is None:
            return NOT_TRADABLE
        return _profit(self.buy_then_sell.last, self.sell_then_buy.last)

    @property
    def max_tradable_size(self) -> Decimal:
        """Largest nominal that can run the whole cycle at top of book right now."""
        return self._calculate_max_tradable_size()

    def get_owned_venta_max_size(self) -> int:
        """Maximum nominal of the owned instrument that can be sold, as an order quantity."""
        return int(self.max_tradable_size)

    def refresh_data(self) -> None:
        for leg in (self.buy_then_sell, self.sell_then_buy):
            if leg is not None:
                leg.refresh_data()

    def snapshot(self) -> RatioSnapshot:
        """Read every derived value once so callers see a consistent view."""
        return RatioSnapshot(
            name=self.name,
            profit=self.profit,
            profit_last=self.profit_last,
            max_tradable_size=self.max_tradable_size,
            readiness=self.check_book_data(),
        )

    @property
    def has_book_data(self) -> bool:
        return self.check_book_data().is_ready

    def check_book_data(self) -> BookReadiness:
        """Report the first book that is missing or lacks the quotes the cycle reads."""
        required = (
            ("sell_then_buy", self.sell_then_buy, "sell", "bids"),
            ("sell_then_buy", self.sell_then_buy, "buy", "offers"),
            ("buy_then_sell", self.buy_then_sell, "sell", "offers"),
            ("buy_then_sell", self.buy_then_sell, "buy", "bids"),
        )

        for leg_name, leg, side_name, quotes in required:
            if leg is None:
                return BookReadiness(BookStatus.MISSING_SIDE, leg=leg_name)

            side: Optional[InstrumentWithData] = getattr(leg, side_name, None)
            if side is None or side.instrument is None or side.data is None:
                return BookReadiness(BookStatus.MISSING_SIDE, leg=leg_name, side=side_name)

            has_quotes = side.data.has_bids() if quotes == "bids" else side.data.has_offers()
            if not has_quotes:
                return BookReadiness(BookStatus.EMPTY_BOOK, leg=leg_name, side=side_name)

        return BookReadiness(BookStatus.READY)

    def _calculate_max_tradable_size(self) -> Decimal:
        readiness = self.check_book_data()
        if not readiness.is_ready:
            return ZERO

        try:
            return self._chain_legs()
        except ArithmeticError as e:
            logger.debug("Sizing failed", pair=self.name, error=str(e))
            return ZERO

    def _chain_legs(self) -> Decimal:
        owned_sell = self.sell_then_buy.sell
        arb_buy = self.buy_then_sell.sell
        arb_sell = self.buy_then_sell.buy
        owned_buy = self.sell_then_buy.buy

        # 1) Sell the expensive instrument we hold (bid side)
        owned_sell_size = owned_sell.data.get_top_bid_size()
        owned_sell_price = owned_sell.data.get_top_bid_price()
        owned_sell_factor = owned_sell.instrument.price_conversion_factor

        # 2) Buy the cheap instrument (offer side)
        arb_buy_offer_size = arb_buy.data.get_top_offer_size()
        arb_buy_offer_price = arb_buy.data.get_top_offer_price()
        arb_buy_factor = arb_buy.instrument.price_conversion_factor

        # 3) Sell what was bought on the arbitrage leg (bid side)
        arb_sell_bid_size = arb_sell.data.get_top_bid_size()
        arb_sell_bid_price = arb_sell.data.get_top_bid_price()
        arb_sell_factor = arb_sell.instrument.price_conversion_factor

        # 4) Buy back the original instrument (offer side)
        owned_buy_offer_size = owned_buy.data.get_top_offer_size()
        owned_buy_offer_price = owned_buy.data.get_top_offer_price()
        owned_buy_factor = owned_buy.instrument.price_conversion_factor

        prices = (owned_sell_price, arb_buy_offer_price, arb_sell_bid_price, owned_buy_offer_price)
        if any(price <= 0 for price in prices):
            return ZERO

        factors = (owned_sell_factor, arb_buy_factor, arb_sell_factor, owned_buy_factor)
        if any(factor <= 0 for factor in factors):
            return ZERO

        cash_from_owned_sell = owned_sell_size * owned_sell_price * owned_sell_factor
        if cash_from_owned_sell <= 0:
            return ZERO

        # Cash-constrained: what that cash buys on the cheap leg
        arb_buy_cap_by_cash = cash_from_owned_sell / (arb_buy_offer_price * arb_buy_factor)
        arb_buy_nominal = min(arb_buy_offer_size, arb_buy_cap_by_cash)
        if arb_buy_nominal <= 0:
            return ZERO

        # Size-constrained: the bought nominal is held, only the bid size limits it
        arb_sell_nominal = min(arb_buy_nominal, arb_sell_bid_size)
        if arb_sell_nominal <= 0:
            return ZERO

        cash_from_arb_sell = arb_sell_nominal * arb_sell_bid_price * arb_sell_factor
        if cash_from_arb_sell <= 0:
            return ZERO

        owned_buy_cap_by_cash = cash_from_arb_sell / (owned_buy_offer_price * owned_buy_factor)
        owned_buy_nominal = min(owned_buy_offer_size, owned_buy_cap_by_cash)

        # The cycle can't exceed what the first leg liquidates nor what the last leg buys back
        max_cycle_nominal = min(owned_sell_size, owned_buy_nominal)

        if max_cycle_nominal <= 0:
            return ZERO
        return max_cycle_nominal.to_integral_value(rounding=ROUND_FLOOR)

    def __str__(self) -> str:
        return self.name
