"""
Data models for the ratio trade arbitrage engine.
Defines the order-book, instrument and readiness structures used throughout the system.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple


ZERO = Decimal("0")


def to_decimal(value) -> Decimal:
    """Convert a quote field to Decimal without picking up binary float noise."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class BookStatus(Enum):
    """Outcome of the order-book readiness check."""
    READY = "ready"
    MISSING_SIDE = "missing_side"
    EMPTY_BOOK = "empty_book"


@dataclass(frozen=True)
class InstrumentId:
    """Market-qualified instrument identifier."""
    symbol: str
    market_id: str = "ROFX"

    def __str__(self) -> str:
        return self.symbol


@dataclass(frozen=True)
class Instrument:
    """Static instrument metadata."""
    instrument_id: InstrumentId
    # Multiplier turning a quoted price into cash per nominal (0.01 for prices per 100 VN)
    price_conversion_factor: Decimal = Decimal("1")
    currency: str = "ARS"

    @property
    def symbol(self) -> str:
        return self.instrument_id.symbol


@dataclass(frozen=True)
class PriceLevel:
    """A single resting quote."""
    price: Decimal
    size: Decimal


@dataclass(frozen=True)
class MarketData:
    """
    Order book snapshot for one instrument.

    Bids are kept best-first (highest price), offers best-first (lowest price).
    Top-of-book accessors return zero when the requested side is empty.
    """
    bids: Tuple[PriceLevel, ...] = ()
    offers: Tuple[PriceLevel, ...] = ()
    last: Decimal = ZERO
    timestamp: datetime = field(default_factory=datetime.utcnow)

    @classmethod
    def from_levels(
        cls,
        bids=(),
        offers=(),
        last: Decimal = ZERO,
        timestamp: Optional[datetime] = None,
    ) -> "MarketData":
        """Build a snapshot from unordered (price, size) pairs."""
        bid_levels = sorted(
            (PriceLevel(to_decimal(price), to_decimal(size)) for price, size in bids),
            key=lambda level: level.price,
            reverse=True,
        )
        offer_levels = sorted(
            (PriceLevel(to_decimal(price), to_decimal(size)) for price, size in offers),
            key=lambda level: level.price,
        )
        return cls(
            bids=tuple(bid_levels),
            offers=tuple(offer_levels),
            last=to_decimal(last),
            timestamp=timestamp or datetime.utcnow(),
        )

    def has_bids(self) -> bool:
        return len(self.bids) > 0

    def has_offers(self) -> bool:
        return len(self.offers) > 0

    def get_top_bid_price(self) -> Decimal:
        return self.bids[0].price if self.bids else ZERO

    def get_top_bid_size(self) -> Decimal:
        return self.bids[0].size if self.bids else ZERO

    def get_top_offer_price(self) -> Decimal:
        return self.offers[0].price if self.offers else ZERO

    def get_top_offer_size(self) -> Decimal:
        return self.offers[0].size if self.offers else ZERO


@dataclass
class InstrumentWithData:
    """An instrument paired with its latest order book snapshot."""
    instrument: Instrument
    data: Optional[MarketData] = None

    @property
    def symbol(self) -> str:
        return self.instrument.symbol


@dataclass(frozen=True)
class BookReadiness:
    """
    Result of checking whether a ratio trade has the quotes it needs.

    `leg` and `side` name the first failing book ("sell_then_buy", "sell").
    Both are None when the check passed; `side` is None when a whole leg is missing.
    """
    status: BookStatus
    leg: Optional[str] = None
    side: Optional[str] = None

    @property
    def is_ready(self) -> bool:
        return self.status is BookStatus.READY

    def __str__(self) -> str:
        if self.is_ready:
            return self.status.value
        location = ".".join(part for part in (self.leg, self.side) if part)
        return f"{self.status.value}:{location}" if location else self.status.value


@dataclass(frozen=True)
class RatioSnapshot:
    """Point-in-time evaluation of a ratio trade."""
    name: str
    profit: Decimal
    profit_last: Decimal
    max_tradable_size: Decimal
    readiness: BookReadiness
    captured_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def owned_venta_max_size(self) -> int:
        return int(self.max_tradable_size)
