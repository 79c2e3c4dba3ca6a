"""
Order book snapshot files.

A snapshot file captures the books of a set of instruments together with the
legs and ratio trades built from them, so a pairing can be evaluated offline:

    {
      "instruments": [
        {"symbol": "AL30", "price_conversion_factor": "0.01",
         "bids": [["25100", "1000"]], "offers": [["25150", "800"]], "last": "25120"}
      ],
      "legs": [{"buy": "AL30", "sell": "AL30D"}],
      "ratio_trades": [{"sell_then_buy": "AL30-AL30D", "buy_then_sell": "GD30-GD30D"}]
    }
"""

from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, Field, ValidationError, field_validator

from ratio_arb.models import Instrument, InstrumentId, InstrumentWithData, MarketData
from ratio_arb.market_data import MarketDataStore
from ratio_arb.engine.buy_sell_trade import BuySellTrade
from ratio_arb.engine.ratio_trade import RatioTrade
from ratio_arb.logger import get_logger


logger = get_logger("snapshot")


class SnapshotError(Exception):
    """Raised when a snapshot file cannot be read or is inconsistent."""


class InstrumentBook(BaseModel):
    """One instrument and its book as stored in a snapshot file."""
    symbol: str
    market_id: str = "ROFX"
    currency: str = "ARS"
    price_conversion_factor: Decimal = Decimal("1")
    bids: List[Tuple[Decimal, Decimal]] = Field(default_factory=list)
    offers: List[Tuple[Decimal, Decimal]] = Field(default_factory=list)
    last: Decimal = Decimal("0")

    @field_validator("price_conversion_factor")
    @classmethod
    def validate_factor(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("price_conversion_factor must be positive")
        return v


class LegSpec(BaseModel):
    buy: str
    sell: str
    name: Optional[str] = None


class RatioTradeSpec(BaseModel):
    sell_then_buy: str
    buy_then_sell: str


class SnapshotFile(BaseModel):
    instruments: List[InstrumentBook]
    legs: List[LegSpec] = Field(default_factory=list)
    ratio_trades: List[RatioTradeSpec] = Field(default_factory=list)


@dataclass
class LoadedSnapshot:
    """Everything built from a snapshot file."""
    store: MarketDataStore
    legs: Dict[str, BuySellTrade] = field(default_factory=dict)
    ratio_trades: List[RatioTrade] = field(default_factory=list)


def parse_snapshot(document: Union[str, bytes, dict]) -> LoadedSnapshot:
    """Build the store, legs and ratio trades described by a snapshot document."""
    try:
        if isinstance(document, dict):
            parsed = SnapshotFile.model_validate(document)
        else:
            parsed = SnapshotFile.model_validate_json(document)
    except ValidationError as e:
        raise SnapshotError(f"Invalid snapshot: {e}") from e

    store = MarketDataStore()
    instruments: Dict[str, Instrument] = {}

    for book in parsed.instruments:
        instrument = Instrument(
            instrument_id=InstrumentId(symbol=book.symbol, market_id=book.market_id),
            price_conversion_factor=book.price_conversion_factor,
            currency=book.currency,
        )
        instruments[book.symbol] = instrument
        store.update(
            instrument.instrument_id,
            MarketData.from_levels(bids=book.bids, offers=book.offers, last=book.last),
        )

    def side_for(symbol: str) -> InstrumentWithData:
        if symbol not in instruments:
            raise SnapshotError(f"Unknown instrument: {symbol}")
        instrument = instruments[symbol]
        return InstrumentWithData(instrument, store.get(instrument.instrument_id))

    legs: Dict[str, BuySellTrade] = {}
    for leg_spec in parsed.legs:
        leg = BuySellTrade(
            side_for(leg_spec.buy), side_for(leg_spec.sell), store=store, name=leg_spec.name
        )
        if leg.name in legs:
            raise SnapshotError(f"Duplicate leg: {leg.name}")
        legs[leg.name] = leg

    ratio_trades = []
    for trade_spec in parsed.ratio_trades:
        missing = [n for n in (trade_spec.sell_then_buy, trade_spec.buy_then_sell) if n not in legs]
        if missing:
            raise SnapshotError(f"Unknown leg: {', '.join(missing)}")
        ratio_trades.append(
            RatioTrade(legs[trade_spec.sell_then_buy], legs[trade_spec.buy_then_sell])
        )

    logger.info(
        "Snapshot loaded",
        instruments=len(instruments),
        legs=len(legs),
        ratio_trades=len(ratio_trades),
    )
    return LoadedSnapshot(store=store, legs=legs, ratio_trades=ratio_trades)


def load_snapshot(path: Path) -> LoadedSnapshot:
    """Read and parse a snapshot file."""
    try:
        content = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise SnapshotError(f"Cannot read snapshot {path}: {e}") from e

    return parse_snapshot(content)
