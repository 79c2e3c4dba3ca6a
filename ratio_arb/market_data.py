"""
In-memory market data store.
Feed handlers push order book snapshots here; legs pull the latest snapshot on refresh.
"""

import threading
from typing import Dict, List, Optional

from ratio_arb.models import InstrumentId, MarketData
from ratio_arb.logger import get_logger


logger = get_logger("market_data")


class MarketDataStore:
    """
    Latest order book snapshot per instrument.

    Snapshots are immutable, so readers never observe a half-applied update.
    The lock only guards the mapping itself.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._books: Dict[InstrumentId, MarketData] = {}
        self._updates = 0

    def update(self, instrument_id: InstrumentId, market_data: MarketData) -> None:
        """Replace the snapshot held for an instrument."""
        with self._lock:
            self._books[instrument_id] = market_data
            self._updates += 1

        logger.debug(
            "Market data updated",
            symbol=instrument_id.symbol,
            bids=len(market_data.bids),
            offers=len(market_data.offers),
        )

    def get(self, instrument_id: InstrumentId) -> Optional[MarketData]:
        """Latest snapshot for an instrument, or None if nothing was received yet."""
        with self._lock:
            return self._books.get(instrument_id)

    def symbols(self) -> List[str]:
        with self._lock:
            return sorted(instrument_id.symbol for instrument_id in self._books)

    def clear(self) -> None:
        with self._lock:
            self._books.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._books)

    @property
    def metrics(self) -> dict:
        """Get store metrics."""
        with self._lock:
            return {
                "instruments": len(self._books),
                "updates": self._updates,
            }
