"""
Ratio trade monitoring.
Keeps a set of pairings, refreshes them against the latest books and reports opportunities.
"""

from datetime import datetime, timedelta
from decimal import Decimal
from itertools import permutations
from typing import Dict, Iterable, List

from ratio_arb.models import RatioSnapshot
from ratio_arb.config import get_config
from ratio_arb.engine.buy_sell_trade import BuySellTrade
from ratio_arb.engine.ratio_trade import RatioTrade
from ratio_arb.logger import get_logger, ratio_logger


logger = get_logger("ratio_monitor")


class RatioTradeMonitor:
    """
    Scans ratio trades and flags the profitable ones.

    A snapshot is reported as an opportunity when its best-quote profit reaches
    the configured minimum and the books support at least the minimum size.
    The same pairing is not reported again until its cooldown expires.
    """

    def __init__(self):
        self.config = get_config()

        self._trades: Dict[str, RatioTrade] = {}

        # Tracking
        self._scans = 0
        self._opportunities_found = 0

        # Recent opportunities to avoid duplicates
        self._recent_opportunities: Dict[str, datetime] = {}

    @property
    def trades(self) -> List[RatioTrade]:
        return list(self._trades.values())

    def add(self, ratio_trade: RatioTrade) -> None:
        self._trades[ratio_trade.name] = ratio_trade
        logger.info("Monitoring ratio trade", pair=ratio_trade.name)

    def remove(self, name: str) -> None:
        if self._trades.pop(name, None) is not None:
            self._recent_opportunities.pop(name, None)
            logger.info("Stopped monitoring ratio trade", pair=name)

    def pair_legs(self, legs: Iterable[BuySellTrade]) -> List[RatioTrade]:
        """Monitor every ordered pairing of distinct legs."""
        created = []
        for sell_then_buy, buy_then_sell in permutations(list(legs), 2):
            ratio_trade = RatioTrade(sell_then_buy, buy_then_sell)
            self.add(ratio_trade)
            created.append(ratio_trade)
        return created

    def scan(self) -> List[RatioSnapshot]:
        """
        Refresh every monitored trade and snapshot it.

        Returns:
            Snapshots sorted by best-quote profit, most profitable first
        """
        snapshots = []
        for ratio_trade in self._trades.values():
            ratio_trade.refresh_data()
            snapshots.append(ratio_trade.snapshot())

        snapshots.sort(key=lambda s: s.profit, reverse=True)

        opportunities = 0
        for snapshot in snapshots:
            if self._is_opportunity(snapshot) and not self._is_on_cooldown(snapshot.name):
                self._recent_opportunities[snapshot.name] = snapshot.captured_at
                self._opportunities_found += 1
                opportunities += 1
                ratio_logger.log_opportunity(
                    name=snapshot.name,
                    profit=snapshot.profit,
                    profit_last=snapshot.profit_last,
                    max_tradable_size=snapshot.max_tradable_size,
                )

        self.cleanup_old_opportunities()
        self._scans += 1
        ratio_logger.log_scan_summary(
            trades=len(snapshots),
            ready=sum(1 for s in snapshots if s.readiness.is_ready),
            opportunities=opportunities,
        )
        return snapshots

    def _is_opportunity(self, snapshot: RatioSnapshot) -> bool:
        if not snapshot.readiness.is_ready:
            return False
        if snapshot.profit < Decimal(str(self.config.ratio.min_profit)):
            return False
        return snapshot.max_tradable_size >= self.config.ratio.min_tradable_size

    def _is_on_cooldown(self, name: str) -> bool:
        last_time = self._recent_opportunities.get(name)
        if last_time is None:
            return False
        elapsed = (datetime.utcnow() - last_time).total_seconds()
        return elapsed < self.config.ratio.opportunity_cooldown_seconds

    def cleanup_old_opportunities(self) -> None:
        """Forget opportunities whose cooldown has expired."""
        cutoff = datetime.utcnow() - timedelta(seconds=self.config.ratio.opportunity_cooldown_seconds)

        old_keys = [
            k for k, v in self._recent_opportunities.items()
            if v < cutoff
        ]

        for key in old_keys:
            del self._recent_opportunities[key]

    @property
    def metrics(self) -> dict:
        """Get monitor metrics."""
        return {
            "scans": self._scans,
            "opportunities_found": self._opportunities_found,
            "monitored_trades": len(self._trades),
        }
