"""
Ratio trade evaluation and monitoring engine.
"""

from ratio_arb.engine.buy_sell_trade import BuySellTrade
from ratio_arb.engine.ratio_trade import NOT_TRADABLE, RatioTrade
from ratio_arb.engine.ratio_monitor import RatioTradeMonitor

__all__ = [
    "BuySellTrade",
    "NOT_TRADABLE",
    "RatioTrade",
    "RatioTradeMonitor",
]
