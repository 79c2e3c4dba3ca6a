"""
Ratio trade arbitrage engine.
Profitability and liquidity-chained sizing for two-leg conversion cycles.
"""

__version__ = "0.1.0"
