"""
Structured logging configuration for the ratio trade arbitrage engine.
Uses structlog for rich, structured logging output.
"""

import logging
import time
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Iterator

import structlog
from rich.console import Console
from rich.logging import RichHandler

from ratio_arb.config import get_config


# Rich console for pretty output
console = Console()


def add_timestamp(
    logger: Any, method_name: str, event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """Add ISO timestamp to log events."""
    event_dict["timestamp"] = datetime.utcnow().isoformat()
    return event_dict


def add_component(
    logger: Any, method_name: str, event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """Ensure component is present in log events."""
    if "component" not in event_dict:
        event_dict["component"] = "main"
    return event_dict


def setup_logging() -> None:
    """Configure structured logging for the application."""
    config = get_config()
    log_level = getattr(logging, config.monitoring.log_level.upper(), logging.INFO)

    # Configure standard library logging
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=console,
                rich_tracebacks=True,
                show_time=True,
                show_path=False,
            )
        ],
    )

    logging.getLogger("asyncio").setLevel(logging.WARNING)

    processors = [
        structlog.stdlib.filter_by_level,
        add_timestamp,
        add_component,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if config.development.debug_mode:
        # Pretty console output for development
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        # JSON output for production
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(component: str) -> structlog.stdlib.BoundLogger:
    """Get a logger instance bound to a specific component."""
    return structlog.get_logger().bind(component=component)


@contextmanager
def track_time(message: str, component: str = "telemetry") -> Iterator[None]:
    """Log the start and completion of a block along with its elapsed time."""
    logger = get_logger(component)
    logger.info(f"Start {message}")
    started = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(f"Completed {message}", elapsed_ms=round(elapsed_ms, 3))


class RatioLogger:
    """Specialized logger for ratio trade activity."""

    def __init__(self):
        self.logger = get_logger("ratios")

    def log_opportunity(
        self,
        name: str,
        profit: Decimal,
        profit_last: Decimal,
        max_tradable_size: Decimal,
    ) -> None:
        """Log detection of a profitable ratio trade."""
        self.logger.info(
            "🎯 ratio_opportunity",
            pair=name,
            profit=f"{profit:.2%}",
            profit_last=f"{profit_last:.2%}",
            max_size=str(max_tradable_size),
        )

    def log_scan_summary(
        self,
        trades: int,
        ready: int,
        opportunities: int,
    ) -> None:
        """Log the outcome of a monitor scan."""
        self.logger.debug(
            "scan_summary",
            total_trades=trades,
            ready_trades=ready,
            opportunities=opportunities,
        )


# Global logger instance
ratio_logger = RatioLogger()
