"""Browser flows exercised by the smoke tests."""

from .market_search import MarketSearchFlow, SearchOutcome

__all__ = [
    "MarketSearchFlow",
    "SearchOutcome",
]
