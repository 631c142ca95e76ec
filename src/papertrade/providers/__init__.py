"""Market data providers module."""

from papertrade.providers.market_data_provider import (
    QuoteProvider,
    IndustryClassifier,
    MarketDataProvider,
)
from papertrade.providers.stub_provider import StubMarketDataProvider
from papertrade.providers.yahoo_provider import YahooFinanceProvider

__all__ = [
    "QuoteProvider",
    "IndustryClassifier",
    "MarketDataProvider",
    "StubMarketDataProvider",
    "YahooFinanceProvider",
    "create_provider",
]


def create_provider(name: str, fetch_timeout_seconds: float = 10.0) -> MarketDataProvider:
    """Build the provider selected in settings."""
    if name == "yahoo":
        return YahooFinanceProvider(fetch_timeout_seconds=fetch_timeout_seconds)
    return StubMarketDataProvider()
