"""Market data provider protocols."""

from typing import Protocol

from papertrade.domain.views import Quote


class QuoteProvider(Protocol):
    """
    Protocol for quote sources.

    Missing or unreachable symbols are omitted from the result. A total
    failure may raise QuotesUnavailableError (or any network error); callers
    go through MarketDataService, which degrades instead of failing.
    """

    def get_quotes(self, symbols: list[str]) -> dict[str, Quote]:
        """Fetch last-trade quotes for multiple symbols."""
        ...


class IndustryClassifier(Protocol):
    """Protocol for symbol -> industry lookups."""

    def get_industries(self, symbols: list[str]) -> dict[str, str]:
        """Return industry names for the symbols that could be classified."""
        ...


class MarketDataProvider(QuoteProvider, IndustryClassifier, Protocol):
    """A provider that supplies both quotes and industries."""
