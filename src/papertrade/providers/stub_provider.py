"""Stub market data provider for offline/testing use."""

from decimal import Decimal
import random

from papertrade.core.timezone import now_eastern
from papertrade.domain.views import Quote


# Deterministic fake prices for common symbols
_STUB_PRICES: dict[str, Decimal] = {
    "AAPL": Decimal("185.50"),
    "GOOGL": Decimal("142.75"),
    "MSFT": Decimal("378.25"),
    "AMZN": Decimal("178.50"),
    "TSLA": Decimal("248.75"),
    "NVDA": Decimal("485.25"),
    "META": Decimal("505.50"),
    "JPM": Decimal("196.40"),
    "XOM": Decimal("112.30"),
    "JNJ": Decimal("156.10"),
}

_STUB_INDUSTRIES: dict[str, str] = {
    "AAPL": "Consumer Electronics",
    "GOOGL": "Internet Content & Information",
    "MSFT": "Software - Infrastructure",
    "AMZN": "Internet Retail",
    "TSLA": "Auto Manufacturers",
    "NVDA": "Semiconductors",
    "META": "Internet Content & Information",
    "JPM": "Banks - Diversified",
    "XOM": "Oil & Gas Integrated",
    "JNJ": "Drug Manufacturers - General",
}


class StubMarketDataProvider:
    """
    Stub provider with deterministic fake data for offline operation.

    Uses predefined prices for common symbols; generates seeded random prices
    for unknown symbols. Unknown symbols have no industry.
    """

    def __init__(self, seed: int = 42):
        self._rng = random.Random(seed)
        self._generated: dict[str, Decimal] = {}

    def get_quotes(self, symbols: list[str]) -> dict[str, Quote]:
        """Return stub quotes for requested symbols."""
        as_of = now_eastern()
        result: dict[str, Quote] = {}

        for symbol in symbols:
            upper_symbol = symbol.upper()
            if upper_symbol in _STUB_PRICES:
                last_price = _STUB_PRICES[upper_symbol]
            else:
                if upper_symbol not in self._generated:
                    base_price = Decimal(str(50 + self._rng.random() * 200))
                    self._generated[upper_symbol] = base_price.quantize(Decimal("0.01"))
                last_price = self._generated[upper_symbol]

            result[upper_symbol] = Quote(
                symbol=upper_symbol,
                last_price=last_price,
                as_of=as_of,
            )

        return result

    def get_industries(self, symbols: list[str]) -> dict[str, str]:
        """Return stub industries for known symbols."""
        return {
            s.upper(): _STUB_INDUSTRIES[s.upper()]
            for s in symbols
            if s.upper() in _STUB_INDUSTRIES
        }
