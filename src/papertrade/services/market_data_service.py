"""Market data service for quotes and industries."""

import logging
from datetime import datetime
from decimal import Decimal

from papertrade.core.timezone import now_eastern
from papertrade.domain.views import Quote
from papertrade.providers.market_data_provider import MarketDataProvider

logger = logging.getLogger(__name__)

OTHER_INDUSTRY = "Other"


def _normalize(symbols: list[str]) -> list[str]:
    seen: dict[str, None] = {}
    for s in symbols:
        key = (s or "").strip().upper()
        if key:
            seen[key] = None
    return list(seen)


class MarketDataService:
    """
    Service for fetching market data (quotes, industries).

    Wraps provider with caching and graceful degradation: provider failures
    are logged and answered from cache, so callers never see them.
    """

    def __init__(
        self,
        provider: MarketDataProvider,
        cache_ttl_seconds: int = 60,
    ):
        self._provider = provider
        self._cache_ttl = cache_ttl_seconds
        # symbol -> (quote, when it was fetched)
        self._quote_cache: dict[str, tuple[Quote, datetime]] = {}
        self._industry_cache: dict[str, str] = {}

    def get_quotes(self, symbols: list[str]) -> dict[str, Quote]:
        """
        Fetch quotes for symbols with caching.

        Each symbol's quote is served from cache while it is within the TTL;
        only missing or expired symbols go to the provider. On provider
        failure any cached quote, however old, is used. Symbols with no
        quote are omitted.
        """
        symbols = _normalize(symbols)
        if not symbols:
            return {}

        now = now_eastern()
        result = {s: self._quote_cache[s][0] for s in symbols if self._is_fresh(s, now)}
        missing = [s for s in symbols if s not in result]
        if not missing:
            return result

        try:
            new_quotes = self._provider.get_quotes(missing)
        except Exception:
            logger.warning(
                "Quote fetch failed for %s; using cached quotes",
                ",".join(missing),
                exc_info=True,
            )
            for s in missing:
                if s in self._quote_cache:
                    result[s] = self._quote_cache[s][0]
        else:
            fetched_at = now_eastern()
            for s, quote in new_quotes.items():
                self._quote_cache[s] = (quote, fetched_at)
            result.update(new_quotes)

        return {s: result[s] for s in symbols if s in result}

    def get_prices(self, symbols: list[str]) -> dict[str, Decimal]:
        """Price snapshot (symbol -> last price) for valuation."""
        return {s: q.last_price for s, q in self.get_quotes(symbols).items()}

    def get_industries(self, symbols: list[str]) -> dict[str, str]:
        """
        Resolve an industry for every symbol.

        Unknown symbols and lookup failures map to the "Other" bucket.
        Successful lookups are cached without expiry.
        """
        symbols = _normalize(symbols)
        missing = [s for s in symbols if s not in self._industry_cache]
        if missing:
            try:
                fetched = self._provider.get_industries(missing)
            except Exception:
                logger.warning(
                    "Industry lookup failed for %s; using %r",
                    ",".join(missing),
                    OTHER_INDUSTRY,
                    exc_info=True,
                )
            else:
                self._industry_cache.update(
                    {s: industry for s, industry in fetched.items() if industry}
                )

        return {s: self._industry_cache.get(s, OTHER_INDUSTRY) for s in symbols}

    def _is_fresh(self, symbol: str, now: datetime) -> bool:
        """Check if symbol's cached quote is within TTL."""
        entry = self._quote_cache.get(symbol)
        if entry is None:
            return False
        return (now - entry[1]).total_seconds() < self._cache_ttl
