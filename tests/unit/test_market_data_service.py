"""
Unit tests for MarketDataService and the stub provider.

Tests cover:
- Getting quotes and prices from provider
- Quote caching behavior and TTL
- Graceful degradation on provider failure (stale cache, partial results)
- Industry lookup with the "Other" fallback
"""

from decimal import Decimal
from unittest.mock import MagicMock, patch

from papertrade.core.exceptions import QuotesUnavailableError
from papertrade.domain.views import Quote
from papertrade.providers import StubMarketDataProvider, YahooFinanceProvider, create_provider
from papertrade.services import MarketDataService, OTHER_INDUSTRY

from tests.conftest import DeterministicMarketProvider, eastern_datetime


def make_quote(symbol: str, price: str) -> Quote:
    return Quote(symbol=symbol, last_price=Decimal(price), as_of=eastern_datetime(2024, 6, 15, 14, 0, 0))


# =============================================================================
# BASIC QUOTE RETRIEVAL TESTS
# =============================================================================


class TestGetQuotes:
    """Tests for basic quote retrieval."""

    def test_get_quotes_returns_quote_data(self, market_data_service: MarketDataService):
        """
        GIVEN a provider with an AAPL quote
        WHEN I call get_quotes(["AAPL"])
        THEN the result contains AAPL at 185.50
        """
        quotes = market_data_service.get_quotes(["AAPL"])

        assert quotes["AAPL"].last_price == Decimal("185.50")
        assert quotes["AAPL"].as_of is not None

    def test_symbols_are_normalized_and_deduplicated(self, market_provider, market_data_service):
        """
        GIVEN lower-case and duplicate symbols
        WHEN I request quotes
        THEN results are keyed by upper-case symbol
        """
        quotes = market_data_service.get_quotes(["aapl", "AAPL ", "msft"])

        assert set(quotes) == {"AAPL", "MSFT"}

    def test_unknown_symbols_are_omitted(self, market_data_service: MarketDataService):
        """
        GIVEN a provider that cannot quote ZZZ
        WHEN I request AAPL and ZZZ
        THEN only AAPL is returned
        """
        quotes = market_data_service.get_quotes(["AAPL", "ZZZ"])

        assert set(quotes) == {"AAPL"}

    def test_empty_request_does_not_call_provider(self, market_provider, market_data_service):
        """
        GIVEN no symbols
        WHEN I request quotes
        THEN the result is empty and the provider is not called
        """
        assert market_data_service.get_quotes([]) == {}
        assert market_provider.quote_calls == 0

    def test_get_prices(self, market_data_service: MarketDataService):
        """
        GIVEN quotes for AAPL and MSFT
        WHEN I request prices
        THEN a symbol -> price map is returned
        """
        assert market_data_service.get_prices(["AAPL", "MSFT"]) == {
            "AAPL": Decimal("185.50"),
            "MSFT": Decimal("378.25"),
        }


# =============================================================================
# CACHING TESTS
# =============================================================================


class TestQuoteCaching:
    """Tests for quote caching behavior."""

    def test_cache_hit_does_not_call_provider(self):
        """
        GIVEN cache TTL is 60 seconds
        WHEN I call get_quotes twice within TTL
        THEN provider is called only once
        """
        mock_provider = MagicMock()
        mock_provider.get_quotes.return_value = {"AAPL": make_quote("AAPL", "185.50")}
        service = MarketDataService(provider=mock_provider, cache_ttl_seconds=60)

        quotes1 = service.get_quotes(["AAPL"])
        quotes2 = service.get_quotes(["AAPL"])

        assert mock_provider.get_quotes.call_count == 1
        assert quotes1 == quotes2

    def test_only_missing_symbols_are_fetched(self):
        """
        GIVEN AAPL is cached
        WHEN I request AAPL and MSFT
        THEN only MSFT is requested from the provider
        """
        mock_provider = MagicMock()
        mock_provider.get_quotes.side_effect = [
            {"AAPL": make_quote("AAPL", "185.50")},
            {"MSFT": make_quote("MSFT", "378.25")},
        ]
        service = MarketDataService(provider=mock_provider, cache_ttl_seconds=60)

        service.get_quotes(["AAPL"])
        quotes = service.get_quotes(["AAPL", "MSFT"])

        assert set(quotes) == {"AAPL", "MSFT"}
        assert mock_provider.get_quotes.call_args_list[1].args[0] == ["MSFT"]

    def test_expired_cache_refetches(self):
        """
        GIVEN cache TTL of zero
        WHEN I request the same symbol twice
        THEN the provider is called twice and the newer price wins
        """
        mock_provider = MagicMock()
        mock_provider.get_quotes.side_effect = [
            {"AAPL": make_quote("AAPL", "185.50")},
            {"AAPL": make_quote("AAPL", "190.00")},
        ]
        service = MarketDataService(provider=mock_provider, cache_ttl_seconds=0)

        service.get_quotes(["AAPL"])
        quotes = service.get_quotes(["AAPL"])

        assert mock_provider.get_quotes.call_count == 2
        assert quotes["AAPL"].last_price == Decimal("190.00")

    def test_each_symbol_expires_on_its_own_clock(self):
        """
        GIVEN AAPL cached at 14:00 with a 60s TTL
        WHEN MSFT is fetched at 14:02 and AAPL is requested again at 14:02:30
        THEN AAPL is refetched rather than served from the older entry
        """
        mock_provider = MagicMock()
        mock_provider.get_quotes.side_effect = [
            {"AAPL": make_quote("AAPL", "185.50")},
            {"MSFT": make_quote("MSFT", "378.25")},
            {"AAPL": make_quote("AAPL", "191.00")},
        ]
        service = MarketDataService(provider=mock_provider, cache_ttl_seconds=60)
        clock = [eastern_datetime(2024, 6, 15, 14, 0, 0)]

        with patch("papertrade.services.market_data_service.now_eastern", side_effect=lambda: clock[0]):
            service.get_quotes(["AAPL"])
            clock[0] = eastern_datetime(2024, 6, 15, 14, 2, 0)
            service.get_quotes(["MSFT"])
            clock[0] = eastern_datetime(2024, 6, 15, 14, 2, 30)
            quotes = service.get_quotes(["AAPL", "MSFT"])

        assert mock_provider.get_quotes.call_count == 3
        assert mock_provider.get_quotes.call_args_list[2].args[0] == ["AAPL"]
        assert quotes["AAPL"].last_price == Decimal("191.00")
        assert quotes["MSFT"].last_price == Decimal("378.25")


# =============================================================================
# GRACEFUL DEGRADATION TESTS
# =============================================================================


class TestGracefulDegradation:
    """Tests for provider failure handling."""

    def test_failure_without_cache_returns_empty(self, failing_market_data_service: MarketDataService):
        """
        GIVEN a failing provider and an empty cache
        WHEN I request quotes
        THEN an empty result is returned and no error escapes
        """
        assert failing_market_data_service.get_quotes(["AAPL"]) == {}

    def test_failure_falls_back_to_stale_cache(self):
        """
        GIVEN AAPL was cached and the cache has expired
        WHEN the provider then fails
        THEN the stale AAPL quote is returned
        """
        mock_provider = MagicMock()
        mock_provider.get_quotes.side_effect = [
            {"AAPL": make_quote("AAPL", "185.50")},
            QuotesUnavailableError("down"),
        ]
        service = MarketDataService(provider=mock_provider, cache_ttl_seconds=0)

        service.get_quotes(["AAPL"])
        quotes = service.get_quotes(["AAPL", "MSFT"])

        assert quotes == {"AAPL": make_quote("AAPL", "185.50")}

    def test_unexpected_provider_error_is_contained(self):
        """
        GIVEN a provider raising a generic exception
        WHEN I request prices
        THEN an empty map is returned
        """
        mock_provider = MagicMock()
        mock_provider.get_quotes.side_effect = ConnectionError("reset")
        service = MarketDataService(provider=mock_provider)

        assert service.get_prices(["AAPL"]) == {}


# =============================================================================
# INDUSTRY TESTS
# =============================================================================


class TestGetIndustries:
    """Tests for industry lookup."""

    def test_known_and_unknown_symbols(self, market_data_service: MarketDataService):
        """
        GIVEN AAPL has an industry and ZZZ does not
        WHEN I look both up
        THEN ZZZ maps to "Other"
        """
        industries = market_data_service.get_industries(["AAPL", "zzz"])

        assert industries == {"AAPL": "Consumer Electronics", "ZZZ": OTHER_INDUSTRY}

    def test_failure_maps_everything_to_other(self, failing_market_data_service: MarketDataService):
        """
        GIVEN a failing provider
        WHEN I look up industries
        THEN every symbol maps to "Other"
        """
        assert failing_market_data_service.get_industries(["AAPL", "MSFT"]) == {
            "AAPL": OTHER_INDUSTRY,
            "MSFT": OTHER_INDUSTRY,
        }

    def test_industries_are_cached(self, market_provider: DeterministicMarketProvider, market_data_service):
        """
        GIVEN AAPL's industry was looked up
        WHEN I look it up again
        THEN the provider is not called a second time
        """
        market_data_service.get_industries(["AAPL"])
        market_data_service.get_industries(["AAPL"])

        assert market_provider.industry_calls == 1


# =============================================================================
# STUB PROVIDER TESTS
# =============================================================================


class TestStubProvider:
    """Tests for the offline stub provider."""

    def test_known_symbol_prices_are_fixed(self):
        """
        GIVEN the stub provider
        WHEN I quote AAPL
        THEN the fixed price 185.50 is returned
        """
        assert StubMarketDataProvider().get_quotes(["aapl"])["AAPL"].last_price == Decimal("185.50")

    def test_unknown_symbol_prices_are_seeded_and_stable(self):
        """
        GIVEN two stub providers with the same seed
        WHEN each quotes ZZZ twice
        THEN all four prices are equal and within 50..250
        """
        first = StubMarketDataProvider(seed=7)
        second = StubMarketDataProvider(seed=7)

        prices = [p.get_quotes(["ZZZ"])["ZZZ"].last_price for p in (first, first, second, second)]

        assert len(set(prices)) == 1
        assert Decimal("50") <= prices[0] <= Decimal("250")

    def test_industries_only_for_known_symbols(self):
        """
        GIVEN the stub provider
        WHEN I look up AAPL and ZZZ
        THEN only AAPL has an industry
        """
        assert StubMarketDataProvider().get_industries(["AAPL", "ZZZ"]) == {"AAPL": "Consumer Electronics"}

    def test_create_provider(self):
        """
        GIVEN provider names from settings
        WHEN providers are created
        THEN "yahoo" gives YahooFinanceProvider and "stub" the stub
        """
        assert isinstance(create_provider("yahoo"), YahooFinanceProvider)
        assert isinstance(create_provider("stub"), StubMarketDataProvider)
