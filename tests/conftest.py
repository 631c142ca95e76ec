"""
Pytest configuration and fixtures for paper trading tests.

This module provides:
- In-memory SQLite database fixtures
- Factory helpers for teachers, students and accounts with holdings
- Deterministic and failing market data providers
- Time helpers for Eastern timezone
- Service, repository and API client fixtures
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional

import pytest
from sqlalchemy import StaticPool
from sqlalchemy.orm import Session
from fastapi.testclient import TestClient

from papertrade.config.settings import reset_settings
from papertrade.core.exceptions import QuotesUnavailableError
from papertrade.core.timezone import EASTERN_TZ
from papertrade.domain.models import Account, Achievement, Actor, Holding, Role
from papertrade.domain.views import Quote
from papertrade.main import create_app
from papertrade.repositories.sqlalchemy import (
    Database,
    SqlAlchemyAccountRepository,
    SqlAlchemyTradeRepository,
)
from papertrade.services import (
    AchievementRules,
    AchievementService,
    LeaderboardService,
    LedgerService,
    MarketDataService,
    RosterService,
)


# =============================================================================
# TIMEZONE HELPERS
# =============================================================================


def eastern_datetime(
    year: int,
    month: int,
    day: int,
    hour: int = 10,
    minute: int = 0,
    second: int = 0,
) -> datetime:
    """Create a localized datetime in US/Eastern timezone."""
    return EASTERN_TZ.localize(datetime(year, month, day, hour, minute, second))


@pytest.fixture
def fixed_now() -> datetime:
    """Fixed 'now' timestamp for deterministic tests."""
    return eastern_datetime(2024, 6, 15, 14, 30, 0)


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="function")
def database():
    """Open a shared in-memory SQLite database."""
    # Reset settings for clean state
    reset_settings()

    db = Database("sqlite:///:memory:", poolclass=StaticPool).open()
    yield db
    db.close()


@pytest.fixture(scope="function")
def test_session(database) -> Session:
    """Create test database session."""
    session = database.session()
    try:
        yield session
    finally:
        session.close()


# =============================================================================
# REPOSITORY FIXTURES
# =============================================================================


@pytest.fixture
def account_repo(test_session) -> SqlAlchemyAccountRepository:
    """Provide test AccountRepository."""
    return SqlAlchemyAccountRepository(test_session)


@pytest.fixture
def trade_repo(test_session) -> SqlAlchemyTradeRepository:
    """Provide test TradeRepository."""
    return SqlAlchemyTradeRepository(test_session)


# =============================================================================
# MARKET DATA FIXTURES
# =============================================================================


class DeterministicMarketProvider:
    """
    Deterministic market data provider for testing.

    Provides fixed quotes and industries with no randomness; symbols not
    listed are omitted from results. Counts calls so caching can be checked.
    """

    FIXED_PRICES = {
        "AAPL": Decimal("185.50"),
        "GOOGL": Decimal("142.75"),
        "MSFT": Decimal("378.25"),
        "TSLA": Decimal("248.75"),
        "XOM": Decimal("112.30"),
    }

    FIXED_INDUSTRIES = {
        "AAPL": "Consumer Electronics",
        "GOOGL": "Internet Content & Information",
        "MSFT": "Software - Infrastructure",
        "TSLA": "Auto Manufacturers",
        "XOM": "Oil & Gas Integrated",
    }

    def __init__(
        self,
        prices: Optional[dict[str, Decimal]] = None,
        industries: Optional[dict[str, str]] = None,
        as_of: Optional[datetime] = None,
    ):
        self.prices = dict(self.FIXED_PRICES if prices is None else prices)
        self.industries = dict(self.FIXED_INDUSTRIES if industries is None else industries)
        self._as_of = as_of or eastern_datetime(2024, 6, 15, 16, 0, 0)
        self.quote_calls = 0
        self.industry_calls = 0

    def get_quotes(self, symbols: list[str]) -> dict[str, Quote]:
        """Return deterministic quotes for requested symbols."""
        self.quote_calls += 1
        return {
            s.upper(): Quote(symbol=s.upper(), last_price=self.prices[s.upper()], as_of=self._as_of)
            for s in symbols
            if s.upper() in self.prices
        }

    def get_industries(self, symbols: list[str]) -> dict[str, str]:
        """Return deterministic industries for requested symbols."""
        self.industry_calls += 1
        return {s.upper(): self.industries[s.upper()] for s in symbols if s.upper() in self.industries}


class FailingMarketProvider:
    """Market provider whose every lookup fails."""

    def get_quotes(self, symbols: list[str]) -> dict[str, Quote]:
        raise QuotesUnavailableError("Network unavailable")

    def get_industries(self, symbols: list[str]) -> dict[str, str]:
        raise QuotesUnavailableError("Network unavailable")


@pytest.fixture
def market_provider() -> DeterministicMarketProvider:
    """Provide deterministic market data provider."""
    return DeterministicMarketProvider()


@pytest.fixture
def failing_provider() -> FailingMarketProvider:
    """Provide a provider that always fails."""
    return FailingMarketProvider()


@pytest.fixture
def market_data_service(market_provider) -> MarketDataService:
    """Provide MarketDataService over the deterministic provider."""
    return MarketDataService(provider=market_provider, cache_ttl_seconds=60)


@pytest.fixture
def failing_market_data_service(failing_provider) -> MarketDataService:
    """Provide MarketDataService whose provider always fails."""
    return MarketDataService(provider=failing_provider, cache_ttl_seconds=60)


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def rules() -> AchievementRules:
    """Default badge thresholds."""
    return AchievementRules()


@pytest.fixture
def ledger_service(account_repo, trade_repo, market_data_service, rules) -> LedgerService:
    """Provide LedgerService with test repositories."""
    return LedgerService(
        account_repo=account_repo,
        trade_repo=trade_repo,
        market_data_service=market_data_service,
        rules=rules,
    )


@pytest.fixture
def achievement_service(account_repo, trade_repo, market_data_service, rules) -> AchievementService:
    """Provide AchievementService with test repositories."""
    return AchievementService(
        account_repo=account_repo,
        trade_repo=trade_repo,
        market_data_service=market_data_service,
        rules=rules,
    )


@pytest.fixture
def leaderboard_service(account_repo, market_data_service) -> LeaderboardService:
    """Provide LeaderboardService with test repositories."""
    return LeaderboardService(
        account_repo=account_repo,
        market_data_service=market_data_service,
    )


@pytest.fixture
def roster_service(account_repo) -> RosterService:
    """Provide RosterService with default starting cash."""
    return RosterService(account_repo=account_repo)


# =============================================================================
# FACTORY FIXTURES
# =============================================================================


def actor_for(account: Account) -> Actor:
    """Actor acting as the given account."""
    return Actor(account_id=account.account_id, role=account.role)


@pytest.fixture
def account_factory(account_repo) -> Callable[..., Account]:
    """
    Factory for stored accounts, optionally with holdings and badges.

    holdings: iterable of (symbol, shares, average_cost, acquired_at) tuples.
    """

    def _create(
        username: Optional[str] = None,
        role: Role = Role.STUDENT,
        cash: Decimal = Decimal("100000"),
        teacher: Optional[Account] = None,
        holdings: tuple = (),
        achievements: tuple = (),
        account_id: Optional[str] = None,
    ) -> Account:
        account_id = account_id or str(uuid.uuid4())
        created = account_repo.create(
            Account(
                account_id=account_id,
                username=username or f"user-{account_id[:8]}",
                role=role,
                cash=Decimal(str(cash)),
                teacher_id=teacher.account_id if teacher else None,
            )
        )
        if not holdings and not achievements:
            return created

        created.holdings = [
            Holding(
                symbol=symbol,
                shares=Decimal(str(shares)),
                average_cost=Decimal(str(average_cost)),
                acquired_at_est=acquired_at,
            )
            for symbol, shares, average_cost, acquired_at in holdings
        ]
        created.achievements = {Achievement(a) for a in achievements}
        return account_repo.save(created, expected_version=created.version)

    return _create


@pytest.fixture
def teacher(account_factory) -> Account:
    """A teacher with no cash."""
    return account_factory(username="ms_frizzle", role=Role.TEACHER, cash=Decimal("0"))


@pytest.fixture
def student(account_factory, teacher) -> Account:
    """A student of `teacher` with 100000 cash."""
    return account_factory(username="arnold", teacher=teacher)


# =============================================================================
# API FIXTURES
# =============================================================================


def headers_for(account: Account) -> dict[str, str]:
    """Identity headers for an account."""
    return {"X-Account-Id": account.account_id, "X-Account-Role": account.role.value}


@pytest.fixture
def client(database, market_data_service) -> TestClient:
    """Create test client sharing the test database and market data service."""
    app = create_app(database=database, market_data_service=market_data_service)
    with TestClient(app) as test_client:
        yield test_client
