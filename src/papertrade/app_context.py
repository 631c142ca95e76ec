"""Application context for in-process service access.

Offers the same operations as the HTTP API without going through FastAPI.
Used by code embedding the engine directly, such as classroom tooling.
"""

from contextlib import contextmanager
from decimal import Decimal
from typing import Any, Iterator, Optional

from papertrade.config.settings import Settings, get_settings
from papertrade.domain.models import Account, Actor, TradeOrder, TradeRecord
from papertrade.domain.views import (
    EvaluationResult,
    LeaderboardEntry,
    Leaderboards,
    PortfolioView,
    TradeResult,
)
from papertrade.providers import MarketDataProvider, create_provider
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
    ScopeKind,
)


class _Services:
    """Services bound to one session."""

    def __init__(self, session, market: MarketDataService, settings: Settings):
        account_repo = SqlAlchemyAccountRepository(session)
        trade_repo = SqlAlchemyTradeRepository(session)
        rules = AchievementRules.from_settings(settings)
        self.ledger = LedgerService(
            account_repo=account_repo,
            trade_repo=trade_repo,
            market_data_service=market,
            rules=rules,
            max_attempts=settings.trade_max_attempts,
        )
        self.achievements = AchievementService(
            account_repo=account_repo,
            trade_repo=trade_repo,
            market_data_service=market,
            rules=rules,
        )
        self.leaderboard = LeaderboardService(
            account_repo=account_repo,
            market_data_service=market,
        )
        self.roster = RosterService(
            account_repo=account_repo,
            default_student_cash=settings.default_student_cash,
            default_teacher_cash=settings.default_teacher_cash,
        )


class AppContext:
    """
    Application context providing in-process access to all services.

    Owns its Database handle: call close() (or use it as a context manager)
    when done. Every operation runs in its own session.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        database: Optional[Database] = None,
        provider: Optional[MarketDataProvider] = None,
    ):
        self._settings = settings or get_settings()
        self._database = (database or Database.from_settings(self._settings)).open()
        if provider is None:
            provider = create_provider(
                self._settings.market_data_provider,
                fetch_timeout_seconds=self._settings.market_data_fetch_timeout_seconds,
            )
        self._market = MarketDataService(
            provider=provider,
            cache_ttl_seconds=self._settings.market_data_cache_ttl_seconds,
        )

    @property
    def database(self) -> Database:
        return self._database

    @property
    def market_data(self) -> MarketDataService:
        """Get the MarketDataService instance."""
        return self._market

    @contextmanager
    def _services(self) -> Iterator[_Services]:
        session = self._database.session()
        try:
            yield _Services(session, self._market, self._settings)
        finally:
            session.close()

    # Core entrypoints
    def execute_trade(self, account_id: str, order: TradeOrder) -> TradeResult:
        with self._services() as services:
            return services.ledger.execute_trade(account_id, order)

    def get_portfolio(self, account_id: str) -> PortfolioView:
        with self._services() as services:
            return services.ledger.get_portfolio(account_id)

    def get_leaderboards(self, actor: Actor) -> Leaderboards:
        with self._services() as services:
            return services.leaderboard.get_leaderboards(actor)

    def get_leaderboard(self, actor: Actor, scope: ScopeKind) -> list[LeaderboardEntry]:
        with self._services() as services:
            return services.leaderboard.get_leaderboard(actor, ScopeKind(scope))

    def adjust_student_cash(self, actor: Actor, student_id: str, delta: Any) -> Decimal:
        with self._services() as services:
            return services.roster.adjust_student_cash(actor, student_id, delta)

    def evaluate_achievements(self, account_id: str) -> EvaluationResult:
        with self._services() as services:
            return services.achievements.evaluate_account(account_id)

    # Account management
    def register_teacher(self, username: str) -> Account:
        with self._services() as services:
            return services.roster.register_teacher(username)

    def add_student(
        self,
        actor: Actor,
        username: str,
        starting_cash: Optional[Decimal] = None,
    ) -> Account:
        with self._services() as services:
            return services.roster.add_student(actor, username, starting_cash=starting_cash)

    def list_roster(self, actor: Actor) -> list[Account]:
        with self._services() as services:
            return services.roster.list_roster(actor)

    def remove_student(self, actor: Actor, student_id: str) -> None:
        with self._services() as services:
            services.roster.remove_student(actor, student_id)

    def adjust_own_cash(self, actor: Actor, delta: Any) -> Decimal:
        with self._services() as services:
            return services.roster.adjust_own_cash(actor, delta)

    def change_student_username(self, actor: Actor, student_id: str, username: str) -> Account:
        with self._services() as services:
            return services.roster.change_student_username(actor, student_id, username)

    def list_trades(self, account_id: str) -> list[TradeRecord]:
        with self._services() as services:
            return services.ledger.list_trades(account_id)

    def close(self) -> None:
        """Clean up resources."""
        self._database.close()

    def __enter__(self) -> "AppContext":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
