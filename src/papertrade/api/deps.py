"""Dependency injection for FastAPI."""

from typing import Generator, Optional

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.orm import Session

from papertrade.config.settings import Settings, get_settings
from papertrade.domain.models import Actor, Role
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


def get_database(request: Request) -> Database:
    """Provide the Database opened by the application lifespan."""
    return request.app.state.database


def get_db(database: Database = Depends(get_database)) -> Generator[Session, None, None]:
    """Provide a session for one request."""
    db = database.session()
    try:
        yield db
    finally:
        db.close()


def get_actor(
    x_account_id: Optional[str] = Header(default=None),
    x_account_role: Optional[str] = Header(default=None),
) -> Actor:
    """Caller identity, as asserted by the upstream session layer."""
    if not x_account_id or not x_account_role:
        raise HTTPException(status_code=401, detail="Missing X-Account-Id / X-Account-Role headers")
    try:
        role = Role(x_account_role.strip().lower())
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Unknown role: {x_account_role!r}") from None
    return Actor(account_id=x_account_id.strip(), role=role)


def get_account_repo(db: Session = Depends(get_db)) -> SqlAlchemyAccountRepository:
    """Provide AccountRepository instance."""
    return SqlAlchemyAccountRepository(db)


def get_trade_repo(db: Session = Depends(get_db)) -> SqlAlchemyTradeRepository:
    """Provide TradeRepository instance."""
    return SqlAlchemyTradeRepository(db)


def get_market_data_service(request: Request) -> MarketDataService:
    """Provide the application-wide MarketDataService (its quote cache is shared)."""
    return request.app.state.market_data_service


def get_ledger_service(
    account_repo: SqlAlchemyAccountRepository = Depends(get_account_repo),
    trade_repo: SqlAlchemyTradeRepository = Depends(get_trade_repo),
    market_data_service: MarketDataService = Depends(get_market_data_service),
    settings: Settings = Depends(get_settings),
) -> LedgerService:
    """Provide LedgerService instance."""
    return LedgerService(
        account_repo=account_repo,
        trade_repo=trade_repo,
        market_data_service=market_data_service,
        rules=AchievementRules.from_settings(settings),
        max_attempts=settings.trade_max_attempts,
    )


def get_achievement_service(
    account_repo: SqlAlchemyAccountRepository = Depends(get_account_repo),
    trade_repo: SqlAlchemyTradeRepository = Depends(get_trade_repo),
    market_data_service: MarketDataService = Depends(get_market_data_service),
    settings: Settings = Depends(get_settings),
) -> AchievementService:
    """Provide AchievementService instance."""
    return AchievementService(
        account_repo=account_repo,
        trade_repo=trade_repo,
        market_data_service=market_data_service,
        rules=AchievementRules.from_settings(settings),
    )


def get_leaderboard_service(
    account_repo: SqlAlchemyAccountRepository = Depends(get_account_repo),
    market_data_service: MarketDataService = Depends(get_market_data_service),
) -> LeaderboardService:
    """Provide LeaderboardService instance."""
    return LeaderboardService(
        account_repo=account_repo,
        market_data_service=market_data_service,
    )


def get_roster_service(
    account_repo: SqlAlchemyAccountRepository = Depends(get_account_repo),
    settings: Settings = Depends(get_settings),
) -> RosterService:
    """Provide RosterService instance."""
    return RosterService(
        account_repo=account_repo,
        default_student_cash=settings.default_student_cash,
        default_teacher_cash=settings.default_teacher_cash,
    )
