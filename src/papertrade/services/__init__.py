"""Service layer - business logic orchestration."""

from papertrade.services.achievements import (
    AchievementRules,
    AchievementService,
    EvaluationContext,
    evaluate,
    sort_achievements,
)
from papertrade.services.leaderboard import (
    LeaderboardScope,
    LeaderboardService,
    ScopeKind,
    rank,
)
from papertrade.services.ledger import LedgerService, apply_trade, parse_order_type
from papertrade.services.market_data_service import MarketDataService, OTHER_INDUSTRY
from papertrade.services.roster import RosterService, authorize, require_teacher
from papertrade.services.valuation import valuate, valuate_holdings

__all__ = [
    "AchievementRules",
    "AchievementService",
    "EvaluationContext",
    "evaluate",
    "sort_achievements",
    "LeaderboardScope",
    "LeaderboardService",
    "ScopeKind",
    "rank",
    "LedgerService",
    "apply_trade",
    "parse_order_type",
    "MarketDataService",
    "OTHER_INDUSTRY",
    "RosterService",
    "authorize",
    "require_teacher",
    "valuate",
    "valuate_holdings",
]
