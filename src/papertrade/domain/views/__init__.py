"""View models for service outputs."""

from papertrade.domain.views.portfolio import (
    Quote,
    HoldingValuation,
    PortfolioView,
    TradeResult,
    LeaderboardEntry,
    Leaderboards,
    EvaluationResult,
)

__all__ = [
    "Quote",
    "HoldingValuation",
    "PortfolioView",
    "TradeResult",
    "LeaderboardEntry",
    "Leaderboards",
    "EvaluationResult",
]
