"""View models for service outputs."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from papertrade.domain.models import Account, Achievement, Holding, TradeRecord


@dataclass
class Quote:
    """Market quote data for a symbol."""

    symbol: str
    last_price: Decimal
    as_of: datetime


@dataclass
class HoldingValuation:
    """Single holding valued against a quote snapshot."""

    symbol: str
    shares: Decimal
    average_cost: Decimal
    price: Decimal
    market_value: Decimal
    is_live_quote: bool


@dataclass
class PortfolioView:
    """Cash, holdings and badges of one account, with valuation."""

    account_id: str
    username: str
    cash: Decimal
    holdings: list[Holding] = field(default_factory=list)
    achievements: list[Achievement] = field(default_factory=list)
    valuations: list[HoldingValuation] = field(default_factory=list)
    total_value: Decimal = field(default_factory=lambda: Decimal("0"))


@dataclass
class TradeResult:
    """Outcome of an executed trade."""

    account: Account
    trade: TradeRecord
    new_achievements: list[Achievement] = field(default_factory=list)


@dataclass
class LeaderboardEntry:
    """One ranked account."""

    rank: int
    account: Account
    total_value: Decimal


@dataclass
class Leaderboards:
    """Global and class leaderboards for one viewer."""

    global_board: list[LeaderboardEntry] = field(default_factory=list)
    class_board: list[LeaderboardEntry] = field(default_factory=list)
    as_of: Optional[datetime] = None


@dataclass
class EvaluationResult:
    """Badge state after an achievement evaluation."""

    account_id: str
    achievements: list[Achievement] = field(default_factory=list)
    new_achievements: list[Achievement] = field(default_factory=list)
