"""Achievement (badge) evaluation."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterable, Mapping, Optional

from papertrade.config.settings import Settings
from papertrade.core.exceptions import AccountNotFoundError
from papertrade.core.timezone import now_eastern, to_eastern
from papertrade.domain.models import Account, Achievement
from papertrade.domain.views import EvaluationResult
from papertrade.repositories.protocols import AccountRepository, TradeRepository
from papertrade.services.market_data_service import MarketDataService, OTHER_INDUSTRY
from papertrade.services.valuation import valuate

logger = logging.getLogger(__name__)

_ORDER = {a: i for i, a in enumerate(Achievement)}


def sort_achievements(achievements: Iterable[Achievement]) -> list[Achievement]:
    """Badges in declaration order."""
    return sorted(achievements, key=_ORDER.__getitem__)


@dataclass(frozen=True)
class AchievementRules:
    """Thresholds for the badge rules."""

    market_master_threshold: Decimal = Decimal("125000")
    patient_investor_days: int = 30
    diversification_min_symbols: int = 3
    diversification_min_industries: int = 3

    @classmethod
    def from_settings(cls, settings: Settings) -> "AchievementRules":
        return cls(
            market_master_threshold=settings.market_master_threshold,
            patient_investor_days=settings.patient_investor_days,
            diversification_min_symbols=settings.diversification_min_symbols,
            diversification_min_industries=settings.diversification_min_industries,
        )


@dataclass
class EvaluationContext:
    """
    Trade triggers and lookups an evaluation runs against.

    is_first_trade / last_trade_was_profitable_sell describe a trade that
    was just applied; has_trade_history / has_profitable_sell describe the
    recorded history, so a standalone evaluation reaches the same badges.
    """

    now: datetime
    is_first_trade: bool = False
    last_trade_was_profitable_sell: bool = False
    has_trade_history: bool = False
    has_profitable_sell: bool = False
    industry_of: Mapping[str, str] = field(default_factory=dict)


def evaluate(
    account: Account,
    prices: Mapping[str, Decimal],
    context: EvaluationContext,
    rules: AchievementRules = AchievementRules(),
) -> frozenset[Achievement]:
    """
    Return the account's badge set after applying every rule.

    Pure and idempotent; the result always contains the badges the account
    already has.
    """
    unlocked = set(account.achievements)

    if context.is_first_trade or context.has_trade_history:
        unlocked.add(Achievement.FIRST_TRADE)

    if context.last_trade_was_profitable_sell or context.has_profitable_sell:
        unlocked.add(Achievement.PROFIT_MAKER)

    cutoff = to_eastern(context.now) - timedelta(days=rules.patient_investor_days)
    if any(to_eastern(h.acquired_at_est) < cutoff for h in account.holdings):
        unlocked.add(Achievement.PATIENT_INVESTOR)

    if valuate(account, prices) >= rules.market_master_threshold:
        unlocked.add(Achievement.MARKET_MASTER)

    symbols = set(account.symbols)
    if len(symbols) >= rules.diversification_min_symbols:
        # Unknown industries share one bucket
        industries = {context.industry_of.get(s, OTHER_INDUSTRY) for s in symbols}
        if len(industries) >= rules.diversification_min_industries:
            unlocked.add(Achievement.DIVERSIFIED_INVESTOR)

    return frozenset(unlocked)


class AchievementService:
    """Evaluates and persists badges for stored accounts."""

    def __init__(
        self,
        account_repo: AccountRepository,
        trade_repo: TradeRepository,
        market_data_service: MarketDataService,
        rules: AchievementRules = AchievementRules(),
    ):
        self._account_repo = account_repo
        self._trade_repo = trade_repo
        self._market = market_data_service
        self._rules = rules

    def evaluate_account(
        self,
        account_id: str,
        now: Optional[datetime] = None,
    ) -> EvaluationResult:
        """
        Re-evaluate every rule for one account and store any new badges.

        Quote and industry failures degrade (cost basis / "Other").
        """
        account = self._account_repo.get_by_id(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)

        symbols = account.symbols
        prices = self._market.get_prices(symbols) if symbols else {}
        industries: Mapping[str, str] = {}
        if len(symbols) >= self._rules.diversification_min_symbols:
            industries = self._market.get_industries(symbols)

        context = EvaluationContext(
            now=now or now_eastern(),
            has_trade_history=self._trade_repo.count_by_account(account_id) > 0,
            has_profitable_sell=self._trade_repo.has_profitable_sell(account_id),
            industry_of=industries,
        )
        unlocked = evaluate(account, prices, context, self._rules)

        added: set[Achievement] = set()
        if unlocked - account.achievements:
            added = self._account_repo.add_achievements(account_id, set(unlocked))
            if added:
                logger.info(
                    "Account %s unlocked %s",
                    account_id,
                    ", ".join(a.value for a in sort_achievements(added)),
                )

        return EvaluationResult(
            account_id=account_id,
            achievements=sort_achievements(unlocked),
            new_achievements=sort_achievements(added),
        )
