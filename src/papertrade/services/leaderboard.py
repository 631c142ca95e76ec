"""Leaderboard ranking by total account value."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional
from decimal import Decimal

from papertrade.core.exceptions import AccountNotFoundError
from papertrade.core.timezone import now_eastern
from papertrade.domain.models import Account, Actor
from papertrade.domain.views import LeaderboardEntry, Leaderboards
from papertrade.repositories.protocols import AccountRepository
from papertrade.services.market_data_service import MarketDataService
from papertrade.services.valuation import valuate

logger = logging.getLogger(__name__)


class ScopeKind(str, Enum):
    """Leaderboard scopes."""

    GLOBAL = "global"
    CLASS = "class"


@dataclass(frozen=True)
class LeaderboardScope:
    """Which accounts a leaderboard covers."""

    kind: ScopeKind
    viewer_id: Optional[str] = None

    @classmethod
    def global_(cls) -> "LeaderboardScope":
        return cls(ScopeKind.GLOBAL)

    @classmethod
    def class_of(cls, viewer_id: str) -> "LeaderboardScope":
        return cls(ScopeKind.CLASS, viewer_id)


def accounts_in_scope(accounts: list[Account], scope: LeaderboardScope) -> list[Account]:
    """
    Select the accounts a scope covers.

    class scope, teacher viewer: the teacher and their students.
    class scope, student viewer: their teacher and all of that teacher's
    students; a student without a teacher sees only themself.
    """
    if scope.kind == ScopeKind.GLOBAL:
        return list(accounts)

    viewer = next((a for a in accounts if a.account_id == scope.viewer_id), None)
    if viewer is None:
        return []

    if viewer.is_teacher:
        class_teacher_id = viewer.account_id
    elif viewer.teacher_id:
        class_teacher_id = viewer.teacher_id
    else:
        return [viewer]

    return [
        a
        for a in accounts
        if a.account_id == class_teacher_id or a.teacher_id == class_teacher_id
    ]


def rank(
    accounts: list[Account],
    prices: Mapping[str, Decimal],
    scope: LeaderboardScope = LeaderboardScope.global_(),
) -> list[LeaderboardEntry]:
    """
    Rank the accounts in scope by total value, highest first.

    Ties are broken by account_id ascending, so the order is total and the
    same on every call for the same input.
    """
    valued = [(a, valuate(a, prices)) for a in accounts_in_scope(accounts, scope)]
    valued.sort(key=lambda item: item[0].account_id)
    valued.sort(key=lambda item: item[1], reverse=True)
    return [
        LeaderboardEntry(rank=position, account=account, total_value=total)
        for position, (account, total) in enumerate(valued, start=1)
    ]


class LeaderboardService:
    """Builds leaderboards from the stored account population."""

    def __init__(
        self,
        account_repo: AccountRepository,
        market_data_service: MarketDataService,
    ):
        self._account_repo = account_repo
        self._market = market_data_service

    def get_leaderboards(self, actor: Actor) -> Leaderboards:
        """Global and class leaderboards from one quote snapshot."""
        accounts, prices = self._snapshot(actor)
        return Leaderboards(
            global_board=rank(accounts, prices, LeaderboardScope.global_()),
            class_board=rank(accounts, prices, LeaderboardScope.class_of(actor.account_id)),
            as_of=now_eastern(),
        )

    def get_leaderboard(self, actor: Actor, kind: ScopeKind) -> list[LeaderboardEntry]:
        """One leaderboard for the actor."""
        accounts, prices = self._snapshot(actor)
        if kind == ScopeKind.GLOBAL:
            scope = LeaderboardScope.global_()
        else:
            scope = LeaderboardScope.class_of(actor.account_id)
        return rank(accounts, prices, scope)

    def _snapshot(self, actor: Actor) -> tuple[list[Account], dict[str, Decimal]]:
        accounts = self._account_repo.list_all()
        if not any(a.account_id == actor.account_id for a in accounts):
            raise AccountNotFoundError(actor.account_id)

        symbols = sorted({s for a in accounts for s in a.symbols})
        prices = self._market.get_prices(symbols) if symbols else {}
        logger.debug(
            "Leaderboard snapshot: %d accounts, %d/%d symbols quoted",
            len(accounts),
            len(prices),
            len(symbols),
        )
        return accounts, prices
