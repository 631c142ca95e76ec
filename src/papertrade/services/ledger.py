"""Ledger: applies buy/sell orders to an account's cash and holdings."""

import copy
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_DOWN, ROUND_HALF_EVEN, ROUND_UP, Decimal, InvalidOperation
from typing import Any, Optional

from papertrade.core.exceptions import (
    AccountNotFoundError,
    ConcurrentModificationError,
    InsufficientFundsError,
    InsufficientSharesError,
    InvalidOrderTypeError,
    ValidationError,
)
from papertrade.core.timezone import now_eastern
from papertrade.domain.models import (
    AMOUNT_QUANTUM,
    AMOUNT_SCALE,
    Account,
    Holding,
    OrderType,
    TradeOrder,
    TradeRecord,
    normalize_symbol,
    exceeds_amount_scale,
)
from papertrade.domain.views import PortfolioView, TradeResult
from papertrade.repositories.protocols import AccountRepository, TradeRepository
from papertrade.services.achievements import (
    AchievementRules,
    EvaluationContext,
    evaluate,
    sort_achievements,
)
from papertrade.services.market_data_service import MarketDataService
from papertrade.services.valuation import valuate_holdings

logger = logging.getLogger(__name__)


@dataclass
class TradeOutcome:
    """Result of applying one order to an account, before persistence."""

    account: Account
    trade: TradeRecord
    is_profitable_sell: bool


def parse_order_type(value: Any) -> OrderType:
    """Map a caller-supplied order type onto OrderType."""
    if isinstance(value, OrderType):
        return value
    try:
        return OrderType(str(value).strip().lower())
    except ValueError:
        raise InvalidOrderTypeError(str(value)) from None


def _positive_decimal(value: Any, name: str) -> Decimal:
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{name} must be a number") from None
    if not number.is_finite() or number <= 0:
        raise ValidationError(f"{name} must be > 0")
    if exceeds_amount_scale(number):
        raise ValidationError(f"{name} allows at most {AMOUNT_SCALE} decimal places")
    return number


def apply_trade(
    account: Account,
    order: TradeOrder,
    now: Optional[datetime] = None,
) -> TradeOutcome:
    """
    Apply a buy or sell to a copy of account.

    Buy: cash -= quantity × price (InsufficientFundsError if short); an
    existing position's average cost becomes the share-weighted average,
    otherwise a new position opens at price.
    Sell: InsufficientSharesError unless enough shares are held;
    cash += quantity × price; a position sold to zero is removed.
    Amounts are kept to AMOUNT_SCALE places: a buy rounds its cost up, a
    sell rounds its proceeds down.

    The input account is never modified.
    """
    order_type = parse_order_type(order.order_type)
    symbol = normalize_symbol(order.symbol or "")
    if not symbol:
        raise ValidationError(f"{order_type.value} requires a symbol")
    quantity = _positive_decimal(order.quantity, "quantity")
    price = _positive_decimal(order.price, "price")
    now = now or now_eastern()

    updated = copy.deepcopy(account)
    holding = updated.get_holding(symbol)
    cost_basis_before: Optional[Decimal] = None

    if order_type == OrderType.BUY:
        cost = (quantity * price).quantize(AMOUNT_QUANTUM, rounding=ROUND_UP)
        if cost > updated.cash:
            raise InsufficientFundsError(str(cost), str(updated.cash))
        updated.cash -= cost
        if holding is not None:
            total_shares = holding.shares + quantity
            average_cost = (holding.shares * holding.average_cost + quantity * price) / total_shares
            holding.average_cost = average_cost.quantize(AMOUNT_QUANTUM, rounding=ROUND_HALF_EVEN)
            holding.shares = total_shares
        else:
            updated.holdings.append(
                Holding(
                    symbol=symbol,
                    shares=quantity,
                    average_cost=price,
                    acquired_at_est=now,
                )
            )
    else:
        available = holding.shares if holding is not None else Decimal("0")
        if holding is None or holding.shares < quantity:
            raise InsufficientSharesError(symbol, str(quantity), str(available))
        cost_basis_before = holding.average_cost
        updated.cash += (quantity * price).quantize(AMOUNT_QUANTUM, rounding=ROUND_DOWN)
        holding.shares -= quantity
        if holding.shares == 0:
            updated.holdings.remove(holding)

    trade = TradeRecord(
        trade_id=str(uuid.uuid4()),
        account_id=account.account_id,
        order_type=order_type,
        symbol=symbol,
        quantity=quantity,
        price=price,
        executed_at_est=now,
        cost_basis_before=cost_basis_before,
    )
    return TradeOutcome(
        account=updated,
        trade=trade,
        is_profitable_sell=trade.is_profitable_sell,
    )


class LedgerService:
    """
    Service for executing trades and reading portfolios.

    Each trade is a read-modify-write of one account guarded by an optimistic
    version check; on a conflict the account is reloaded and the order
    re-applied, up to max_attempts times.
    """

    def __init__(
        self,
        account_repo: AccountRepository,
        trade_repo: TradeRepository,
        market_data_service: MarketDataService,
        rules: AchievementRules = AchievementRules(),
        max_attempts: int = 3,
    ):
        self._account_repo = account_repo
        self._trade_repo = trade_repo
        self._market = market_data_service
        self._rules = rules
        self._max_attempts = max(1, max_attempts)

    def get_account(self, account_id: str) -> Account:
        """Get account by ID."""
        account = self._account_repo.get_by_id(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        return account

    def execute_trade(self, account_id: str, order: TradeOrder) -> TradeResult:
        """
        Apply an order to a stored account and persist the result.

        The trade also feeds the badge rules: FIRST_TRADE on the account's
        first trade, PROFIT_MAKER when a sell beats the average cost. Ledger
        errors propagate unchanged.
        """
        for attempt in range(1, self._max_attempts + 1):
            account = self.get_account(account_id)
            is_first_trade = self._trade_repo.count_by_account(account_id) == 0
            outcome = apply_trade(account, order)

            context = EvaluationContext(
                now=outcome.trade.executed_at_est,
                is_first_trade=is_first_trade,
                last_trade_was_profitable_sell=outcome.is_profitable_sell,
            )
            # The fill price is the freshest quote for the traded symbol
            prices = {outcome.trade.symbol: outcome.trade.price}
            unlocked = evaluate(outcome.account, prices, context, self._rules)
            outcome.account.achievements = set(unlocked)

            try:
                saved = self._account_repo.save(
                    outcome.account,
                    expected_version=account.version,
                    trade=outcome.trade,
                )
            except ConcurrentModificationError:
                if attempt == self._max_attempts:
                    logger.warning(
                        "Giving up on trade for account %s after %d conflicting attempts",
                        account_id,
                        attempt,
                    )
                    raise
                logger.warning(
                    "Account %s changed during trade (attempt %d); retrying",
                    account_id,
                    attempt,
                )
                continue

            trade = outcome.trade
            new_achievements = sort_achievements(unlocked - account.achievements)
            logger.info(
                "Account %s %s %s %s @ %s; cash now %s",
                account_id,
                trade.order_type.value,
                trade.quantity,
                trade.symbol,
                trade.price,
                saved.cash,
            )
            if new_achievements:
                logger.info(
                    "Account %s unlocked %s",
                    account_id,
                    ", ".join(a.value for a in new_achievements),
                )
            return TradeResult(
                account=saved,
                trade=trade,
                new_achievements=new_achievements,
            )

        raise ConcurrentModificationError(account_id)  # pragma: no cover

    def get_portfolio(self, account_id: str) -> PortfolioView:
        """
        Cash, holdings and badges of one account, valued at current quotes.

        Holdings without a quote are valued at cost.
        """
        account = self.get_account(account_id)
        prices = self._market.get_prices(account.symbols) if account.holdings else {}
        valuations = valuate_holdings(account, prices)
        total = account.cash + sum((v.market_value for v in valuations), Decimal("0"))

        return PortfolioView(
            account_id=account.account_id,
            username=account.username,
            cash=account.cash,
            holdings=sorted(account.holdings, key=lambda h: h.symbol),
            achievements=sort_achievements(account.achievements),
            valuations=valuations,
            total_value=total,
        )

    def list_trades(self, account_id: str) -> list[TradeRecord]:
        """Trade history of one account, oldest first."""
        self.get_account(account_id)
        return self._trade_repo.list_by_account(account_id)
