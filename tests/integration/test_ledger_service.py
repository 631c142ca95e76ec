"""
Integration tests for LedgerService against SQLite.

Tests cover:
- A buy/buy/sell sequence with cash, average cost and badges
- Failed orders leave the stored account and history untouched
- Optimistic retries on concurrent modification
- Portfolio reads with live quotes and with quotes unavailable
"""

from decimal import Decimal

import pytest

from papertrade.core.exceptions import (
    AccountNotFoundError,
    ConcurrentModificationError,
    InsufficientFundsError,
    InsufficientSharesError,
    InvalidOrderTypeError,
    ValidationError,
)
from papertrade.domain.models import Achievement, TradeOrder
from papertrade.services import LedgerService


def order(order_type: str, symbol: str, quantity: str, price: str) -> TradeOrder:
    return TradeOrder(order_type, symbol, Decimal(quantity), Decimal(price))


class ConflictingAccountRepository:
    """Wraps a repository and bumps the stored version before the first N saves."""

    def __init__(self, inner, conflicts: int):
        self._inner = inner
        self._conflicts = conflicts
        self.save_calls = 0

    def save(self, account, expected_version, trade=None):
        self.save_calls += 1
        if self.save_calls <= self._conflicts:
            # Another writer touches the account between read and write
            self._inner.increment_cash(account.account_id, Decimal("0"))
        return self._inner.save(account, expected_version, trade=trade)

    def __getattr__(self, name):
        return getattr(self._inner, name)


# =============================================================================
# TRADE SEQUENCE TESTS
# =============================================================================


class TestTradeSequence:
    """End-to-end trade sequence through the database."""

    def test_buy_buy_sell(self, ledger_service: LedgerService, account_repo, trade_repo, student):
        """
        GIVEN a student with 100000 cash
        WHEN they buy 10 AAPL @150, buy 5 AAPL @180, then sell 15 AAPL @200
        THEN cash goes 98500 -> 97600 -> 100600, the average cost is 160
             before the sell, the position is closed afterwards
        AND FIRST_TRADE and PROFIT_MAKER are unlocked
        """
        first = ledger_service.execute_trade(student.account_id, order("buy", "AAPL", "10", "150"))
        assert first.account.cash == Decimal("98500")
        assert first.new_achievements == [Achievement.FIRST_TRADE]

        second = ledger_service.execute_trade(student.account_id, order("buy", "aapl", "5", "180"))
        assert second.account.cash == Decimal("97600")
        assert second.account.get_holding("AAPL").shares == Decimal("15")
        assert second.account.get_holding("AAPL").average_cost == Decimal("160")
        assert second.new_achievements == []

        third = ledger_service.execute_trade(student.account_id, order("SELL", "AAPL", "15", "200"))
        assert third.account.cash == Decimal("100600")
        assert third.account.holdings == []
        assert third.trade.cost_basis_before == Decimal("160")
        assert Achievement.PROFIT_MAKER in third.new_achievements

        stored = account_repo.get_by_id(student.account_id)
        assert stored.cash == Decimal("100600")
        assert stored.holdings == []
        assert {Achievement.FIRST_TRADE, Achievement.PROFIT_MAKER} <= stored.achievements
        assert stored.version == student.version + 3
        assert trade_repo.count_by_account(student.account_id) == 3

    def test_sub_cent_price_is_stored_exactly(self, ledger_service: LedgerService, account_repo, trade_repo, student):
        """
        GIVEN a student with 100000 cash
        WHEN they buy 3 PENNY @0.00004
        THEN stored cash drops by exactly 0.00012 and the trade keeps the
             exact price
        """
        result = ledger_service.execute_trade(student.account_id, order("buy", "PENNY", "3", "0.00004"))

        stored = account_repo.get_by_id(student.account_id)
        assert stored.cash == Decimal("100000") - Decimal("3") * Decimal("0.00004")
        assert stored.cash == result.account.cash
        assert stored.get_holding("PENNY").average_cost == Decimal("0.00004")
        assert trade_repo.list_by_account(student.account_id)[0].price == Decimal("0.00004")

    def test_list_trades(self, ledger_service: LedgerService, student):
        """
        GIVEN two executed trades
        WHEN the history is listed
        THEN both trades come back in execution order
        """
        ledger_service.execute_trade(student.account_id, order("buy", "AAPL", "2", "100"))
        ledger_service.execute_trade(student.account_id, order("sell", "AAPL", "1", "90"))

        trades = ledger_service.list_trades(student.account_id)

        assert [(t.order_type.value, t.quantity) for t in trades] == [
            ("buy", Decimal("2")),
            ("sell", Decimal("1")),
        ]

    def test_unprofitable_sell_does_not_unlock_profit_maker(self, ledger_service: LedgerService, student):
        ledger_service.execute_trade(student.account_id, order("buy", "AAPL", "2", "100"))

        result = ledger_service.execute_trade(student.account_id, order("sell", "AAPL", "2", "100"))

        assert Achievement.PROFIT_MAKER not in result.account.achievements


# =============================================================================
# FAILURE TESTS
# =============================================================================


class TestFailedOrders:
    """Failed orders change nothing."""

    @pytest.mark.parametrize(
        "trade_order, error",
        [
            (order("buy", "AAPL", "1000", "100.01"), InsufficientFundsError),
            (order("sell", "AAPL", "1", "100"), InsufficientSharesError),
            (order("short", "AAPL", "1", "100"), InvalidOrderTypeError),
            (order("buy", "AAPL", "1", "100.000000001"), ValidationError),
        ],
    )
    def test_failure_leaves_state_unchanged(
        self,
        ledger_service: LedgerService,
        account_repo,
        trade_repo,
        student,
        trade_order,
        error,
    ):
        """
        GIVEN a student with 100000 cash and no holdings
        WHEN an order fails
        THEN the expected error is raised and no cash, holding, badge,
             version or trade changes
        """
        with pytest.raises(error):
            ledger_service.execute_trade(student.account_id, trade_order)

        stored = account_repo.get_by_id(student.account_id)
        assert stored.cash == Decimal("100000")
        assert stored.holdings == []
        assert stored.achievements == set()
        assert stored.version == student.version
        assert trade_repo.count_by_account(student.account_id) == 0

    def test_exact_cash_buy_succeeds(self, ledger_service: LedgerService, student):
        """
        GIVEN 100000 cash
        WHEN buying exactly 100000 worth
        THEN cash is exactly zero
        """
        result = ledger_service.execute_trade(student.account_id, order("buy", "AAPL", "1000", "100"))

        assert result.account.cash == Decimal("0")

    def test_unknown_account(self, ledger_service: LedgerService):
        with pytest.raises(AccountNotFoundError):
            ledger_service.execute_trade("ghost", order("buy", "AAPL", "1", "1"))


# =============================================================================
# CONCURRENCY TESTS
# =============================================================================


class TestConcurrentModification:
    """Optimistic retry behavior."""

    def test_conflict_is_retried(self, account_repo, trade_repo, market_data_service, student):
        """
        GIVEN the account changes once between read and write
        WHEN a buy is executed
        THEN the buy is re-applied once and cash is debited exactly once
        """
        repo = ConflictingAccountRepository(account_repo, conflicts=1)
        service = LedgerService(repo, trade_repo, market_data_service, max_attempts=3)

        result = service.execute_trade(student.account_id, order("buy", "AAPL", "10", "150"))

        assert repo.save_calls == 2
        assert result.account.cash == Decimal("98500")
        assert trade_repo.count_by_account(student.account_id) == 1

    def test_gives_up_after_max_attempts(self, account_repo, trade_repo, market_data_service, student):
        """
        GIVEN the account changes before every write
        WHEN a buy is executed with max_attempts=2
        THEN ConcurrentModificationError is raised after two saves
        AND no cash moves and no trade is recorded
        """
        repo = ConflictingAccountRepository(account_repo, conflicts=10)
        service = LedgerService(repo, trade_repo, market_data_service, max_attempts=2)

        with pytest.raises(ConcurrentModificationError):
            service.execute_trade(student.account_id, order("buy", "AAPL", "10", "150"))

        assert repo.save_calls == 2
        assert account_repo.get_by_id(student.account_id).cash == Decimal("100000")
        assert trade_repo.count_by_account(student.account_id) == 0


# =============================================================================
# PORTFOLIO TESTS
# =============================================================================


class TestGetPortfolio:
    """Portfolio reads."""

    def test_portfolio_with_live_quotes(self, ledger_service: LedgerService, account_factory, fixed_now):
        """
        GIVEN 1000 cash, 10 AAPL @150 and 2 MSFT @300
        WHEN the portfolio is read with AAPL at 185.50 and MSFT at 378.25
        THEN holdings are valued at the quotes and total 3611.50
        """
        account = account_factory(
            cash="1000",
            holdings=(("MSFT", "2", "300", fixed_now), ("AAPL", "10", "150", fixed_now)),
            achievements=(Achievement.FIRST_TRADE,),
        )

        view = ledger_service.get_portfolio(account.account_id)

        assert view.cash == Decimal("1000")
        assert [h.symbol for h in view.holdings] == ["AAPL", "MSFT"]
        assert [v.market_value for v in view.valuations] == [Decimal("1855.00"), Decimal("756.50")]
        assert all(v.is_live_quote for v in view.valuations)
        assert view.total_value == Decimal("3611.50")
        assert view.achievements == [Achievement.FIRST_TRADE]

    def test_portfolio_falls_back_to_cost(
        self,
        account_repo,
        trade_repo,
        failing_market_data_service,
        account_factory,
        fixed_now,
    ):
        """
        GIVEN the quote provider is down
        WHEN the portfolio is read
        THEN holdings are valued at average cost and no error escapes
        """
        service = LedgerService(account_repo, trade_repo, failing_market_data_service)
        account = account_factory(cash="1000", holdings=(("AAPL", "10", "150", fixed_now),))

        view = service.get_portfolio(account.account_id)

        assert view.total_value == Decimal("2500")
        assert view.valuations[0].is_live_quote is False

    def test_unknown_account(self, ledger_service: LedgerService):
        with pytest.raises(AccountNotFoundError):
            ledger_service.get_portfolio("ghost")
