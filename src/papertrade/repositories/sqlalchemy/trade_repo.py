"""SQLAlchemy implementation of TradeRepository."""

from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from papertrade.core.timezone import to_eastern, to_naive_eastern
from papertrade.domain.models import OrderType, TradeRecord
from papertrade.repositories.sqlalchemy.orm_models import TradeORM


def trade_to_orm(trade: TradeRecord) -> TradeORM:
    """Convert domain model to ORM model."""
    return TradeORM(
        trade_id=trade.trade_id,
        account_id=trade.account_id,
        order_type=trade.order_type,
        symbol=trade.symbol,
        quantity=trade.quantity,
        price=trade.price,
        cost_basis_before=trade.cost_basis_before,
        executed_at_est=to_naive_eastern(trade.executed_at_est),
    )


class SqlAlchemyTradeRepository:
    """SQLAlchemy-backed trade history repository."""

    def __init__(self, db: Session):
        self._db = db

    def get_by_id(self, trade_id: str) -> Optional[TradeRecord]:
        """Retrieve one trade."""
        orm_trade = self._db.query(TradeORM).filter(
            TradeORM.trade_id == trade_id
        ).first()
        return self._to_domain(orm_trade) if orm_trade else None

    def list_by_account(self, account_id: str) -> list[TradeRecord]:
        """List an account's trades, oldest first."""
        orm_trades = (
            self._db.query(TradeORM)
            .filter(TradeORM.account_id == account_id)
            .order_by(TradeORM.executed_at_est, TradeORM.trade_id)
            .all()
        )
        return [self._to_domain(t) for t in orm_trades]

    def count_by_account(self, account_id: str) -> int:
        """Number of trades recorded for an account."""
        return (
            self._db.query(TradeORM)
            .filter(TradeORM.account_id == account_id)
            .count()
        )

    def has_profitable_sell(self, account_id: str) -> bool:
        """True if any recorded sell was priced above its cost basis."""
        match = (
            self._db.query(TradeORM.trade_id)
            .filter(
                TradeORM.account_id == account_id,
                TradeORM.order_type == OrderType.SELL,
                TradeORM.cost_basis_before.isnot(None),
                TradeORM.price > TradeORM.cost_basis_before,
            )
            .first()
        )
        return match is not None

    @staticmethod
    def _to_domain(orm: TradeORM) -> TradeRecord:
        """Convert ORM model to domain model."""
        return TradeRecord(
            trade_id=orm.trade_id,
            account_id=orm.account_id,
            order_type=orm.order_type,
            symbol=orm.symbol,
            quantity=Decimal(str(orm.quantity)),
            price=Decimal(str(orm.price)),
            cost_basis_before=(
                Decimal(str(orm.cost_basis_before))
                if orm.cost_basis_before is not None
                else None
            ),
            executed_at_est=to_eastern(orm.executed_at_est),
        )
