"""SQLAlchemy implementation of AccountRepository."""

from decimal import Decimal
from typing import Optional

from sqlalchemy import update
from sqlalchemy.orm import Session, selectinload

from papertrade.core.exceptions import AccountNotFoundError, ConcurrentModificationError
from papertrade.core.timezone import now_eastern, to_eastern, to_naive_eastern
from papertrade.domain.models import (
    Account,
    Achievement,
    Holding,
    Role,
    TradeRecord,
    normalize_username,
)
from papertrade.repositories.sqlalchemy.orm_models import (
    AccountORM,
    AchievementORM,
    HoldingORM,
    TradeORM,
)
from papertrade.repositories.sqlalchemy.trade_repo import trade_to_orm


class SqlAlchemyAccountRepository:
    """SQLAlchemy-backed account repository."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, account: Account) -> Account:
        """Persist a new account."""
        orm_account = AccountORM(
            account_id=account.account_id,
            username=account.username.strip(),
            username_key=account.username_key,
            role=account.role,
            cash=account.cash,
            teacher_id=account.teacher_id,
            version=account.version,
            created_at_est=to_naive_eastern(account.created_at_est or now_eastern()),
        )
        self._db.add(orm_account)
        self._db.commit()
        return self.get_by_id(account.account_id)

    def get_by_id(self, account_id: str) -> Optional[Account]:
        """Retrieve account with holdings and achievements."""
        orm_account = (
            self._query()
            .filter(AccountORM.account_id == account_id)
            .first()
        )
        return self._to_domain(orm_account) if orm_account else None

    def get_by_username(self, username: str) -> Optional[Account]:
        """Retrieve account by username (canonical comparison)."""
        orm_account = (
            self._query()
            .filter(AccountORM.username_key == normalize_username(username))
            .first()
        )
        return self._to_domain(orm_account) if orm_account else None

    def list_all(self) -> list[Account]:
        """List all accounts."""
        orm_accounts = self._query().order_by(AccountORM.username_key).all()
        return [self._to_domain(a) for a in orm_accounts]

    def list_by_teacher(self, teacher_id: str) -> list[Account]:
        """List the students that reference teacher_id."""
        orm_accounts = (
            self._query()
            .filter(AccountORM.teacher_id == teacher_id)
            .order_by(AccountORM.username_key)
            .all()
        )
        return [self._to_domain(a) for a in orm_accounts]

    def save(
        self,
        account: Account,
        expected_version: int,
        trade: Optional[TradeRecord] = None,
    ) -> Account:
        """
        Compare-and-swap write of cash, holdings and achievements.

        The account row is updated only while its version still equals
        expected_version; holdings are synced, missing badges inserted and
        the optional trade appended in the same transaction. Stored badges
        are never deleted.
        """
        orm_account = (
            self._query()
            .filter(AccountORM.account_id == account.account_id)
            .first()
        )
        if orm_account is None:
            raise AccountNotFoundError(account.account_id)

        result = self._db.execute(
            update(AccountORM)
            .where(
                AccountORM.account_id == account.account_id,
                AccountORM.version == expected_version,
            )
            .values(cash=account.cash, version=expected_version + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            self._db.rollback()
            raise ConcurrentModificationError(account.account_id)

        self._sync_holdings(orm_account, account.holdings)
        self._insert_missing_achievements(orm_account, account.achievements)
        if trade is not None:
            self._db.add(trade_to_orm(trade))

        self._db.commit()
        return self.get_by_id(account.account_id)

    def add_achievements(self, account_id: str, achievements: set[Achievement]) -> set[Achievement]:
        """Insert badges not yet stored; return the ones that were new."""
        orm_account = (
            self._query()
            .filter(AccountORM.account_id == account_id)
            .first()
        )
        if orm_account is None:
            raise AccountNotFoundError(account_id)

        added = self._insert_missing_achievements(orm_account, achievements)
        self._db.commit()
        return added

    def increment_cash(
        self,
        account_id: str,
        delta: Decimal,
        teacher_id: Optional[str] = None,
        role: Optional[Role] = None,
    ) -> Optional[Decimal]:
        """Atomically add delta to cash; refuses to go below zero."""
        stmt = (
            update(AccountORM)
            .where(
                AccountORM.account_id == account_id,
                AccountORM.cash + delta >= 0,
            )
            .values(
                cash=AccountORM.cash + delta,
                version=AccountORM.version + 1,
            )
            .execution_options(synchronize_session=False)
        )
        if teacher_id is not None:
            stmt = stmt.where(AccountORM.teacher_id == teacher_id)
        if role is not None:
            stmt = stmt.where(AccountORM.role == role)

        result = self._db.execute(stmt)
        if result.rowcount != 1:
            self._db.rollback()
            return None
        self._db.commit()

        account = self.get_by_id(account_id)
        return account.cash if account else None

    def rename(self, account_id: str, username: str) -> Account:
        """Change an account's username."""
        result = self._db.execute(
            update(AccountORM)
            .where(AccountORM.account_id == account_id)
            .values(
                username=username.strip(),
                username_key=normalize_username(username),
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            self._db.rollback()
            raise AccountNotFoundError(account_id)
        self._db.commit()
        return self.get_by_id(account_id)

    def delete(self, account_id: str) -> None:
        """Delete an account with its holdings, badges and trades."""
        self._db.query(TradeORM).filter(TradeORM.account_id == account_id).delete()
        self._db.query(HoldingORM).filter(HoldingORM.account_id == account_id).delete()
        self._db.query(AchievementORM).filter(AchievementORM.account_id == account_id).delete()
        self._db.query(AccountORM).filter(AccountORM.account_id == account_id).delete()
        self._db.commit()

    def _query(self):
        return (
            self._db.query(AccountORM)
            .options(
                selectinload(AccountORM.holdings),
                selectinload(AccountORM.achievements),
            )
            .populate_existing()
        )

    def _sync_holdings(self, orm_account: AccountORM, holdings: list[Holding]) -> None:
        """Make the stored holdings match the domain holdings, symbol by symbol."""
        wanted = {h.symbol: h for h in holdings}
        for orm_holding in list(orm_account.holdings):
            holding = wanted.pop(orm_holding.symbol, None)
            if holding is None:
                orm_account.holdings.remove(orm_holding)
                continue
            orm_holding.shares = holding.shares
            orm_holding.average_cost = holding.average_cost
            orm_holding.acquired_at_est = to_naive_eastern(holding.acquired_at_est)

        for holding in wanted.values():
            orm_account.holdings.append(
                HoldingORM(
                    symbol=holding.symbol,
                    shares=holding.shares,
                    average_cost=holding.average_cost,
                    acquired_at_est=to_naive_eastern(holding.acquired_at_est),
                )
            )

    @staticmethod
    def _insert_missing_achievements(
        orm_account: AccountORM,
        achievements: set[Achievement],
    ) -> set[Achievement]:
        stored = {a.code for a in orm_account.achievements}
        missing = {Achievement(a) for a in achievements} - stored
        unlocked_at = to_naive_eastern(now_eastern())
        for code in sorted(missing, key=lambda a: a.value):
            orm_account.achievements.append(
                AchievementORM(code=code, unlocked_at_est=unlocked_at)
            )
        return missing

    @staticmethod
    def _to_domain(orm: AccountORM) -> Account:
        """Convert ORM model to domain model."""
        return Account(
            account_id=orm.account_id,
            username=orm.username,
            role=orm.role,
            cash=Decimal(str(orm.cash)) if orm.cash is not None else Decimal("0"),
            holdings=[
                Holding(
                    symbol=h.symbol,
                    shares=Decimal(str(h.shares)),
                    average_cost=Decimal(str(h.average_cost)),
                    acquired_at_est=to_eastern(h.acquired_at_est),
                )
                for h in orm.holdings
            ],
            achievements={a.code for a in orm.achievements},
            teacher_id=orm.teacher_id,
            version=orm.version,
            created_at_est=to_eastern(orm.created_at_est) if orm.created_at_est else None,
        )
