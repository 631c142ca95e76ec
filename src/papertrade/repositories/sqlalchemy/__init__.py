"""SQLAlchemy repository implementations."""

from papertrade.repositories.sqlalchemy.database import Base, Database
from papertrade.repositories.sqlalchemy.account_repo import SqlAlchemyAccountRepository
from papertrade.repositories.sqlalchemy.trade_repo import SqlAlchemyTradeRepository

__all__ = [
    "Base",
    "Database",
    "SqlAlchemyAccountRepository",
    "SqlAlchemyTradeRepository",
]
