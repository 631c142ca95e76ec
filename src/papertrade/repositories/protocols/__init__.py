"""Repository protocol definitions (interfaces)."""

from papertrade.repositories.protocols.account_repo import AccountRepository
from papertrade.repositories.protocols.trade_repo import TradeRepository

__all__ = [
    "AccountRepository",
    "TradeRepository",
]
