"""Trade history repository protocol."""

from typing import Protocol, Optional

from papertrade.domain.models import TradeRecord


class TradeRepository(Protocol):
    """
    Interface for trade history data access.

    Trades are written by AccountRepository.save, in the same transaction as
    the account update they belong to.
    """

    def get_by_id(self, trade_id: str) -> Optional[TradeRecord]:
        """Retrieve one trade."""
        ...

    def list_by_account(self, account_id: str) -> list[TradeRecord]:
        """List an account's trades, oldest first."""
        ...

    def count_by_account(self, account_id: str) -> int:
        """Number of trades recorded for an account."""
        ...

    def has_profitable_sell(self, account_id: str) -> bool:
        """True if any recorded sell was priced above its cost basis."""
        ...
