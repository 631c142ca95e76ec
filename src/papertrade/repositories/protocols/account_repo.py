"""Account repository protocol."""

from decimal import Decimal
from typing import Protocol, Optional

from papertrade.domain.models import Account, Role, TradeRecord


class AccountRepository(Protocol):
    """Interface for account data access."""

    def create(self, account: Account) -> Account:
        """Persist a new account."""
        ...

    def get_by_id(self, account_id: str) -> Optional[Account]:
        """Retrieve account with holdings and achievements."""
        ...

    def get_by_username(self, username: str) -> Optional[Account]:
        """Retrieve account by username (canonical comparison)."""
        ...

    def list_all(self) -> list[Account]:
        """List all accounts."""
        ...

    def list_by_teacher(self, teacher_id: str) -> list[Account]:
        """List the students that reference teacher_id."""
        ...

    def save(
        self,
        account: Account,
        expected_version: int,
        trade: Optional[TradeRecord] = None,
    ) -> Account:
        """
        Write cash, holdings and achievements (and append trade) if the
        stored version still equals expected_version; raise
        ConcurrentModificationError otherwise. Achievements are only ever
        added.
        """
        ...

    def add_achievements(self, account_id: str, achievements: set) -> set:
        """Insert badges not yet stored; return the ones that were new."""
        ...

    def increment_cash(
        self,
        account_id: str,
        delta: Decimal,
        teacher_id: Optional[str] = None,
        role: Optional[Role] = None,
    ) -> Optional[Decimal]:
        """
        Atomically add delta to cash, never going below zero.

        When teacher_id is given the row must also belong to that teacher.
        When role is given the stored account must have that role.
        Returns the new balance, or None when no row matched.
        """
        ...

    def rename(self, account_id: str, username: str) -> Account:
        """Change an account's username."""
        ...

    def delete(self, account_id: str) -> None:
        """Delete an account with its holdings, badges and trades."""
        ...
