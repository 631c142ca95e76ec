"""Account and Holding domain models."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from papertrade.domain.models.enums import Achievement, Role


def normalize_username(username: str) -> str:
    """Canonical form used for username uniqueness and lookup."""
    return username.strip().lower()


def normalize_symbol(symbol: str) -> str:
    """Canonical form for ticker symbols."""
    return symbol.strip().upper()


# Cash, share counts and prices are stored with this many decimal places
AMOUNT_SCALE = 8
AMOUNT_QUANTUM = Decimal(1).scaleb(-AMOUNT_SCALE)


def exceeds_amount_scale(value: Decimal) -> bool:
    """True if value carries more decimal places than amounts are stored with."""
    return value.normalize().as_tuple().exponent < -AMOUNT_SCALE


@dataclass
class Holding:
    """
    Open position in one symbol.

    shares is always > 0; a position sold down to zero is removed from the
    account rather than kept with zero shares.
    """

    symbol: str
    shares: Decimal
    average_cost: Decimal
    acquired_at_est: datetime

    @property
    def cost_basis(self) -> Decimal:
        """Total amount paid for the currently held shares."""
        return self.shares * self.average_cost


@dataclass
class Account:
    """
    Trading account for a teacher or a student.

    Cash and holdings are mutated only by the ledger; achievements only grow.
    Students may reference the teacher that owns them.
    """

    account_id: str
    username: str
    role: Role
    cash: Decimal = field(default_factory=lambda: Decimal("0"))
    holdings: list[Holding] = field(default_factory=list)
    achievements: set[Achievement] = field(default_factory=set)
    teacher_id: Optional[str] = None
    version: int = 0
    created_at_est: Optional[datetime] = field(default=None)

    def __post_init__(self) -> None:
        if isinstance(self.role, str):
            self.role = Role(self.role)
        self.achievements = {Achievement(a) for a in self.achievements}

    @property
    def username_key(self) -> str:
        return normalize_username(self.username)

    @property
    def is_teacher(self) -> bool:
        return self.role == Role.TEACHER

    @property
    def symbols(self) -> list[str]:
        """Symbols of all open positions."""
        return [h.symbol for h in self.holdings]

    def get_holding(self, symbol: str) -> Optional[Holding]:
        """Return the open position for symbol, if any."""
        for holding in self.holdings:
            if holding.symbol == symbol:
                return holding
        return None
