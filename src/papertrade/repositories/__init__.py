"""Repository layer - data access abstractions and implementations."""

from papertrade.repositories.protocols import (
    AccountRepository,
    TradeRepository,
)

__all__ = [
    "AccountRepository",
    "TradeRepository",
]
