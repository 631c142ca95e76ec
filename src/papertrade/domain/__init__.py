"""Domain layer - pure business models with no external dependencies."""

from papertrade.domain.models import (
    Actor,
    Account,
    Holding,
    TradeOrder,
    TradeRecord,
    Role,
    OrderType,
    Achievement,
    RosterAction,
)

__all__ = [
    "Actor",
    "Account",
    "Holding",
    "TradeOrder",
    "TradeRecord",
    "Role",
    "OrderType",
    "Achievement",
    "RosterAction",
]
