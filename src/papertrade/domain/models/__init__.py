"""Domain models package."""

from papertrade.domain.models.enums import Role, OrderType, Achievement, RosterAction
from papertrade.domain.models.actor import Actor
from papertrade.domain.models.account import (
    Account,
    Holding,
    normalize_username,
    normalize_symbol,
    AMOUNT_QUANTUM,
    AMOUNT_SCALE,
    exceeds_amount_scale,
)
from papertrade.domain.models.trade import TradeOrder, TradeRecord

__all__ = [
    "Role",
    "OrderType",
    "Achievement",
    "RosterAction",
    "Actor",
    "Account",
    "Holding",
    "normalize_username",
    "normalize_symbol",
    "AMOUNT_QUANTUM",
    "AMOUNT_SCALE",
    "exceeds_amount_scale",
    "TradeOrder",
    "TradeRecord",
]
