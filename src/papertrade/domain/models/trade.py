"""Trade order and trade history domain models."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional, Union

from papertrade.domain.models.enums import OrderType


@dataclass
class TradeOrder:
    """
    Request to buy or sell shares of one symbol at a given price.

    order_type is kept as given by the caller; the ledger rejects values other
    than buy/sell with InvalidOrderTypeError.
    """

    order_type: Union[OrderType, str]
    symbol: str
    quantity: Decimal
    price: Decimal


@dataclass
class TradeRecord:
    """
    Trade history entry, written once per successfully applied trade.

    cost_basis_before holds the position's average cost immediately before a
    sell, so profitable sells can be recognized from history alone.
    """

    trade_id: str
    account_id: str
    order_type: OrderType
    symbol: str
    quantity: Decimal
    price: Decimal
    executed_at_est: datetime
    cost_basis_before: Optional[Decimal] = field(default=None)

    def __post_init__(self) -> None:
        if isinstance(self.order_type, str):
            self.order_type = OrderType(self.order_type)

    @property
    def gross_amount(self) -> Decimal:
        return self.quantity * self.price

    @property
    def is_profitable_sell(self) -> bool:
        return (
            self.order_type == OrderType.SELL
            and self.cost_basis_before is not None
            and self.price > self.cost_basis_before
        )
