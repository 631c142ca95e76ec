"""Pydantic schemas for trade endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from papertrade.api.schemas.account import AccountResponse
from papertrade.domain.models import Achievement, OrderType, TradeRecord
from papertrade.domain.views import TradeResult


class TradeRequest(BaseModel):
    """
    Request schema for a buy or sell order.

    The order type stays a plain string here so an unknown value is reported
    as INVALID_ORDER_TYPE by the ledger rather than a schema error.
    """

    model_config = ConfigDict(populate_by_name=True)

    order_type: str = Field(..., alias="type", description="buy or sell")
    symbol: str = Field(..., min_length=1, max_length=20, description="Stock symbol")
    quantity: Decimal = Field(..., gt=0, description="Number of shares")
    price: Decimal = Field(..., gt=0, description="Fill price per share")

    @field_validator("symbol")
    @classmethod
    def uppercase_symbol(cls, v: str) -> str:
        return v.strip().upper()


class TradeRecordResponse(BaseModel):
    """Response schema for one executed trade."""

    trade_id: str
    account_id: str
    order_type: OrderType
    symbol: str
    quantity: Decimal
    price: Decimal
    executed_at_est: datetime
    cost_basis_before: Optional[Decimal] = None

    @classmethod
    def from_domain(cls, trade: TradeRecord) -> "TradeRecordResponse":
        return cls(
            trade_id=trade.trade_id,
            account_id=trade.account_id,
            order_type=trade.order_type,
            symbol=trade.symbol,
            quantity=trade.quantity,
            price=trade.price,
            executed_at_est=trade.executed_at_est,
            cost_basis_before=trade.cost_basis_before,
        )


class TradeResponse(BaseModel):
    """Response schema for an executed trade with the updated account."""

    account: AccountResponse
    trade: TradeRecordResponse
    new_achievements: list[Achievement] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, result: TradeResult) -> "TradeResponse":
        return cls(
            account=AccountResponse.from_domain(result.account),
            trade=TradeRecordResponse.from_domain(result.trade),
            new_achievements=result.new_achievements,
        )


class TradeListResponse(BaseModel):
    """Response schema for an account's trade history."""

    trades: list[TradeRecordResponse]
    count: int
