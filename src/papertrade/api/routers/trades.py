"""Trade endpoints."""

from fastapi import APIRouter, Depends

from papertrade.api.deps import get_actor, get_ledger_service
from papertrade.api.schemas import (
    TradeListResponse,
    TradeRecordResponse,
    TradeRequest,
    TradeResponse,
)
from papertrade.domain.models import Actor, TradeOrder
from papertrade.services import LedgerService

router = APIRouter(prefix="/trades", tags=["trades"])


@router.post("", response_model=TradeResponse, status_code=201)
def execute_trade(
    data: TradeRequest,
    actor: Actor = Depends(get_actor),
    ledger: LedgerService = Depends(get_ledger_service),
) -> TradeResponse:
    """Buy or sell shares for the caller's account at the given price."""
    order = TradeOrder(
        order_type=data.order_type,
        symbol=data.symbol,
        quantity=data.quantity,
        price=data.price,
    )
    return TradeResponse.from_domain(ledger.execute_trade(actor.account_id, order))


@router.get("", response_model=TradeListResponse)
def list_trades(
    actor: Actor = Depends(get_actor),
    ledger: LedgerService = Depends(get_ledger_service),
) -> TradeListResponse:
    """The caller's trade history, oldest first."""
    trades = ledger.list_trades(actor.account_id)
    return TradeListResponse(
        trades=[TradeRecordResponse.from_domain(t) for t in trades],
        count=len(trades),
    )
