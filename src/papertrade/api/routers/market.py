"""Market data endpoints."""

from fastapi import APIRouter, Depends, Query

from papertrade.api.deps import get_actor, get_market_data_service
from papertrade.api.schemas import IndustriesResponse, QuoteResponse, QuotesResponse
from papertrade.core.exceptions import ValidationError
from papertrade.domain.models import Actor
from papertrade.services import MarketDataService

router = APIRouter(prefix="/market", tags=["market"])


def _parse_symbols(symbols: str) -> list[str]:
    parsed = [s.strip().upper() for s in symbols.split(",") if s.strip()]
    if not parsed:
        raise ValidationError("At least one symbol is required")
    return list(dict.fromkeys(parsed))


@router.get("/quotes", response_model=QuotesResponse)
def get_quotes(
    symbols: str = Query(..., description="Comma-separated symbols"),
    actor: Actor = Depends(get_actor),
    market: MarketDataService = Depends(get_market_data_service),
) -> QuotesResponse:
    """Latest quotes; symbols the provider could not quote are listed as missing."""
    requested = _parse_symbols(symbols)
    quotes = market.get_quotes(requested)
    return QuotesResponse(
        quotes=[
            QuoteResponse(symbol=q.symbol, last_price=q.last_price, as_of=q.as_of)
            for q in quotes.values()
        ],
        missing=[s for s in requested if s not in quotes],
    )


@router.get("/industries", response_model=IndustriesResponse)
def get_industries(
    symbols: str = Query(..., description="Comma-separated symbols"),
    actor: Actor = Depends(get_actor),
    market: MarketDataService = Depends(get_market_data_service),
) -> IndustriesResponse:
    """Industry per symbol; unknown symbols map to "Other"."""
    return IndustriesResponse(industries=market.get_industries(_parse_symbols(symbols)))
