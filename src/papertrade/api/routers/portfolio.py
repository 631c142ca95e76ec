"""Portfolio and achievement endpoints."""

from fastapi import APIRouter, Depends

from papertrade.api.deps import get_achievement_service, get_actor, get_ledger_service
from papertrade.api.schemas import EvaluationResponse, PortfolioResponse
from papertrade.domain.models import Actor
from papertrade.services import AchievementService, LedgerService

router = APIRouter(tags=["portfolio"])


@router.get("/portfolio", response_model=PortfolioResponse)
def get_portfolio(
    actor: Actor = Depends(get_actor),
    ledger: LedgerService = Depends(get_ledger_service),
) -> PortfolioResponse:
    """Cash, valued holdings and badges of the caller's account."""
    return PortfolioResponse.from_domain(ledger.get_portfolio(actor.account_id))


@router.post("/achievements/evaluate", response_model=EvaluationResponse)
def evaluate_achievements(
    actor: Actor = Depends(get_actor),
    service: AchievementService = Depends(get_achievement_service),
) -> EvaluationResponse:
    """Re-evaluate the caller's badges and store any new ones."""
    return EvaluationResponse.from_domain(service.evaluate_account(actor.account_id))
