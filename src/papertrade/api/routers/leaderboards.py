"""Leaderboard endpoints."""

from typing import Optional, Union

from fastapi import APIRouter, Depends, Query

from papertrade.api.deps import get_actor, get_leaderboard_service
from papertrade.api.schemas import (
    LeaderboardEntryResponse,
    LeaderboardResponse,
    LeaderboardsResponse,
)
from papertrade.domain.models import Actor
from papertrade.services import LeaderboardService, ScopeKind

router = APIRouter(prefix="/leaderboards", tags=["leaderboards"])


@router.get("", response_model=Union[LeaderboardsResponse, LeaderboardResponse])
def get_leaderboards(
    scope: Optional[ScopeKind] = Query(None, description="global or class; both if omitted"),
    actor: Actor = Depends(get_actor),
    service: LeaderboardService = Depends(get_leaderboard_service),
) -> Union[LeaderboardsResponse, LeaderboardResponse]:
    """Accounts ranked by total value (cash plus holdings at current quotes)."""
    if scope is not None:
        entries = service.get_leaderboard(actor, scope)
        return LeaderboardResponse(
            scope=scope.value,
            entries=[LeaderboardEntryResponse.from_domain(e) for e in entries],
        )

    boards = service.get_leaderboards(actor)
    return LeaderboardsResponse(
        global_leaderboard=[LeaderboardEntryResponse.from_domain(e) for e in boards.global_board],
        class_leaderboard=[LeaderboardEntryResponse.from_domain(e) for e in boards.class_board],
        as_of=boards.as_of,
    )
