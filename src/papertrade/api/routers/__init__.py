"""API routers package."""

from papertrade.api.routers.roster import router as roster_router
from papertrade.api.routers.roster import teachers_router
from papertrade.api.routers.trades import router as trades_router
from papertrade.api.routers.portfolio import router as portfolio_router
from papertrade.api.routers.leaderboards import router as leaderboards_router
from papertrade.api.routers.market import router as market_router

__all__ = [
    "teachers_router",
    "roster_router",
    "trades_router",
    "portfolio_router",
    "leaderboards_router",
    "market_router",
]
