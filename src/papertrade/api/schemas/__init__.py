"""Pydantic schemas for API request/response."""

from papertrade.api.schemas.account import (
    TeacherCreateRequest,
    StudentCreateRequest,
    CashAdjustRequest,
    CredentialsUpdateRequest,
    AccountResponse,
    RosterResponse,
    CashBalanceResponse,
)
from papertrade.api.schemas.trade import (
    TradeRequest,
    TradeRecordResponse,
    TradeResponse,
    TradeListResponse,
)
from papertrade.api.schemas.portfolio import (
    HoldingResponse,
    PortfolioResponse,
    LeaderboardEntryResponse,
    LeaderboardsResponse,
    LeaderboardResponse,
    EvaluationResponse,
)
from papertrade.api.schemas.market import (
    QuoteResponse,
    QuotesResponse,
    IndustriesResponse,
)

__all__ = [
    "TeacherCreateRequest",
    "StudentCreateRequest",
    "CashAdjustRequest",
    "CredentialsUpdateRequest",
    "AccountResponse",
    "RosterResponse",
    "CashBalanceResponse",
    "TradeRequest",
    "TradeRecordResponse",
    "TradeResponse",
    "TradeListResponse",
    "HoldingResponse",
    "PortfolioResponse",
    "LeaderboardEntryResponse",
    "LeaderboardsResponse",
    "LeaderboardResponse",
    "EvaluationResponse",
    "QuoteResponse",
    "QuotesResponse",
    "IndustriesResponse",
]
