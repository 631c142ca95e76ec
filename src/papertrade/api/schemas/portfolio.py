"""Pydantic schemas for portfolio, leaderboard and achievement endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from papertrade.domain.models import Achievement, Role
from papertrade.domain.views import (
    EvaluationResult,
    HoldingValuation,
    LeaderboardEntry,
    PortfolioView,
)


class HoldingResponse(BaseModel):
    """Response schema for a single valued holding."""

    symbol: str
    shares: Decimal
    average_cost: Decimal
    price: Decimal
    market_value: Decimal
    is_live_quote: bool

    @classmethod
    def from_domain(cls, valuation: HoldingValuation) -> "HoldingResponse":
        return cls(
            symbol=valuation.symbol,
            shares=valuation.shares,
            average_cost=valuation.average_cost,
            price=valuation.price,
            market_value=valuation.market_value,
            is_live_quote=valuation.is_live_quote,
        )


class PortfolioResponse(BaseModel):
    """Response schema for an account's portfolio."""

    account_id: str
    username: str
    cash: Decimal
    holdings: list[HoldingResponse]
    achievements: list[Achievement]
    total_value: Decimal

    @classmethod
    def from_domain(cls, view: PortfolioView) -> "PortfolioResponse":
        return cls(
            account_id=view.account_id,
            username=view.username,
            cash=view.cash,
            holdings=[HoldingResponse.from_domain(v) for v in view.valuations],
            achievements=view.achievements,
            total_value=view.total_value,
        )


class LeaderboardEntryResponse(BaseModel):
    """Response schema for one leaderboard row."""

    rank: int
    account_id: str
    username: str
    role: Role
    total_value: Decimal

    @classmethod
    def from_domain(cls, entry: LeaderboardEntry) -> "LeaderboardEntryResponse":
        return cls(
            rank=entry.rank,
            account_id=entry.account.account_id,
            username=entry.account.username,
            role=entry.account.role,
            total_value=entry.total_value,
        )


class LeaderboardsResponse(BaseModel):
    """Response schema for the global and class leaderboards."""

    global_leaderboard: list[LeaderboardEntryResponse]
    class_leaderboard: list[LeaderboardEntryResponse]
    as_of: Optional[datetime] = None


class LeaderboardResponse(BaseModel):
    """Response schema for a single leaderboard."""

    scope: str
    entries: list[LeaderboardEntryResponse]


class EvaluationResponse(BaseModel):
    """Response schema for an achievement evaluation."""

    account_id: str
    achievements: list[Achievement] = Field(default_factory=list)
    new_achievements: list[Achievement] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, result: EvaluationResult) -> "EvaluationResponse":
        return cls(
            account_id=result.account_id,
            achievements=result.achievements,
            new_achievements=result.new_achievements,
        )
