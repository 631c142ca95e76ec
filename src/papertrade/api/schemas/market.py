"""Pydantic schemas for market data endpoints."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel


class QuoteResponse(BaseModel):
    """Response schema for a quote."""

    symbol: str
    last_price: Decimal
    as_of: datetime


class QuotesResponse(BaseModel):
    """Response schema for a quote lookup; unquoted symbols are listed as missing."""

    quotes: list[QuoteResponse]
    missing: list[str]


class IndustriesResponse(BaseModel):
    """Response schema for an industry lookup."""

    industries: dict[str, str]
