"""Pydantic schemas for teacher and roster endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from papertrade.domain.models import Account, Achievement, Role
from papertrade.services import sort_achievements


class TeacherCreateRequest(BaseModel):
    """Request schema for registering a teacher."""

    username: str = Field(..., min_length=1, max_length=255, description="Unique username")


class StudentCreateRequest(BaseModel):
    """Request schema for adding a student to the caller's roster."""

    username: str = Field(..., min_length=1, max_length=255, description="Unique username")
    starting_cash: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Opening cash balance; defaults to the configured student cash",
    )


class CashAdjustRequest(BaseModel):
    """Request schema for a cash adjustment (negative delta removes cash)."""

    delta: Decimal = Field(..., description="Amount to add to cash")


class CredentialsUpdateRequest(BaseModel):
    """Request schema for changing a student's username."""

    username: str = Field(..., min_length=1, max_length=255, description="New username")


class AccountResponse(BaseModel):
    """Response schema for a single account."""

    account_id: str
    username: str
    role: Role
    cash: Decimal
    teacher_id: Optional[str] = None
    achievements: list[Achievement] = Field(default_factory=list)
    created_at_est: Optional[datetime] = None

    @classmethod
    def from_domain(cls, account: Account) -> "AccountResponse":
        return cls(
            account_id=account.account_id,
            username=account.username,
            role=account.role,
            cash=account.cash,
            teacher_id=account.teacher_id,
            achievements=sort_achievements(account.achievements),
            created_at_est=account.created_at_est,
        )


class RosterResponse(BaseModel):
    """Response schema for a teacher's roster."""

    students: list[AccountResponse]
    count: int


class CashBalanceResponse(BaseModel):
    """Response schema for a cash balance after an adjustment."""

    account_id: str
    cash: Decimal
