"""SQLAlchemy ORM model definitions."""

from decimal import Decimal

from sqlalchemy import (
    Column,
    String,
    DateTime,
    Integer,
    ForeignKey,
    Numeric,
    Enum as SqlEnum,
)
from sqlalchemy.orm import relationship

from papertrade.repositories.sqlalchemy.database import Base
from papertrade.domain.models.account import AMOUNT_SCALE
from papertrade.domain.models.enums import Role, OrderType, Achievement


class AccountORM(Base):
    """SQLAlchemy model for Account."""

    __tablename__ = "accounts"

    account_id = Column(String(36), primary_key=True)
    username = Column(String(64), nullable=False)
    username_key = Column(String(64), unique=True, nullable=False, index=True)
    role = Column(SqlEnum(Role), nullable=False)
    cash = Column(Numeric(precision=28, scale=AMOUNT_SCALE), nullable=False, default=Decimal("0"))
    teacher_id = Column(
        String(36),
        ForeignKey("accounts.account_id"),
        nullable=True,
        index=True,
    )
    version = Column(Integer, nullable=False, default=0)
    created_at_est = Column(DateTime, nullable=False)

    holdings = relationship(
        "HoldingORM",
        back_populates="account",
        cascade="all, delete-orphan",
        order_by="HoldingORM.symbol",
    )
    achievements = relationship(
        "AchievementORM",
        back_populates="account",
        cascade="all, delete-orphan",
    )


class HoldingORM(Base):
    """SQLAlchemy model for Holding (open position)."""

    __tablename__ = "holdings"

    account_id = Column(String(36), ForeignKey("accounts.account_id"), primary_key=True)
    symbol = Column(String(20), primary_key=True)
    shares = Column(Numeric(precision=28, scale=AMOUNT_SCALE), nullable=False)
    average_cost = Column(Numeric(precision=28, scale=AMOUNT_SCALE), nullable=False)
    acquired_at_est = Column(DateTime, nullable=False)

    account = relationship("AccountORM", back_populates="holdings")


class AchievementORM(Base):
    """SQLAlchemy model for an unlocked badge."""

    __tablename__ = "achievements"

    account_id = Column(String(36), ForeignKey("accounts.account_id"), primary_key=True)
    code = Column(SqlEnum(Achievement), primary_key=True)
    unlocked_at_est = Column(DateTime, nullable=False)

    account = relationship("AccountORM", back_populates="achievements")


class TradeORM(Base):
    """SQLAlchemy model for TradeRecord (trade history)."""

    __tablename__ = "trades"

    trade_id = Column(String(36), primary_key=True)
    account_id = Column(String(36), ForeignKey("accounts.account_id"), nullable=False, index=True)
    order_type = Column(SqlEnum(OrderType), nullable=False)
    symbol = Column(String(20), nullable=False)
    quantity = Column(Numeric(precision=28, scale=AMOUNT_SCALE), nullable=False)
    price = Column(Numeric(precision=28, scale=AMOUNT_SCALE), nullable=False)
    cost_basis_before = Column(Numeric(precision=28, scale=AMOUNT_SCALE), nullable=True)
    executed_at_est = Column(DateTime, nullable=False)
