"""Enumerations for domain models."""

from enum import Enum


class Role(str, Enum):
    """Account roles."""

    TEACHER = "teacher"
    STUDENT = "student"


class OrderType(str, Enum):
    """Types of trade orders."""

    BUY = "buy"
    SELL = "sell"


class Achievement(str, Enum):
    """Badges an account can unlock. Once unlocked, never revoked."""

    FIRST_TRADE = "FIRST_TRADE"
    PROFIT_MAKER = "PROFIT_MAKER"
    PATIENT_INVESTOR = "PATIENT_INVESTOR"
    MARKET_MASTER = "MARKET_MASTER"
    DIVERSIFIED_INVESTOR = "DIVERSIFIED_INVESTOR"


class RosterAction(str, Enum):
    """Teacher actions that target a student account."""

    REMOVE_STUDENT = "REMOVE_STUDENT"
    ADJUST_CASH = "ADJUST_CASH"
    CHANGE_CREDENTIALS = "CHANGE_CREDENTIALS"
    VIEW_STUDENT = "VIEW_STUDENT"
