"""Core utilities and shared functionality."""

from papertrade.core.timezone import (
    now_eastern,
    to_eastern,
    to_naive_eastern,
    EASTERN_TZ,
)
from papertrade.core.exceptions import (
    AppError,
    ValidationError,
    NotFoundError,
    AccountNotFoundError,
    InsufficientFundsError,
    InsufficientSharesError,
    InvalidOrderTypeError,
    UnauthorizedRosterAccessError,
    ConcurrentModificationError,
    QuotesUnavailableError,
)

__all__ = [
    "now_eastern",
    "to_eastern",
    "to_naive_eastern",
    "EASTERN_TZ",
    "AppError",
    "ValidationError",
    "NotFoundError",
    "AccountNotFoundError",
    "InsufficientFundsError",
    "InsufficientSharesError",
    "InvalidOrderTypeError",
    "UnauthorizedRosterAccessError",
    "ConcurrentModificationError",
    "QuotesUnavailableError",
]
