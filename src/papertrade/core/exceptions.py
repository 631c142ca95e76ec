"""Application-level exceptions."""


class AppError(Exception):
    """Base exception for application errors."""

    status_code = 400

    def __init__(self, message: str, code: str = "APP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(AppError):
    """Raised when input validation fails."""

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class NotFoundError(AppError):
    """Raised when a requested resource is not found."""

    status_code = 404

    def __init__(self, resource: str, identifier: str, code: str = "NOT_FOUND"):
        super().__init__(f"{resource} not found: {identifier}", code=code)


class AccountNotFoundError(NotFoundError):
    """Raised when an account id does not resolve to a stored account."""

    def __init__(self, account_id: str):
        super().__init__("Account", account_id, code="ACCOUNT_NOT_FOUND")


class InsufficientFundsError(AppError):
    """Raised when a buy or cash debit exceeds the available cash."""

    def __init__(self, requested: str, available: str):
        super().__init__(
            f"Insufficient funds: requested {requested}, available {available}",
            code="INSUFFICIENT_FUNDS",
        )


class InsufficientSharesError(AppError):
    """Raised when attempting to sell more shares than owned."""

    def __init__(self, symbol: str, requested: str, available: str):
        super().__init__(
            f"Insufficient shares of {symbol}: requested {requested}, available {available}",
            code="INSUFFICIENT_SHARES",
        )


class InvalidOrderTypeError(AppError):
    """Raised when an order type is neither buy nor sell."""

    def __init__(self, order_type: str):
        super().__init__(f"Invalid order type: {order_type!r}", code="INVALID_ORDER_TYPE")


class UnauthorizedRosterAccessError(AppError):
    """Raised when an actor acts on an account outside their roster."""

    status_code = 403

    def __init__(self, message: str = "Account is not on your roster"):
        super().__init__(message, code="UNAUTHORIZED_ROSTER_ACCESS")


class ConcurrentModificationError(AppError):
    """Raised when an account changed between read and write."""

    status_code = 409

    def __init__(self, account_id: str):
        super().__init__(
            f"Account {account_id} was modified concurrently",
            code="CONCURRENT_MODIFICATION",
        )


class QuotesUnavailableError(AppError):
    """
    Raised by market data providers when quotes cannot be fetched.

    Never surfaced as a request failure: MarketDataService catches it and
    valuation falls back to cost basis.
    """

    status_code = 503

    def __init__(self, message: str = "Quotes unavailable"):
        super().__init__(message, code="QUOTES_UNAVAILABLE")
