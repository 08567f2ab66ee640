"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/Caller
  2xxx: Account
  3xxx: Market
  5xxx: Position
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth/Caller ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid or expired credentials", 401)


class NotAuthorizedError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(1006, f"Not authorized: {detail}", 403)


# --- 2xxx: Account ---

class InsufficientFundsError(AppError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            2001,
            f"Insufficient funds: required {required}, available {available}",
            422,
        )


# --- 3xxx: Market ---

class MarketNotFoundError(AppError):
    def __init__(self, market_id: int) -> None:
        super().__init__(3001, f"Market not found: {market_id}", 404)


class MarketExpiredError(AppError):
    def __init__(self, market_id: int) -> None:
        super().__init__(3002, f"Market is closed for staking: {market_id}", 422)


class MarketNotExpiredError(AppError):
    def __init__(self, market_id: int, expiry_block: int) -> None:
        super().__init__(
            3003,
            f"Market {market_id} cannot be resolved before block {expiry_block}",
            422,
        )


class MarketResolvedError(AppError):
    def __init__(self, market_id: int) -> None:
        super().__init__(3004, f"Market already resolved: {market_id}", 409)


class MarketNotResolvedError(AppError):
    def __init__(self, market_id: int) -> None:
        super().__init__(3005, f"Market not resolved yet: {market_id}", 422)


class InvalidOutcomeError(AppError):
    def __init__(self, outcome: object) -> None:
        super().__init__(3006, f"Invalid outcome: {outcome!r}", 422)


class InvalidMarketParamsError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(3007, f"Invalid market parameters: {detail}", 422)


class BatchLimitExceededError(AppError):
    def __init__(self, size: int, limit: int) -> None:
        super().__init__(3008, f"Batch of {size} markets exceeds limit {limit}", 422)


# --- 5xxx: Position ---

class NoPositionError(AppError):
    def __init__(self, market_id: int, detail: str = "nothing to claim") -> None:
        super().__init__(5001, f"No position in market {market_id}: {detail}", 404)


class AlreadyClaimedError(AppError):
    def __init__(self, market_id: int) -> None:
        super().__init__(5002, f"Winnings already claimed for market {market_id}", 409)


# --- 9xxx: System ---

class RateLimitError(AppError):
    def __init__(self) -> None:
        super().__init__(9001, "Rate limit exceeded", 429)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
