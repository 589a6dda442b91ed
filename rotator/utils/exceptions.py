"""
Exception handling utilities.

Defines categorized exception types for proper error handling.

Fatal:
- ConfigurationError: missing or malformed credentials, aborts startup

Recovered inside a round:
- BalanceReadError: token marked unusable for the round
- InsufficientBalance, SwapExecutionError: round recorded as failure

Recovered inside the rewards client:
- RewardsFetchError / RateLimited: retried, then soft-fail to None

Recovered at loop boundaries:
- AccountLoopFault: unexpected error inside one round
- SupervisorFault: an account loop that cannot continue
"""


class RotatorError(Exception):
    """Base exception for the rotator."""
    pass


class ConfigurationError(RotatorError):
    """Raised when configuration or credentials are missing or malformed."""
    pass


class RpcTimeoutError(RotatorError):
    """Raised when a Solana RPC call times out."""
    pass


class BalanceReadError(RotatorError):
    """Raised when a token balance cannot be read."""

    def __init__(self, token_name: str, reason: str) -> None:
        self.token_name = token_name
        self.reason = reason
        super().__init__(f"Failed to fetch current {token_name} balance: {reason}")


class InsufficientBalance(RotatorError):
    """Raised when the clamped swap amount is not positive."""
    pass


class SwapExecutionError(RotatorError):
    """Raised by swap providers when the exchange call fails."""
    pass


class RewardsFetchError(RotatorError):
    """Raised for a failed rewards request (non-2xx status)."""

    def __init__(self, message: str, status: int | None = None) -> None:
        self.status = status
        super().__init__(message)


class RateLimited(RewardsFetchError):
    """Raised when the rewards service answers 429 Too Many Requests."""

    def __init__(self, retry_after: float | None = None) -> None:
        self.retry_after = retry_after
        super().__init__("HTTP 429: Too Many Requests", status=429)


class AccountLoopFault(RotatorError):
    """Unexpected error inside one account's round."""
    pass


class SupervisorFault(RotatorError):
    """An account loop that could not continue."""

    def __init__(self, wallet_index: int, cause: BaseException) -> None:
        self.wallet_index = wallet_index
        self.cause = cause
        super().__init__(f"Wallet {wallet_index} trading failed: {cause}")
