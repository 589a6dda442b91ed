"""
Balance models.

Token amount conversions and the per-read balance snapshot.
"""

from dataclasses import dataclass
from decimal import ROUND_FLOOR, Decimal


def from_base_units(amount: int, decimals: int) -> Decimal:
    """
    Convert base units to decimal amount.

    Args:
        amount: Integer amount in base units
        decimals: Token decimal precision

    Returns:
        Decimal amount (amount / 10^decimals)
    """
    if decimals < 0:
        raise ValueError(f"Invalid decimals: {decimals}")
    return Decimal(amount) / Decimal(10 ** decimals)


def to_base_units(amount: Decimal, decimals: int) -> int:
    """
    Convert decimal amount to base units, flooring to the integer base unit.

    Args:
        amount: Decimal amount
        decimals: Token decimal precision

    Returns:
        Integer amount in base units

    Raises:
        ValueError: If amount is negative or decimals invalid
    """
    if amount < 0:
        raise ValueError(f"Invalid amount: {amount}")
    if decimals < 0:
        raise ValueError(f"Invalid decimals: {decimals}")
    scaled = Decimal(amount) * Decimal(10 ** decimals)
    return int(scaled.to_integral_value(rounding=ROUND_FLOOR))


@dataclass(frozen=True)
class BalanceSnapshot:
    """
    One token balance as read from the chain.

    Produced fresh on every read and never cached across rounds.
    A snapshot with `error` set marks the token unusable for the round.
    """

    token_name: str
    raw_amount: int
    amount: Decimal
    error: str | None = None

    @property
    def is_usable(self) -> bool:
        return self.error is None

    @classmethod
    def from_raw(cls, token_name: str, raw_amount: int, decimals: int) -> "BalanceSnapshot":
        return cls(
            token_name=token_name,
            raw_amount=raw_amount,
            amount=from_base_units(raw_amount, decimals),
        )

    @classmethod
    def failed(cls, token_name: str, error: str) -> "BalanceSnapshot":
        return cls(token_name=token_name, raw_amount=0, amount=Decimal("0"), error=error)
