"""
Domain models.

Exports all value types for easy imports.
"""

from rotator.models.balance import BalanceSnapshot, from_base_units, to_base_units
from rotator.models.rewards import CategoryPoints, RewardsData
from rotator.models.round import (
    RoundFailure,
    RoundHalted,
    RoundOutcome,
    RoundState,
    RoundSuccess,
    SwapPair,
    TradingStats,
)


__all__ = [
    "BalanceSnapshot",
    "CategoryPoints",
    "RewardsData",
    "RoundFailure",
    "RoundHalted",
    "RoundOutcome",
    "RoundState",
    "RoundSuccess",
    "SwapPair",
    "TradingStats",
    "from_base_units",
    "to_base_units",
]
