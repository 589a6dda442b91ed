"""
Round models.

Swap pairs, round outcomes and per-account trading statistics.
"""

from dataclasses import dataclass
from enum import Enum


class RoundState(str, Enum):
    """States of the per-account round state machine."""

    FETCHING = "fetching"
    EVALUATING = "evaluating"
    SWAPPING = "swapping"
    POST_SUCCESS_PAUSE = "post_success_pause"
    POST_FAILURE_PAUSE = "post_failure_pause"
    HALTED = "halted"


@dataclass(frozen=True)
class SwapPair:
    """Source and target token names of one swap."""

    from_token: str
    to_token: str

    def __str__(self) -> str:
        return f"{self.from_token} → {self.to_token}"


@dataclass(frozen=True)
class RoundSuccess:
    """Swap confirmed; carries the transaction signature."""

    pair: SwapPair
    signature: str


@dataclass(frozen=True)
class RoundFailure:
    """Swap (or the round around it) failed. `pair` is None if no pair was selected."""

    pair: SwapPair | None
    reason: str


@dataclass(frozen=True)
class RoundHalted:
    """Terminal outcome: no further rounds for this account."""

    reason: str


RoundOutcome = RoundSuccess | RoundFailure | RoundHalted


@dataclass
class TradingStats:
    """Monotonic swap counters for one run of an account loop."""

    successful_swaps: int = 0
    failed_swaps: int = 0
    rounds: int = 0

    @property
    def total_swaps(self) -> int:
        return self.successful_swaps + self.failed_swaps

    @property
    def success_rate(self) -> float:
        """Success rate in percent (0.0 when nothing was attempted)."""
        if self.total_swaps == 0:
            return 0.0
        return self.successful_swaps / self.total_swaps * 100

    def record_success(self) -> None:
        self.successful_swaps += 1

    def record_failure(self) -> None:
        self.failed_swaps += 1
