"""
Swap pair selection.

Picks the source (largest usable balance) and a random target for a round,
never swapping straight back along the previous round's pair.
"""

import random
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from rotator.models import BalanceSnapshot, RoundHalted, SwapPair

HALT_NO_USABLE_BALANCES = "no usable balances"
HALT_BELOW_THRESHOLD = "below threshold"
HALT_NO_TARGET = "no target available"
HALT_NO_NON_REVERSING_TARGET = "no non-reversing target"


@dataclass(frozen=True)
class Selection:
    """Chosen pair plus the source balance seen at selection time."""

    pair: SwapPair
    source_balance: Decimal
    reversal_blocked: bool = False


class SelectionPolicy:
    """
    Source/target selection with the anti-reversal rule.

    Given previous pair A → B, a round whose source is B may not pick A as target.
    """

    def __init__(
        self,
        min_balance_threshold: Decimal,
        rng: random.Random | None = None,
    ) -> None:
        """
        Initialize selection policy.

        Args:
            min_balance_threshold: Source must hold strictly more than this
            rng: Random source for target choice (seed it for reproducibility)
        """
        self.min_balance_threshold = min_balance_threshold
        self._rng = rng or random.Random()

    def select(
        self,
        snapshots: Sequence[BalanceSnapshot],
        previous: SwapPair | None = None,
    ) -> Selection | RoundHalted:
        """
        Select the swap pair for a round.

        Args:
            snapshots: One snapshot per configured token, in configured order
            previous: Last successful pair of this account, if any

        Returns:
            Selection, or RoundHalted when no swap should be made
        """
        usable = [s for s in snapshots if s.is_usable]
        if not usable:
            return RoundHalted(HALT_NO_USABLE_BALANCES)

        # max() keeps the first maximal entry, so ties follow configured order
        source = max(usable, key=lambda s: s.amount)

        if source.amount <= self.min_balance_threshold:
            return RoundHalted(HALT_BELOW_THRESHOLD)

        candidates = [s.token_name for s in usable if s.token_name != source.token_name]
        if not candidates:
            return RoundHalted(HALT_NO_TARGET)

        reversal_blocked = previous is not None and previous.to_token == source.token_name
        if reversal_blocked:
            candidates = [name for name in candidates if name != previous.from_token]
            if not candidates:
                return RoundHalted(HALT_NO_NON_REVERSING_TARGET)

        target = self._rng.choice(candidates)
        return Selection(
            pair=SwapPair(from_token=source.token_name, to_token=target),
            source_balance=source.amount,
            reversal_blocked=reversal_blocked,
        )
