"""
Trading service module.

Structure:
- selection_policy.py: Source/target selection with the anti-reversal rule
- amount_calculator.py: Safety-margined swap amounts
- swap_executor.py: Single-shot swap execution and reporting
- round_scheduler.py: Per-wallet round state machine
- wallet_supervisor.py: Concurrent per-wallet loops with fault isolation
"""

from rotator.services.trading.amount_calculator import AmountCalculator, SwapQuote
from rotator.services.trading.round_scheduler import RoundScheduler, interruptible_sleep
from rotator.services.trading.selection_policy import Selection, SelectionPolicy
from rotator.services.trading.swap_executor import SwapExecutor, SwapResult
from rotator.services.trading.wallet_supervisor import AccountReport, WalletSupervisor


__all__ = [
    "AccountReport",
    "AmountCalculator",
    "RoundScheduler",
    "Selection",
    "SelectionPolicy",
    "SwapExecutor",
    "SwapQuote",
    "SwapResult",
    "WalletSupervisor",
    "interruptible_sleep",
]
