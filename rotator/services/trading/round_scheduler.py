"""
Round scheduler.

Per-account state machine:

    FETCHING → EVALUATING → {HALTED | SWAPPING}
    SWAPPING → {POST_SUCCESS_PAUSE | POST_FAILURE_PAUSE} → FETCHING ...

Rounds of one account are strictly sequential. A single round's fault is
caught at the round boundary and counted as a failed swap; only a halt,
the round ceiling or the stop event ends the loop.
"""

import asyncio
import random
from collections.abc import Sequence

from loguru import logger

from rotator.config.tokens import TokenConfig, get_token_config
from rotator.models import (
    RoundFailure,
    RoundHalted,
    RoundOutcome,
    RoundState,
    RoundSuccess,
    SwapPair,
    TradingStats,
)
from rotator.services.blockchain.balance_operations import BalanceProvider, get_all_balances
from rotator.services.blockchain.wallet_operations import WalletAccount
from rotator.services.notification import NotificationService, messages
from rotator.services.rewards import RewardsClient
from rotator.utils.exceptions import (
    AccountLoopFault,
    BalanceReadError,
    InsufficientBalance,
)
from rotator.utils.formatters import format_balances_compact, format_rewards

from .amount_calculator import AmountCalculator
from .selection_policy import Selection, SelectionPolicy
from .swap_executor import SwapExecutor

SECONDS_PER_HOUR = 3600


async def interruptible_sleep(stop: asyncio.Event, seconds: float) -> bool:
    """
    Sleep for `seconds` unless `stop` is set first.

    Returns:
        True if the stop event was set (before or during the sleep)
    """
    if stop.is_set():
        return True
    if seconds <= 0:
        await asyncio.sleep(0)
        return stop.is_set()
    try:
        await asyncio.wait_for(stop.wait(), timeout=seconds)
    except TimeoutError:
        return False
    return True


class RoundScheduler:
    """
    Runs the balance rotation loop for one wallet.
    """

    def __init__(
        self,
        account: WalletAccount,
        tokens: Sequence[TokenConfig],
        balance_provider: BalanceProvider,
        selection_policy: SelectionPolicy,
        amount_calculator: AmountCalculator,
        swap_executor: SwapExecutor,
        notifications: NotificationService,
        stop: asyncio.Event,
        rewards_client: RewardsClient | None = None,
        post_swap_rewards_delay: float = 300,
        round_delay_hours: tuple[float, float] = (3, 5),
        failure_delay: float = 3,
        max_rounds: int | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """
        Initialize round scheduler.

        Args:
            account: Trading wallet
            tokens: Configured tokens, in tie-break order
            balance_provider: Balance reads for the fetching state
            selection_policy: Pair selection
            amount_calculator: Swap amount calculation
            swap_executor: Single-shot swap execution
            notifications: Notification fan-out
            stop: Shared stop event; every pause returns early once it is set
            rewards_client: Rewards lookup after successful swaps (optional)
            post_swap_rewards_delay: Seconds between a swap and the rewards lookup
            round_delay_hours: (min, max) hours of the randomized pause after a success
            failure_delay: Seconds to pause after a failed round
            max_rounds: Round ceiling (None means unbounded)
            rng: Random source for pause durations
        """
        self.account = account
        self.tokens = tuple(tokens)
        self.balance_provider = balance_provider
        self.selection_policy = selection_policy
        self.amount_calculator = amount_calculator
        self.swap_executor = swap_executor
        self.notifications = notifications
        self.stop = stop
        self.rewards_client = rewards_client
        self.post_swap_rewards_delay = post_swap_rewards_delay
        self.round_delay_hours = round_delay_hours
        self.failure_delay = failure_delay
        self.max_rounds = max_rounds
        self._rng = rng or random.Random()

        self.state = RoundState.FETCHING
        self.stats = TradingStats()
        self.previous_pair: SwapPair | None = None
        self.halt_reason: str | None = None

    @property
    def prefix(self) -> str:
        return f"[{self.account.label}]"

    def _ceiling_reached(self) -> bool:
        return self.max_rounds is not None and self.stats.rounds >= self.max_rounds

    def next_round_delay(self) -> float:
        """Randomized pause after a success, in seconds."""
        low, high = self.round_delay_hours
        return self._rng.uniform(low, high) * SECONDS_PER_HOUR

    async def run_round(self) -> RoundOutcome:
        """
        Run one round: fetch balances, select a pair, swap.

        Returns:
            RoundSuccess, RoundFailure or RoundHalted
        """
        self.state = RoundState.FETCHING
        logger.info(f"{self.prefix} 📊 Fetching balance data...")
        snapshots = await get_all_balances(self.balance_provider, self.account, self.tokens)
        logger.info(f"{self.prefix} 💰 Balances: {format_balances_compact(snapshots)}")

        self.state = RoundState.EVALUATING
        selection = self.selection_policy.select(snapshots, self.previous_pair)
        if isinstance(selection, RoundHalted):
            return selection
        if selection.reversal_blocked:
            logger.info(
                f"{self.prefix} 🚫 Preventing reverse swap back to {self.previous_pair.from_token}"
            )

        self.state = RoundState.SWAPPING
        return await self._swap(selection)

    async def _swap(self, selection: Selection) -> RoundOutcome:
        pair = selection.pair
        source = get_token_config(pair.from_token, self.tokens)
        target = get_token_config(pair.to_token, self.tokens)

        logger.info(
            f"{self.prefix} 🎯 Selected {pair} "
            f"(source balance {selection.source_balance:.6f})"
        )

        try:
            quote = await self.amount_calculator.calculate(
                self.account, source, target, selection.source_balance
            )
        except (BalanceReadError, InsufficientBalance) as e:
            result = self.swap_executor.report_failure(self.account, pair, str(e))
            return RoundFailure(pair=pair, reason=result.error)

        result = await self.swap_executor.execute(self.account, source, target, quote)
        if result.success:
            return RoundSuccess(pair=pair, signature=result.signature)
        return RoundFailure(pair=pair, reason=result.error)

    async def _report_rewards(self) -> None:
        if self.rewards_client is None:
            return
        try:
            data = await self.rewards_client.fetch(self.account.address)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.opt(exception=e).warning(
                f"{self.prefix} ⚠️ Failed to fetch rewards data, continuing trading: {e}"
            )
            return
        logger.info(f"{self.prefix}\n{format_rewards(data, 'Updated Rewards Data')}")
        if data is not None and data.has_season_data:
            self.notifications.notify(messages.rewards_update(data), self.account.index)

    async def run(self) -> TradingStats:
        """
        Run rounds until halted, the round ceiling is reached or stop is set.

        Returns:
            Trading statistics of this run
        """
        logger.info(f"{self.prefix} 🚀 Starting balance rotation")

        while not self.stop.is_set():
            if self._ceiling_reached():
                logger.info(f"{self.prefix} 🏁 Reached round limit ({self.max_rounds})")
                break

            self.stats.rounds += 1
            logger.info(f"{self.prefix} 🔄 Round {self.stats.rounds}")

            try:
                outcome = await self.run_round()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                fault = AccountLoopFault(f"Unexpected error in round {self.stats.rounds}: {e}")
                logger.exception(f"{self.prefix} 💥 {fault}")
                outcome = RoundFailure(pair=None, reason=str(fault))

            if isinstance(outcome, RoundHalted):
                self.state = RoundState.HALTED
                self.halt_reason = outcome.reason
                logger.info(f"{self.prefix} 💡 Rotation halted: {outcome.reason}")
                break

            if isinstance(outcome, RoundSuccess):
                self.stats.record_success()
                self.previous_pair = outcome.pair
                self.state = RoundState.POST_SUCCESS_PAUSE
                logger.info(
                    f"{self.prefix} 📊 Stats: {self.stats.successful_swaps} successful, "
                    f"{self.stats.failed_swaps} failed"
                )
                if await self._after_success():
                    break
            else:
                self.stats.record_failure()
                self.state = RoundState.POST_FAILURE_PAUSE
                if await interruptible_sleep(self.stop, self.failure_delay):
                    break

        if self.stop.is_set():
            logger.info(f"{self.prefix} 🛑 Stop requested, ending rotation")

        self.notifications.notify(
            messages.trading_summary(self.stats, self.account.address), self.account.index
        )
        return self.stats

    async def _after_success(self) -> bool:
        """
        Post-success pauses. Returns True if the loop should stop.
        """
        logger.info(
            f"{self.prefix} ⏳ Waiting {self.post_swap_rewards_delay / 60:.0f} minutes "
            f"before fetching rewards..."
        )
        if await interruptible_sleep(self.stop, self.post_swap_rewards_delay):
            return True

        await self._report_rewards()

        if self._ceiling_reached():
            return False

        delay = self.next_round_delay()
        hours = delay / SECONDS_PER_HOUR
        logger.info(f"{self.prefix} ⏳ Waiting {hours:.2f} hours before next swap...")
        self.notifications.notify(messages.waiting(hours), self.account.index)
        return await interruptible_sleep(self.stop, delay)
