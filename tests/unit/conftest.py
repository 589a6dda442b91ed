"""
Shared fixtures for unit tests.

This module provides common fixtures used across multiple test modules:
- Simulated clock for rate limiter and rewards tests
- RoundScheduler factory wired to in-memory fakes
"""

import asyncio
import random
from decimal import Decimal

import pytest

from rotator.services.trading import (
    AmountCalculator,
    RoundScheduler,
    SelectionPolicy,
    SwapExecutor,
)
from tests.fakes import FakeBalanceProvider, FakeSwapProvider


class SimulatedClock:
    """
    Monotonic clock advanced only by the recorded sleep.

    `drift` makes sleeps longer than `drift` wake that many seconds early.
    """

    def __init__(self, start: float = 1000.0, drift: float = 0.0):
        self.now = start
        self.drift = drift
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds - self.drift if seconds > self.drift else seconds
        await asyncio.sleep(0)


@pytest.fixture
def clock():
    """
    Simulated clock.

    Returns:
        SimulatedClock: Clock starting at t=1000
    """
    return SimulatedClock()


@pytest.fixture
def recorded_sleep():
    """
    Async sleep that records delays and returns at once.

    Returns:
        tuple: (sleep coroutine function, list of recorded delays)
    """
    delays: list[float] = []

    async def sleep(seconds: float) -> None:
        delays.append(seconds)

    return sleep, delays


@pytest.fixture
def balance_provider():
    """Wallet holding 100 USDC only."""
    return FakeBalanceProvider({"USDC": "100", "USDT": "0", "PYUSD": "0"})


@pytest.fixture
def make_scheduler(account, tokens, notifications, balance_provider):
    """
    Factory for RoundScheduler instances with zero pauses.

    Keyword overrides: swap_provider, balance_provider, amount_calculator,
    selection_policy, rewards_client, stop, max_rounds, account and any
    RoundScheduler argument.
    """

    def factory(**overrides) -> RoundScheduler:
        provider = overrides.pop("balance_provider", balance_provider)
        swap_provider = overrides.pop("swap_provider", None) or FakeSwapProvider(provider)
        rng = overrides.pop("rng", random.Random(7))

        selection_policy = overrides.pop(
            "selection_policy", SelectionPolicy(Decimal("1"), rng=rng)
        )
        amount_calculator = overrides.pop(
            "amount_calculator",
            AmountCalculator(provider, Decimal("0.75"), Decimal("0.15")),
        )
        swap_executor = SwapExecutor(
            swap_provider, notifications, pool_address="Pool1111", cu_limit=1_200_000
        )

        params = {
            "account": account,
            "tokens": tokens,
            "balance_provider": provider,
            "selection_policy": selection_policy,
            "amount_calculator": amount_calculator,
            "swap_executor": swap_executor,
            "notifications": notifications,
            "stop": asyncio.Event(),
            "post_swap_rewards_delay": 0,
            "round_delay_hours": (0, 0),
            "failure_delay": 0,
            "max_rounds": 3,
            "rng": rng,
        }
        params.update(overrides)
        return RoundScheduler(**params)

    return factory
