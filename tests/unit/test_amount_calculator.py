"""
Unit tests for swap amount calculation.

Tests cover:
- Fresh-balance clamp with the 95% safety margin
- Base unit conversion of input and minimum output
- Failure modes (unreadable balance, nothing to swap)
"""

from decimal import Decimal

import pytest

from rotator.config.tokens import PYUSD, USDC, USDT
from rotator.services.trading import AmountCalculator
from rotator.services.trading.amount_calculator import clamp_amount, min_amount_out
from rotator.utils.exceptions import BalanceReadError, InsufficientBalance
from tests.fakes import FakeBalanceProvider


def make_calculator(fresh, fraction="0.75", slippage="0.15", errors=None):
    provider = FakeBalanceProvider({"USDC": fresh}, errors=errors)
    return AmountCalculator(provider, Decimal(fraction), Decimal(slippage))


class TestClamp:
    """Test the fresh-balance clamp."""

    @pytest.mark.asyncio
    async def test_fresh_balance_drop_clamps_to_margin(self, account):
        """Selection 100, fresh 80, full fraction: amount is 76, not 95."""
        calculator = make_calculator(fresh="80", fraction="1")

        quote = await calculator.calculate(account, USDC, USDT, Decimal("100"))

        assert quote.requested == Decimal("100")
        assert quote.amount == Decimal("76")
        assert quote.adjusted

    @pytest.mark.asyncio
    async def test_requested_below_margin_is_kept(self, account):
        """Selection 100 × 0.75 = 75 stays below 80 × 0.95 = 76."""
        calculator = make_calculator(fresh="80")

        quote = await calculator.calculate(account, USDC, USDT, Decimal("100"))

        assert quote.amount == Decimal("75")
        assert not quote.adjusted

    @pytest.mark.asyncio
    async def test_amount_never_exceeds_margin(self, account):
        """amount <= fresh × 0.95 across a grid of inputs."""
        for selection in ("1.5", "10", "100", "12345.678901"):
            for fresh in ("1.2", "9", "50", "100", "20000"):
                calculator = make_calculator(fresh=fresh, fraction="1")
                quote = await calculator.calculate(account, USDC, USDT, Decimal(selection))

                assert quote.amount <= Decimal(fresh) * Decimal("0.95")
                assert quote.amount <= Decimal(selection)

    def test_clamp_amount(self):
        """clamp_amount is min(requested, fresh × margin)."""
        assert clamp_amount(Decimal("100"), Decimal("80")) == Decimal("76")
        assert clamp_amount(Decimal("10"), Decimal("80")) == Decimal("10")


class TestBaseUnits:
    """Test integer swap parameters."""

    @pytest.mark.asyncio
    async def test_exact_in_and_min_out(self, account):
        """7.5 USDC in, at least 6.375 out with 15% slippage."""
        calculator = make_calculator(fresh="10")

        quote = await calculator.calculate(account, USDC, PYUSD, Decimal("10"))

        assert quote.amount == Decimal("7.5")
        assert quote.exact_amount_in == 7_500_000
        assert quote.min_amount_out == 6_375_000

    def test_min_amount_out_floors(self):
        """Minimum output is floored to whole base units."""
        assert min_amount_out(Decimal("1.0000019"), Decimal("0"), 6) == 1_000_001


class TestFailures:
    """Test calculator failures."""

    @pytest.mark.asyncio
    async def test_zero_fresh_balance(self, account):
        """Nothing left to swap raises InsufficientBalance."""
        calculator = make_calculator(fresh="0")

        with pytest.raises(InsufficientBalance):
            await calculator.calculate(account, USDC, USDT, Decimal("100"))

    @pytest.mark.asyncio
    async def test_unreadable_fresh_balance(self, account):
        """A failed fresh read raises BalanceReadError naming the token."""
        calculator = make_calculator(fresh="10", errors={"USDC": "timeout"})

        with pytest.raises(BalanceReadError) as exc_info:
            await calculator.calculate(account, USDC, USDT, Decimal("100"))

        assert exc_info.value.token_name == "USDC"
        assert "timeout" in str(exc_info.value)

    def test_invalid_fraction(self):
        """Swap fraction must be in (0, 1]."""
        provider = FakeBalanceProvider()
        with pytest.raises(ValueError):
            AmountCalculator(provider, Decimal("0"), Decimal("0.15"))
        with pytest.raises(ValueError):
            AmountCalculator(provider, Decimal("1.5"), Decimal("0.15"))
