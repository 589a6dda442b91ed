"""
Swap amount calculation.

Turns "swap p of the selected balance" into integer-exact swap parameters,
clamped against a balance re-read right before the swap.
"""

from dataclasses import dataclass
from decimal import Decimal

from loguru import logger

from rotator.config.constants import SWAP_SAFETY_MARGIN
from rotator.config.tokens import TokenConfig
from rotator.models import to_base_units
from rotator.services.blockchain.balance_operations import BalanceProvider
from rotator.services.blockchain.wallet_operations import WalletAccount
from rotator.utils.exceptions import BalanceReadError, InsufficientBalance


@dataclass(frozen=True)
class SwapQuote:
    """Amounts for one swap."""

    requested: Decimal
    fresh_balance: Decimal
    amount: Decimal  # min(requested, fresh_balance * margin)
    exact_amount_in: int
    min_amount_out: int

    @property
    def adjusted(self) -> bool:
        return self.amount < self.requested


def clamp_amount(
    requested: Decimal,
    fresh_balance: Decimal,
    margin: Decimal = SWAP_SAFETY_MARGIN,
) -> Decimal:
    """Limit the requested amount to `margin` of the fresh balance."""
    return min(requested, fresh_balance * margin)


def min_amount_out(amount: Decimal, slippage_tolerance: Decimal, decimals: int) -> int:
    """Minimum acceptable output in target base units."""
    return to_base_units(amount * (Decimal("1") - slippage_tolerance), decimals)


class AmountCalculator:
    """
    Computes safety-margined, decimal-correct swap amounts.
    """

    def __init__(
        self,
        balance_provider: BalanceProvider,
        swap_fraction: Decimal,
        slippage_tolerance: Decimal,
        margin: Decimal = SWAP_SAFETY_MARGIN,
    ) -> None:
        """
        Initialize amount calculator.

        Args:
            balance_provider: Source of the fresh balance read
            swap_fraction: Share p of the selection-time balance to swap (0 < p <= 1)
            slippage_tolerance: Accepted fractional output shortfall
            margin: Share of the fresh balance that may be swapped
        """
        if not Decimal("0") < swap_fraction <= Decimal("1"):
            raise ValueError(f"Invalid swap fraction: {swap_fraction}")
        self.balance_provider = balance_provider
        self.swap_fraction = swap_fraction
        self.slippage_tolerance = slippage_tolerance
        self.margin = margin

    async def calculate(
        self,
        account: WalletAccount,
        source: TokenConfig,
        target: TokenConfig,
        selection_balance: Decimal,
    ) -> SwapQuote:
        """
        Calculate the swap amount against a fresh balance.

        Args:
            account: Trading wallet
            source: Token being sold
            target: Token being bought
            selection_balance: Source balance seen when the pair was selected

        Returns:
            SwapQuote

        Raises:
            BalanceReadError: If the fresh balance cannot be read
            InsufficientBalance: If the clamped amount is not positive
        """
        requested = selection_balance * self.swap_fraction

        logger.info(f"[{account.label}] 📊 Fetching fresh balance data before swap...")
        snapshot = await self.balance_provider.get_balance(account, source)
        if snapshot.error:
            raise BalanceReadError(source.name, snapshot.error)

        fresh_balance = snapshot.amount
        logger.info(f"[{account.label}] 💰 Fresh {source.name} balance: {fresh_balance:.6f}")

        amount = clamp_amount(requested, fresh_balance, self.margin)
        if amount <= 0:
            raise InsufficientBalance(
                f"Insufficient balance: requested {requested:.6f}, "
                f"available {fresh_balance:.6f}"
            )

        quote = SwapQuote(
            requested=requested,
            fresh_balance=fresh_balance,
            amount=amount,
            exact_amount_in=to_base_units(amount, source.decimals),
            min_amount_out=min_amount_out(amount, self.slippage_tolerance, target.decimals),
        )
        if quote.adjusted:
            logger.warning(
                f"[{account.label}] ⚠️ Adjusted swap amount from {requested:.6f} "
                f"to {amount:.6f} based on fresh balance"
            )
        return quote
