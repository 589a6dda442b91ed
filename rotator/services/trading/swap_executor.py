"""
Swap executor.

Calls the exchange primitive exactly once per swap. Swaps are never retried
in place: the exchange layer gives no idempotency guarantee.
"""

from dataclasses import dataclass

from loguru import logger

from rotator.config.tokens import TokenConfig
from rotator.models import SwapPair
from rotator.services.blockchain.swap_operations import SwapProvider, SwapRequest
from rotator.services.blockchain.wallet_operations import WalletAccount
from rotator.services.notification import NotificationService, messages
from rotator.utils.security import mask_signature

from .amount_calculator import SwapQuote


@dataclass(frozen=True)
class SwapResult:
    """Success flag plus signature or failure reason."""

    success: bool
    signature: str | None = None
    error: str | None = None

    def __bool__(self) -> bool:
        return self.success


class SwapExecutor:
    """
    Executes swaps and reports the outcome.

    Never raises past `execute()`: every exchange-layer error becomes a
    failed SwapResult.
    """

    def __init__(
        self,
        provider: SwapProvider,
        notifications: NotificationService,
        pool_address: str,
        cu_limit: int,
    ) -> None:
        """
        Initialize swap executor.

        Args:
            provider: Exchange primitive
            notifications: Notification fan-out
            pool_address: The single pool all swaps route through
            cu_limit: Compute-unit ceiling per swap
        """
        self.provider = provider
        self.notifications = notifications
        self.pool_address = pool_address
        self.cu_limit = cu_limit

    def build_request(self, source: TokenConfig, target: TokenConfig, quote: SwapQuote) -> SwapRequest:
        return SwapRequest(
            pool=self.pool_address,
            input_mint=source.mint,
            output_mint=target.mint,
            exact_amount_in=quote.exact_amount_in,
            min_amount_out=quote.min_amount_out,
            cu_limit=self.cu_limit,
        )

    async def execute(
        self,
        account: WalletAccount,
        source: TokenConfig,
        target: TokenConfig,
        quote: SwapQuote,
    ) -> SwapResult:
        """
        Execute a single swap.

        Args:
            account: Trading wallet
            source: Token being sold
            target: Token being bought
            quote: Amounts from AmountCalculator

        Returns:
            SwapResult
        """
        pair = SwapPair(from_token=source.name, to_token=target.name)
        logger.info(
            f"[{account.label}] 🔄 Attempting to swap {quote.amount:.6f} "
            f"{source.name} → {target.name}..."
        )

        try:
            signature = await self.provider.swap_exact_in(
                account, self.build_request(source, target, quote)
            )
        except Exception as e:
            return self.report_failure(account, pair, str(e) or e.__class__.__name__)

        logger.success(
            f"[{account.label}] ✅ Swap successful! Signature: {mask_signature(signature)}"
        )
        self.notifications.notify(
            messages.swap_succeeded(quote.amount, pair, signature), account.index
        )
        return SwapResult(success=True, signature=signature)

    def report_failure(
        self,
        account: WalletAccount,
        pair: SwapPair | None,
        reason: str,
    ) -> SwapResult:
        """Log and notify a failed swap."""
        logger.error(f"[{account.label}] ❌ Swap failed: {reason}")
        self.notifications.notify(messages.swap_failed(pair, reason), account.index)
        return SwapResult(success=False, error=reason)
