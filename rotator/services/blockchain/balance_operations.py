"""
Balance operations for SPL tokens.

This module handles:
- Token balance checking through associated token accounts
- Snapshotting all configured tokens for one wallet
"""

import asyncio
from typing import Protocol

from loguru import logger
from solana.rpc.async_api import AsyncClient

from rotator.config.constants import RPC_TIMEOUT
from rotator.config.tokens import TokenConfig
from rotator.models import BalanceSnapshot

from .rpc_wrapper import with_timeout
from .token_accounts import token_account_for
from .wallet_operations import WalletAccount


class BalanceProvider(Protocol):
    """Resolves the current holding of a token for an account."""

    async def get_balance(self, account: WalletAccount, token: TokenConfig) -> BalanceSnapshot:
        """
        Must not raise. A missing position resolves to raw amount 0;
        any other failure is reported through `BalanceSnapshot.error`.
        """
        ...


async def get_all_balances(
    provider: BalanceProvider,
    account: WalletAccount,
    tokens: tuple[TokenConfig, ...],
) -> list[BalanceSnapshot]:
    """
    Get balances for every configured token, in configured order.

    Args:
        provider: Balance provider
        account: Wallet to inspect
        tokens: Configured tokens

    Returns:
        One snapshot per token; failed reads carry an error
    """
    results = await asyncio.gather(
        *(provider.get_balance(account, token) for token in tokens),
        return_exceptions=True,
    )

    snapshots = []
    for token, result in zip(tokens, results):
        if isinstance(result, asyncio.CancelledError):
            raise result
        if isinstance(result, BaseException):
            logger.error(f"[{account.label}] ❌ Failed to get {token.name} balance: {result}")
            snapshots.append(BalanceSnapshot.failed(token.name, str(result)))
        else:
            snapshots.append(result)
    return snapshots


class SolanaBalanceProvider:
    """
    Reads SPL token balances over Solana RPC.
    """

    def __init__(self, client: AsyncClient, rpc_timeout: float = RPC_TIMEOUT) -> None:
        """
        Initialize balance provider.

        Args:
            client: Solana RPC client
            rpc_timeout: Timeout per RPC request
        """
        self.client = client
        self.rpc_timeout = rpc_timeout

    async def get_balance(self, account: WalletAccount, token: TokenConfig) -> BalanceSnapshot:
        """
        Get token balance for wallet.

        Args:
            account: Wallet to inspect
            token: Token configuration

        Returns:
            BalanceSnapshot (raw 0 if the token account does not exist,
            error set on any other failure)
        """
        try:
            token_account = token_account_for(account, token)

            account_info = await with_timeout(
                self.client.get_account_info(token_account),
                timeout=self.rpc_timeout,
                operation_name=f"get_account_info({token.name})",
            )
            if account_info.value is None:
                return BalanceSnapshot.from_raw(token.name, 0, token.decimals)

            balance = await with_timeout(
                self.client.get_token_account_balance(token_account),
                timeout=self.rpc_timeout,
                operation_name=f"get_token_account_balance({token.name})",
            )
            return BalanceSnapshot.from_raw(token.name, int(balance.value.amount), token.decimals)
        except Exception as e:
            logger.warning(f"[{account.label}] ⚠️ Could not fetch balance for {token.name}: {e}")
            return BalanceSnapshot.failed(token.name, str(e))
