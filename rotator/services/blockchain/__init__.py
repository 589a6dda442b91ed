"""
Blockchain services module.

Solana access for the trading core: wallets, balances, token accounts and swaps.
"""

from .balance_operations import BalanceProvider, SolanaBalanceProvider, get_all_balances
from .rpc_wrapper import timeout_decorator, with_timeout
from .swap_operations import (
    BridgeSwapProvider,
    DryRunSwapProvider,
    SwapProvider,
    SwapRequest,
)
from .token_accounts import TokenAccountProvisioner, derive_token_account
from .transaction_operations import confirm_signature, send_and_confirm
from .wallet_operations import WalletAccount, load_keypair, load_wallets


__all__ = [
    "BalanceProvider",
    "BridgeSwapProvider",
    "DryRunSwapProvider",
    "SolanaBalanceProvider",
    "SwapProvider",
    "SwapRequest",
    "TokenAccountProvisioner",
    "WalletAccount",
    "confirm_signature",
    "derive_token_account",
    "get_all_balances",
    "load_keypair",
    "load_wallets",
    "send_and_confirm",
    "timeout_decorator",
    "with_timeout",
]
