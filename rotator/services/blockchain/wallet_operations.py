"""
Wallet operations.

This module handles:
- Loading Solana keypairs from base58 secret keys
- The WalletAccount handle passed through the trading core
"""

from dataclasses import dataclass, field

import base58
from loguru import logger
from solders.keypair import Keypair

from rotator.config.constants import KEYPAIR_SECRET_LENGTH
from rotator.utils.exceptions import ConfigurationError
from rotator.utils.security import mask_address


@dataclass(frozen=True)
class WalletAccount:
    """One configured trading wallet."""

    index: int  # 1-based, used in logs and notifications
    address: str
    keypair: Keypair | None = field(default=None, compare=False, repr=False)

    @property
    def label(self) -> str:
        return f"Wallet {self.index}"


def load_keypair(private_key_b58: str) -> Keypair:
    """
    Load keypair from base58 private key.

    Accepts a base58 string decoding to exactly 64 bytes.

    Args:
        private_key_b58: Base58 encoded secret key

    Returns:
        Solana Keypair

    Raises:
        ConfigurationError: If the key is empty or malformed
    """
    if not private_key_b58 or not private_key_b58.strip():
        raise ConfigurationError(
            "Private key is required. Set PRIVATE_KEYS_BASE58 environment variable."
        )

    try:
        key_bytes = base58.b58decode(private_key_b58.strip())
    except ValueError as e:
        raise ConfigurationError(f"Invalid base58 private key: {e}") from e

    if len(key_bytes) != KEYPAIR_SECRET_LENGTH:
        raise ConfigurationError(
            f"Invalid base58 private key: decoded to {len(key_bytes)} bytes, "
            f"expected {KEYPAIR_SECRET_LENGTH}"
        )

    try:
        return Keypair.from_bytes(key_bytes)
    except Exception as e:
        raise ConfigurationError(f"Invalid base58 private key: {e}") from e


def load_wallets(private_keys: list[str]) -> list[WalletAccount]:
    """
    Load multiple wallets from base58 private keys.

    Args:
        private_keys: Base58 secret keys, one per wallet

    Returns:
        WalletAccount list with 1-based indices

    Raises:
        ConfigurationError: If no keys are given or any key is invalid
    """
    keys = [key.strip() for key in private_keys if key and key.strip()]
    if not keys:
        raise ConfigurationError("No valid private keys found in PRIVATE_KEYS_BASE58.")

    logger.info(f"🔑 Loading {len(keys)} wallet(s)...")

    wallets = []
    for index, private_key in enumerate(keys, start=1):
        try:
            keypair = load_keypair(private_key)
        except ConfigurationError as e:
            raise ConfigurationError(f"Failed to load wallet {index}: {e}") from e

        address = str(keypair.pubkey())
        logger.info(f"✅ Wallet {index}: {mask_address(address)}")
        wallets.append(WalletAccount(index=index, address=address, keypair=keypair))

    return wallets
