"""Pytest configuration and shared fixtures for all tests."""

import os
import sys
from pathlib import Path

# Minimal environment so Settings() can be constructed in tests
os.environ.setdefault("RPC_URL", "https://api.mainnet-beta.solana.com")
os.environ.setdefault("PRIVATE_KEYS_BASE58", "test_key_placeholder")
os.environ.setdefault("DRY_RUN", "true")
os.environ.setdefault("LOG_FILE", "")

# Add project root to PYTHONPATH
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest

from rotator.config.tokens import PYUSD, USDC, USDT
from rotator.services.blockchain.wallet_operations import WalletAccount
from rotator.services.notification import NotificationService
from tests.fakes import RecordingSink


@pytest.fixture
def tokens():
    """Three-token table used by the rotation scenarios."""
    return (USDC, USDT, PYUSD)


@pytest.fixture
def account():
    """Wallet 1 without a keypair."""
    return WalletAccount(index=1, address="7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU")


@pytest.fixture
def second_account():
    """Wallet 2 without a keypair."""
    return WalletAccount(index=2, address="9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM")


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def notifications(sink):
    """NotificationService delivering to a RecordingSink."""
    return NotificationService([sink])
