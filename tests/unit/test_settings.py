"""
Unit tests for application settings.

Tests cover:
- Defaults
- Field and model validation
- Notification sink toggles
- get_settings() error wrapping
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from rotator.config.settings import Settings, get_settings
from rotator.utils.exceptions import ConfigurationError

BASE = {
    "rpc_url": "https://api.mainnet-beta.solana.com",
    "private_keys_base58": "key1",
    "dry_run": True,
}


def make_settings(**overrides) -> Settings:
    return Settings(_env_file=None, **{**BASE, **overrides})


class TestDefaults:
    """Test default values."""

    def test_trading_defaults(self):
        """Swap fraction 0.75, slippage 0.15, threshold 1, unbounded rounds."""
        settings = make_settings()

        assert settings.swap_fraction == Decimal("0.75")
        assert settings.slippage_tolerance == Decimal("0.15")
        assert settings.min_balance_threshold == Decimal("1")
        assert settings.max_rounds is None
        assert settings.post_swap_rewards_delay == 300
        assert (settings.round_delay_min_hours, settings.round_delay_max_hours) == (3, 5)

    def test_decimal_fields_are_decimals(self):
        """Trading amounts are Decimals, never floats."""
        settings = make_settings(swap_fraction="0.5")

        assert isinstance(settings.swap_fraction, Decimal)
        assert isinstance(settings.slippage_tolerance, Decimal)
        assert isinstance(settings.min_balance_threshold, Decimal)

    def test_private_keys_are_split(self):
        """Comma-separated keys are trimmed and empty entries dropped."""
        settings = make_settings(private_keys_base58=" key1, key2 ,,")

        assert settings.get_private_keys() == ["key1", "key2"]


class TestValidation:
    """Test validation errors."""

    def test_rpc_url_scheme(self):
        with pytest.raises(ValidationError):
            make_settings(rpc_url="ws://localhost:8900")

    def test_empty_private_keys(self):
        with pytest.raises(ValidationError):
            make_settings(private_keys_base58=" , ")

    def test_swap_fraction_range(self):
        with pytest.raises(ValidationError):
            make_settings(swap_fraction="1.5")
        with pytest.raises(ValidationError):
            make_settings(swap_fraction="0")

    def test_slippage_range(self):
        with pytest.raises(ValidationError):
            make_settings(slippage_tolerance="1")

    def test_round_delay_range_ordered(self):
        with pytest.raises(ValidationError):
            make_settings(round_delay_min_hours=6, round_delay_max_hours=5)

    def test_rewards_timeout_bounds(self):
        with pytest.raises(ValidationError):
            make_settings(rewards_timeout=5)

    def test_live_mode_requires_pool_and_bridge(self):
        with pytest.raises(ValidationError):
            make_settings(dry_run=False)
        with pytest.raises(ValidationError):
            make_settings(dry_run=False, pool_address="Pool1111")

        settings = make_settings(
            dry_run=False, pool_address="Pool1111", swap_bridge_url="http://localhost:8787/swap"
        )
        assert settings.dry_run is False


class TestNotifications:
    """Test notification toggles."""

    def test_discord_without_url_is_disabled(self):
        settings = make_settings(discord_enabled=True, discord_webhook_url=None)

        assert settings.discord_enabled is False

    def test_discord_with_url(self):
        settings = make_settings(
            discord_enabled=True, discord_webhook_url="https://discord.com/api/webhooks/1/x"
        )

        assert settings.discord_enabled is True

    def test_telegram_enabled(self):
        assert not make_settings().telegram_enabled
        assert make_settings(
            telegram_bot_token="123456789:ABCdefGHIjklMNOpqrsTUVwxyz123456789",
            telegram_chat_id=42,
        ).telegram_enabled


class TestGetSettings:
    """Test cached settings loader."""

    def test_invalid_environment_raises_configuration_error(self, monkeypatch):
        monkeypatch.setenv("RPC_URL", "not-a-url")
        get_settings.cache_clear()
        try:
            with pytest.raises(ConfigurationError):
                get_settings()
        finally:
            get_settings.cache_clear()

    def test_settings_are_cached(self):
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()
