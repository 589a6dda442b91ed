"""
Application settings.

Loads configuration from environment variables using pydantic-settings.
"""

from decimal import Decimal
from functools import lru_cache

from loguru import logger
from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from rotator.config.constants import (
    DEFAULT_CU_LIMIT,
    DEFAULT_MIN_BALANCE_THRESHOLD,
    DEFAULT_SLIPPAGE_TOLERANCE,
    DEFAULT_SWAP_FRACTION,
    FAILURE_DELAY_SECONDS,
    POST_SWAP_REWARDS_DELAY_SECONDS,
    REWARDS_BACKOFF_BASE,
    REWARDS_BACKOFF_CAP,
    REWARDS_DEFAULT_RETRY_AFTER,
    REWARDS_MAX_JITTER,
    REWARDS_MAX_RETRIES,
    REWARDS_MIN_REQUEST_INTERVAL,
    REWARDS_SEASON_KEY,
    REWARDS_TIMEOUT,
    REWARDS_URL,
    ROUND_DELAY_MAX_HOURS,
    ROUND_DELAY_MIN_HOURS,
    RPC_TIMEOUT,
)
from rotator.utils.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Solana RPC
    rpc_url: str
    rpc_commitment: str = "confirmed"
    rpc_timeout: float = Field(default=RPC_TIMEOUT, gt=0)

    # Wallets
    private_keys_base58: str  # Comma-separated base58 secret keys

    # Discord notifications
    discord_enabled: bool = False
    discord_webhook_url: str | None = None

    # Telegram notifications (optional second sink)
    telegram_bot_token: str | None = None
    telegram_chat_id: int | None = None

    # Rewards API
    session_token: str = ""
    rewards_url: str = REWARDS_URL
    rewards_season_key: str = REWARDS_SEASON_KEY
    rewards_min_request_interval: float = Field(
        default=REWARDS_MIN_REQUEST_INTERVAL, ge=0,
        description="Minimum seconds between rewards calls across all wallets"
    )
    rewards_max_retries: int = Field(default=REWARDS_MAX_RETRIES, ge=1)
    rewards_timeout: float = Field(default=REWARDS_TIMEOUT, ge=10, le=15)
    rewards_default_retry_after: float = Field(default=REWARDS_DEFAULT_RETRY_AFTER, ge=0)
    rewards_max_jitter: float = Field(default=REWARDS_MAX_JITTER, ge=0)
    rewards_backoff_base: float = Field(default=REWARDS_BACKOFF_BASE, ge=0)
    rewards_backoff_cap: float = Field(default=REWARDS_BACKOFF_CAP, ge=0)

    # Trading parameters
    max_rounds: int | None = Field(
        default=None, gt=0,
        description="Round ceiling per wallet (unbounded when unset)"
    )
    min_balance_threshold: Decimal = Field(default=DEFAULT_MIN_BALANCE_THRESHOLD, ge=0)
    swap_fraction: Decimal = Field(default=DEFAULT_SWAP_FRACTION, gt=0, le=1)
    slippage_tolerance: Decimal = Field(default=DEFAULT_SLIPPAGE_TOLERANCE, ge=0, lt=1)
    cu_limit: int = Field(default=DEFAULT_CU_LIMIT, gt=0)
    post_swap_rewards_delay: float = Field(default=POST_SWAP_REWARDS_DELAY_SECONDS, ge=0)
    round_delay_min_hours: float = Field(default=ROUND_DELAY_MIN_HOURS, ge=0)
    round_delay_max_hours: float = Field(default=ROUND_DELAY_MAX_HOURS, ge=0)
    failure_delay: float = Field(default=FAILURE_DELAY_SECONDS, ge=0)
    random_seed: int | None = None

    # Swap routing
    pool_address: str = ""
    swap_bridge_url: str = ""
    dry_run: bool = False

    # Application
    log_level: str = "INFO"
    log_file: str | None = "logs/rotator.log"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("rpc_url")
    @classmethod
    def validate_rpc_url(cls, v: str) -> str:
        """Validate RPC endpoint URL."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("RPC_URL must start with http:// or https://")
        return v

    @field_validator("private_keys_base58")
    @classmethod
    def validate_private_keys(cls, v: str) -> str:
        """Require at least one non-empty key."""
        if not any(key.strip() for key in v.split(",")):
            raise ValueError(
                "Private keys are required. Set PRIVATE_KEYS_BASE58 environment variable."
            )
        return v

    @model_validator(mode="after")
    def validate_round_delay_range(self) -> "Settings":
        """Round delay range must be ordered."""
        if self.round_delay_min_hours > self.round_delay_max_hours:
            raise ValueError(
                "ROUND_DELAY_MIN_HOURS must not exceed ROUND_DELAY_MAX_HOURS"
            )
        return self

    @model_validator(mode="after")
    def validate_swap_routing(self) -> "Settings":
        """Live swaps need a pool and a swap bridge."""
        if self.dry_run:
            return self
        if not self.pool_address:
            raise ValueError("POOL_ADDRESS is required unless DRY_RUN=true")
        if not self.swap_bridge_url:
            raise ValueError("SWAP_BRIDGE_URL is required unless DRY_RUN=true")
        return self

    @model_validator(mode="after")
    def validate_notifications(self) -> "Settings":
        """Disable Discord when enabled without a webhook URL."""
        if self.discord_enabled and not self.discord_webhook_url:
            logger.warning(
                "DISCORD_ENABLED is true but DISCORD_WEBHOOK_URL is empty. "
                "Discord notifications disabled."
            )
            self.discord_enabled = False
        return self

    def get_private_keys(self) -> list[str]:
        """Parse private keys from comma-separated string."""
        return [key.strip() for key in self.private_keys_base58.split(",") if key.strip()]

    @property
    def telegram_enabled(self) -> bool:
        return bool(self.telegram_bot_token and self.telegram_chat_id)


@lru_cache
def get_settings() -> Settings:
    """
    Load settings once per process.

    Raises:
        ConfigurationError: If required settings are missing or malformed
    """
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
