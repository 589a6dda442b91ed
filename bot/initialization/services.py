"""
Bot Initialization - Services Module.

Module: services.py
Builds the Solana RPC client, notification sinks, rewards client
and the trading core from settings.
"""

import asyncio
import random
from dataclasses import dataclass

from aiogram import Bot
from loguru import logger
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment

from rotator.config.settings import Settings
from rotator.config.tokens import TOKENS
from rotator.services.blockchain import (
    BridgeSwapProvider,
    DryRunSwapProvider,
    SolanaBalanceProvider,
    SwapProvider,
    TokenAccountProvisioner,
    WalletAccount,
)
from rotator.services.notification import (
    DiscordWebhookSink,
    NotificationService,
    NotificationSink,
    TelegramSink,
)
from rotator.services.rewards import RateLimiter, RewardsClient
from rotator.services.trading import (
    AmountCalculator,
    RoundScheduler,
    SelectionPolicy,
    SwapExecutor,
    WalletSupervisor,
)


@dataclass
class RotatorServices:
    """Everything the entry point has to run and close."""

    client: AsyncClient
    notifications: NotificationService
    rewards_client: RewardsClient
    swap_provider: SwapProvider
    supervisor: WalletSupervisor


def build_notification_service(settings: Settings) -> NotificationService:
    """Create the notification service with every configured sink."""
    sinks: list[NotificationSink] = []

    if settings.discord_enabled and settings.discord_webhook_url:
        sinks.append(DiscordWebhookSink(settings.discord_webhook_url))
        logger.info("Discord notifications enabled")

    if settings.telegram_enabled:
        sinks.append(TelegramSink(Bot(token=settings.telegram_bot_token), settings.telegram_chat_id))
        logger.info("Telegram notifications enabled")

    if not sinks:
        logger.info("Notifications disabled")

    return NotificationService(sinks)


def build_swap_provider(settings: Settings, client: AsyncClient) -> SwapProvider:
    """Create the swap provider (dry-run or swap bridge)."""
    if settings.dry_run:
        logger.warning("DRY_RUN enabled: swaps will be logged, not executed")
        return DryRunSwapProvider()
    return BridgeSwapProvider(
        settings.swap_bridge_url,
        client,
        rpc_timeout=settings.rpc_timeout,
    )


def build_services(
    settings: Settings,
    accounts: list[WalletAccount],
    stop: asyncio.Event,
) -> RotatorServices:
    """
    Wire the trading core.

    Args:
        settings: Application settings
        accounts: Loaded wallets
        stop: Shared stop event

    Returns:
        RotatorServices
    """
    rng = random.Random(settings.random_seed)

    client = AsyncClient(
        settings.rpc_url,
        commitment=Commitment(settings.rpc_commitment),
        timeout=settings.rpc_timeout,
    )
    notifications = build_notification_service(settings)
    balance_provider = SolanaBalanceProvider(client, rpc_timeout=settings.rpc_timeout)
    swap_provider = build_swap_provider(settings, client)

    # One limiter for all wallets: the rewards quota is per process
    rate_limiter = RateLimiter(settings.rewards_min_request_interval)
    rewards_client = RewardsClient(
        rate_limiter,
        settings.session_token,
        url=settings.rewards_url,
        season_key=settings.rewards_season_key,
        timeout=settings.rewards_timeout,
        max_retries=settings.rewards_max_retries,
        default_retry_after=settings.rewards_default_retry_after,
        max_jitter=settings.rewards_max_jitter,
        backoff_base=settings.rewards_backoff_base,
        backoff_cap=settings.rewards_backoff_cap,
        rng=rng,
    )

    selection_policy = SelectionPolicy(settings.min_balance_threshold, rng=rng)
    amount_calculator = AmountCalculator(
        balance_provider,
        swap_fraction=settings.swap_fraction,
        slippage_tolerance=settings.slippage_tolerance,
    )
    swap_executor = SwapExecutor(
        swap_provider,
        notifications,
        pool_address=settings.pool_address,
        cu_limit=settings.cu_limit,
    )

    def scheduler_factory(account: WalletAccount) -> RoundScheduler:
        return RoundScheduler(
            account,
            TOKENS,
            balance_provider,
            selection_policy,
            amount_calculator,
            swap_executor,
            notifications,
            stop,
            rewards_client=rewards_client,
            post_swap_rewards_delay=settings.post_swap_rewards_delay,
            round_delay_hours=(settings.round_delay_min_hours, settings.round_delay_max_hours),
            failure_delay=settings.failure_delay,
            max_rounds=settings.max_rounds,
            rng=rng,
        )

    provisioner = None
    if not settings.dry_run:
        provisioner = TokenAccountProvisioner(client, rpc_timeout=settings.rpc_timeout)

    supervisor = WalletSupervisor(
        accounts,
        TOKENS,
        balance_provider,
        notifications,
        scheduler_factory,
        stop,
        rewards_client=rewards_client,
        provisioner=provisioner,
    )

    return RotatorServices(
        client=client,
        notifications=notifications,
        rewards_client=rewards_client,
        swap_provider=swap_provider,
        supervisor=supervisor,
    )
