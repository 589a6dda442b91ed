"""
Wallet supervisor.

Runs one RoundScheduler per wallet concurrently. A wallet whose loop dies is
reported and isolated; sibling wallets keep trading.
"""

import asyncio
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from loguru import logger

from rotator.config.tokens import TokenConfig
from rotator.models import BalanceSnapshot, RewardsData, TradingStats
from rotator.services.blockchain.balance_operations import BalanceProvider, get_all_balances
from rotator.services.blockchain.token_accounts import TokenAccountProvisioner
from rotator.services.blockchain.wallet_operations import WalletAccount
from rotator.services.notification import NotificationService, messages
from rotator.services.rewards import RewardsClient
from rotator.utils.exceptions import SupervisorFault
from rotator.utils.formatters import format_balances, format_rewards, format_summary
from rotator.utils.security import mask_address

from .round_scheduler import RoundScheduler

SchedulerFactory = Callable[[WalletAccount], RoundScheduler]


@dataclass
class AccountReport:
    """Outcome of one wallet's trading session."""

    account: WalletAccount
    stats: TradingStats = field(default_factory=TradingStats)
    fault: SupervisorFault | None = None
    halt_reason: str | None = None
    final_balances: list[BalanceSnapshot] = field(default_factory=list)
    final_rewards: RewardsData | None = None

    @property
    def failed(self) -> bool:
        return self.fault is not None


class WalletSupervisor:
    """
    Supervises per-wallet trading loops.
    """

    def __init__(
        self,
        accounts: Sequence[WalletAccount],
        tokens: Sequence[TokenConfig],
        balance_provider: BalanceProvider,
        notifications: NotificationService,
        scheduler_factory: SchedulerFactory,
        stop: asyncio.Event,
        rewards_client: RewardsClient | None = None,
        provisioner: TokenAccountProvisioner | None = None,
    ) -> None:
        """
        Initialize wallet supervisor.

        Args:
            accounts: Wallets to trade
            tokens: Configured tokens
            balance_provider: Balance reads for initial and final reports
            notifications: Notification fan-out
            scheduler_factory: Builds the RoundScheduler of one wallet
            stop: Shared stop event
            rewards_client: Rewards lookup for initial and final reports (optional)
            provisioner: Creates missing token accounts before trading (optional)
        """
        self.accounts = list(accounts)
        self.tokens = tuple(tokens)
        self.balance_provider = balance_provider
        self.notifications = notifications
        self.scheduler_factory = scheduler_factory
        self.stop = stop
        self.rewards_client = rewards_client
        self.provisioner = provisioner
        self.schedulers: dict[int, RoundScheduler] = {}

    async def _fetch_rewards(self, account: WalletAccount) -> RewardsData | None:
        if self.rewards_client is None:
            return None
        try:
            return await self.rewards_client.fetch(account.address)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.opt(exception=e).warning(
                f"[{account.label}] ⚠️ Failed to fetch rewards data: {e}"
            )
            return None

    async def run_account(self, account: WalletAccount) -> TradingStats:
        """
        Prepare one wallet and run its trading loop.

        Raises:
            Exception: Anything that prevents this wallet from trading
        """
        prefix = f"[{account.label}]"
        logger.info(f"{prefix} 🚀 Starting trading session for {mask_address(account.address)}")
        self.notifications.notify(messages.wallet_started(account.address), account.index)

        rewards = await self._fetch_rewards(account)
        logger.info(f"{prefix}\n{format_rewards(rewards, 'Initial Rewards Data')}")

        balances = await get_all_balances(self.balance_provider, account, self.tokens)
        logger.info(f"{prefix}\n{format_balances(balances, 'Initial Token Balances')}")

        if self.provisioner is not None:
            logger.info(f"{prefix} 🔍 Checking token accounts...")
            created = await self.provisioner.ensure_token_accounts(account, self.tokens)
            if created:
                logger.success(f"{prefix} ✅ Created token accounts: {', '.join(created)}")

        scheduler = self.scheduler_factory(account)
        self.schedulers[account.index] = scheduler
        return await scheduler.run()

    async def run(self) -> list[AccountReport]:
        """
        Run every wallet concurrently and build the final reports.

        Returns:
            One AccountReport per wallet, in wallet order
        """
        started = time.monotonic()
        logger.info(f"🚀 Starting trading for {len(self.accounts)} wallet(s)")

        results = await asyncio.gather(
            *(self.run_account(account) for account in self.accounts),
            return_exceptions=True,
        )

        reports = []
        for account, result in zip(self.accounts, results):
            report = AccountReport(account=account)
            scheduler = self.schedulers.get(account.index)
            if scheduler is not None:
                report.stats = scheduler.stats
                report.halt_reason = scheduler.halt_reason

            if isinstance(result, Exception):
                report.fault = SupervisorFault(account.index, result)
                logger.opt(exception=result).error(f"[{account.label}] ❌ {report.fault}")
                self.notifications.notify(
                    messages.wallet_failed(account.index, result), account.index
                )
            elif isinstance(result, BaseException):
                raise result

            reports.append(report)

        await self._final_report(reports)

        elapsed = time.monotonic() - started
        logger.info(f"⏱️ Total duration: {elapsed / 60:.1f} minutes")
        self.notifications.notify(messages.all_sessions_completed())
        return reports

    async def _final_report(self, reports: list[AccountReport]) -> None:
        logger.info("📊 Fetching final balances and rewards...")
        for report in reports:
            account = report.account
            prefix = f"[{account.label}]"

            report.final_balances = await get_all_balances(
                self.balance_provider, account, self.tokens
            )
            logger.info(f"{prefix}\n{format_balances(report.final_balances, 'Final Token Balances')}")

            # Skip the rate-limited lookup on shutdown
            if not self.stop.is_set():
                report.final_rewards = await self._fetch_rewards(account)
                logger.info(f"{prefix}\n{format_rewards(report.final_rewards, 'Final Rewards Data')}")

            logger.info(
                format_summary(
                    account.index,
                    mask_address(account.address),
                    report.stats,
                    report.final_balances,
                )
            )
