"""
Core notification service.

Delivers human-readable status text to Discord and Telegram.
Delivery is best-effort: failures are logged and never reach the trading loop.
"""

import asyncio
from typing import Protocol

import aiohttp
from aiogram import Bot
from loguru import logger

from rotator.config.constants import NOTIFICATION_TIMEOUT


class NotificationSink(Protocol):
    """Receives status text."""

    async def send(self, message: str, wallet_index: int | None = None) -> None:
        ...


def with_wallet_prefix(message: str, wallet_index: int | None) -> str:
    """Prefix message with "[Wallet n] " when a wallet is given."""
    if wallet_index is None:
        return message
    return f"[Wallet {wallet_index}] {message}"


class DiscordWebhookSink:
    """
    Discord webhook sink.

    Messages are wrapped in a code block to keep console formatting.
    """

    def __init__(
        self,
        webhook_url: str,
        session: aiohttp.ClientSession | None = None,
        timeout: float = NOTIFICATION_TIMEOUT,
    ) -> None:
        self.webhook_url = webhook_url
        self.timeout = timeout
        self._session = session
        self._owns_session = session is None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    @staticmethod
    def format(message: str, wallet_index: int | None = None) -> str:
        return f"```\n{with_wallet_prefix(message, wallet_index)}\n```"

    async def send(self, message: str, wallet_index: int | None = None) -> None:
        try:
            session = await self._get_session()
            async with session.post(
                self.webhook_url,
                json={"content": self.format(message, wallet_index)},
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as response:
                if response.status >= 400:
                    logger.error(
                        f"❌ Failed to send Discord notification: HTTP {response.status}"
                    )
        except Exception as e:
            logger.error(f"❌ Failed to send Discord notification: {e}")

    async def close(self) -> None:
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()


class TelegramSink:
    """Telegram chat sink."""

    def __init__(
        self,
        bot: Bot,
        chat_id: int,
        timeout: float = NOTIFICATION_TIMEOUT,
    ) -> None:
        self.bot = bot
        self.chat_id = chat_id
        self.timeout = timeout

    async def send(self, message: str, wallet_index: int | None = None) -> None:
        try:
            await asyncio.wait_for(
                self.bot.send_message(
                    chat_id=self.chat_id,
                    text=with_wallet_prefix(message, wallet_index),
                ),
                timeout=self.timeout,
            )
        except TimeoutError:
            logger.warning(f"Telegram notification timed out (chat {self.chat_id})")
        except Exception as e:
            logger.error(f"❌ Failed to send Telegram notification: {e}")

    async def close(self) -> None:
        await self.bot.session.close()


class NotificationService:
    """
    Fan-out notification service.

    `notify()` schedules delivery on a background task and returns at once,
    so sending never blocks the trading loop.
    """

    def __init__(self, sinks: list[NotificationSink] | None = None) -> None:
        """
        Initialize notification service.

        Args:
            sinks: Enabled sinks (none means notifications are disabled)
        """
        self.sinks = list(sinks or [])
        self._pending: set[asyncio.Task] = set()

    @property
    def enabled(self) -> bool:
        return bool(self.sinks)

    def notify(self, message: str, wallet_index: int | None = None) -> None:
        """Schedule delivery of `message` to every sink."""
        if not self.sinks:
            return

        task = asyncio.create_task(self._deliver(message, wallet_index))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _deliver(self, message: str, wallet_index: int | None) -> None:
        results = await asyncio.gather(
            *(sink.send(message, wallet_index) for sink in self.sinks),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, Exception):
                logger.error(f"Notification sink failed: {result}")

    async def drain(self) -> None:
        """Wait for outstanding deliveries."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def close(self) -> None:
        """Drain and close sinks that own network resources."""
        await self.drain()
        for sink in self.sinks:
            close = getattr(sink, "close", None)
            if close is None:
                continue
            try:
                await close()
            except Exception as e:
                logger.warning(f"Error closing notification sink: {e}")
