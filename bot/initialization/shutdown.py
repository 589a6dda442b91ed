"""
Bot Initialization - Shutdown Module.

Module: shutdown.py
Turns SIGINT/SIGTERM into the shared stop event and closes
network resources on exit.
"""

import asyncio
import signal

from loguru import logger

from bot.initialization.services import RotatorServices


def install_signal_handlers(stop: asyncio.Event) -> None:
    """Set `stop` on SIGINT and SIGTERM."""
    loop = asyncio.get_running_loop()

    def _request_stop(sig: signal.Signals) -> None:
        if not stop.is_set():
            logger.warning(f"Received {sig.name}, stopping all wallets...")
        stop.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _request_stop, sig)
        except NotImplementedError:
            # Windows event loops have no signal handler support
            logger.debug(f"Signal handler for {sig.name} not supported")


async def shutdown_handler(services: RotatorServices) -> None:
    """Handle graceful shutdown."""
    logger.info("Graceful shutdown initiated...")

    try:
        await services.notifications.close()
        logger.info("Notifications flushed")
    except Exception as e:
        logger.warning(f"Error closing notifications: {e}")

    try:
        await services.rewards_client.close()
    except Exception as e:
        logger.warning(f"Error closing rewards client: {e}")

    close_swap_provider = getattr(services.swap_provider, "close", None)
    if close_swap_provider is not None:
        try:
            await close_swap_provider()
        except Exception as e:
            logger.warning(f"Error closing swap provider: {e}")

    try:
        await services.client.close()
        logger.info("RPC client closed")
    except Exception as e:
        logger.warning(f"Error closing RPC client: {e}")

    logger.info("Graceful shutdown complete")
