"""
Rotator main entry point.

Loads settings and wallets, wires the services and runs every wallet's
balance rotation loop until all halt or a stop signal arrives.

Exit codes: 0 when all loops completed, 1 on a fatal error.
"""

import asyncio
import sys
from pathlib import Path

from loguru import logger


# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from bot.initialization.logging import setup_logging  # noqa: E402
from bot.initialization.services import build_notification_service, build_services  # noqa: E402
from bot.initialization.shutdown import install_signal_handlers, shutdown_handler  # noqa: E402
from rotator.config.settings import Settings, get_settings  # noqa: E402
from rotator.services.blockchain import load_wallets  # noqa: E402
from rotator.services.notification import messages  # noqa: E402
from rotator.utils.exceptions import ConfigurationError  # noqa: E402


async def notify_fatal(settings: Settings, error: BaseException) -> None:
    """Send the fatal-error notification when startup fails before services exist."""
    try:
        notifications = build_notification_service(settings)
    except Exception as e:
        logger.warning(f"Could not create notification sinks: {e}")
        return
    notifications.notify(messages.fatal_error(error))
    await notifications.close()


async def main() -> None:
    """Initialize and run the rotator."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_file)

    try:
        accounts = load_wallets(settings.get_private_keys())
    except ConfigurationError as e:
        await notify_fatal(settings, e)
        raise

    stop = asyncio.Event()
    install_signal_handlers(stop)

    services = build_services(settings, accounts, stop)
    notifications = services.notifications

    try:
        notifications.notify(messages.bot_started(len(accounts)))
        reports = await services.supervisor.run()

        failed = [report for report in reports if report.failed]
        if failed:
            logger.warning(f"⚠️ {len(failed)} of {len(reports)} wallet(s) stopped on errors")
        logger.success("✅ All trading sessions completed")
    except Exception as e:
        logger.exception(f"💥 Fatal error: {e}")
        notifications.notify(messages.fatal_error(e))
        raise
    finally:
        await shutdown_handler(services)


def run() -> None:
    """Console script entry point."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Rotator stopped by user (KeyboardInterrupt)")
    except Exception as e:
        logger.exception(f"Rotator crashed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    run()
