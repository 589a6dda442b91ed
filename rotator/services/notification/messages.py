"""
Notification message builders.

Plain-text status messages shared by all sinks.
"""

from datetime import UTC, datetime
from decimal import Decimal

from rotator.models import RewardsData, SwapPair, TradingStats
from rotator.utils.formatters import format_rewards_message


def _timestamp() -> str:
    return datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S")


def bot_started(wallet_count: int) -> str:
    return f"🚀 Bot Started - Loaded {wallet_count} wallet(s) for trading"


def wallet_started(address: str) -> str:
    return f"🚀 Wallet started - Address: {address}"


def wallet_failed(wallet_index: int, error: BaseException) -> str:
    return f"❌ Wallet {wallet_index} trading failed: {error}"


def swap_succeeded(amount: Decimal, pair: SwapPair, signature: str) -> str:
    return (
        f"✅ Swap successful! {amount:.6f} {pair.from_token} → {pair.to_token} "
        f"| Signature: {signature}"
    )


def swap_failed(pair: SwapPair | None, reason: str) -> str:
    if pair is None:
        return f"❌ Swap failed: {reason}"
    return f"❌ Swap failed: {pair.from_token} → {pair.to_token} - {reason}"


def waiting(hours: float) -> str:
    return f"⏳ Waiting {hours:.2f} hours before next swap..."


def all_sessions_completed() -> str:
    return f"✅ All trading sessions completed at {_timestamp()} UTC"


def fatal_error(error: BaseException) -> str:
    return (
        f"💥 **Fatal Error**\n"
        f"❌ Critical failure in main function\n"
        f"🔍 Error: {error}\n"
        f"🛑 Bot execution stopped"
    )


def rewards_update(data: RewardsData) -> str:
    return format_rewards_message(data)


def trading_summary(stats: TradingStats, address: str) -> str:
    return (
        f"📈 Trading Summary:\n"
        f"✅ Successful swaps: {stats.successful_swaps}\n"
        f"❌ Failed swaps: {stats.failed_swaps}\n"
        f"📊 Success Rate: {stats.success_rate:.1f}%\n"
        f"🏦 Address: {address}"
    )
