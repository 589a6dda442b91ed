"""
Formatters utility.

Human-readable rendering of balances, rewards and trading summaries.
"""

from collections.abc import Iterable

from rotator.models import BalanceSnapshot, RewardsData, TradingStats


def format_balances(snapshots: Iterable[BalanceSnapshot], title: str) -> str:
    """
    Render token balances one per line.

    Example:
        === Initial Token Balances ===
        ✅ USDC: 10.000000
        ❌ USDT: Error
    """
    lines = [f"=== {title} ==="]
    for snapshot in snapshots:
        if snapshot.error:
            lines.append(f"❌ {snapshot.token_name}: Error")
        else:
            lines.append(f"✅ {snapshot.token_name}: {snapshot.amount:.6f}")
    return "\n".join(lines)


def format_balances_compact(snapshots: Iterable[BalanceSnapshot]) -> str:
    """Single-line balance overview: "USDC: 10.0000, USDT: 0.0000"."""
    return ", ".join(f"{s.token_name}: {s.amount:.4f}" for s in snapshots)


def format_rewards(data: RewardsData | None, title: str) -> str:
    """Render rewards data for the console."""
    lines = [f"=== {title} ==="]

    if data is None or not data.has_season_data:
        lines.append("❌ No rewards data available")
        return "\n".join(lines)

    lines.append(f"🏆 Total Points: {data.total_points}")
    lines.append(f"📊 Total Swap Volume: {data.total_swap_volume}")
    lines.append(f"🏅 Rank: {data.rank} ({data.rank_percentile}th percentile)")

    if data.defi_points:
        lines.append("💎 DeFi Points:")
        for category in data.defi_points:
            lines.append(f"  - {category.name}: {category.points} points")

    return "\n".join(lines)


def format_rewards_message(data: RewardsData) -> str:
    """Compact rewards text for notifications."""
    message = (
        f"📊 Updated Rewards Data:\n"
        f"🏆 Total Points: {data.total_points}\n"
        f"📊 Swap Volume: {data.total_swap_volume}\n"
        f"🏅 Rank: {data.rank} ({data.rank_percentile}th percentile)"
    )
    if data.defi_points:
        categories = ", ".join(f"{c.name}: {c.points}" for c in data.defi_points)
        message += f"\n💎 DeFi Points: {categories}"
    return message


def format_summary(
    wallet_index: int,
    address: str,
    stats: TradingStats,
    balances: Iterable[BalanceSnapshot] = (),
) -> str:
    """Per-account trading summary."""
    lines = [
        f"[Wallet {wallet_index}] 📈 Balance Rotation Complete",
        f"[Wallet {wallet_index}] ✅ Successful swaps: {stats.successful_swaps}",
        f"[Wallet {wallet_index}] ❌ Failed swaps: {stats.failed_swaps}",
        f"[Wallet {wallet_index}] 📊 Success Rate: {stats.success_rate:.1f}%",
        f"[Wallet {wallet_index}] 🏦 Address: {address}",
    ]
    compact = format_balances_compact(balances)
    if compact:
        lines.append(f"[Wallet {wallet_index}] 💰 Final balances: {compact}")
    return "\n".join(lines)
