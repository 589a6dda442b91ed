"""
Rewards models.

Parsed payload of the rewards-tracking service.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class CategoryPoints:
    """Points earned in one DeFi category."""

    name: str
    points: float


@dataclass(frozen=True)
class RewardsData:
    """Season totals, rank and category breakdown for one wallet."""

    total_points: float | None = None
    total_swap_volume: float | None = None
    rank: int | None = None
    rank_percentile: float | None = None
    defi_points: tuple[CategoryPoints, ...] = ()
    has_season_data: bool = False
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_payload(cls, payload: dict[str, Any], season_key: str) -> "RewardsData":
        """
        Parse the service response.

        Args:
            payload: Decoded JSON document
            season_key: Key of the season block (e.g. "preseason1RewardsData")

        Returns:
            RewardsData; `has_season_data` is False if the season block is missing
        """
        season = payload.get(season_key) if isinstance(payload, dict) else None
        if not isinstance(season, dict):
            return cls(raw=payload if isinstance(payload, dict) else {})

        categories = season.get("defiPoints")
        if not isinstance(categories, list):
            categories = []

        defi_points = tuple(
            CategoryPoints(name=str(item.get("name", "")), points=item.get("points", 0))
            for item in categories
            if isinstance(item, dict)
        )

        return cls(
            total_points=season.get("totalPoints"),
            total_swap_volume=season.get("totalSwapVolume"),
            rank=season.get("rank"),
            rank_percentile=season.get("rankPercentile"),
            defi_points=defi_points,
            has_season_data=True,
            raw=payload,
        )
