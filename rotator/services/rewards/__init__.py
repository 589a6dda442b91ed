"""
Rewards service module.

Structure:
- rate_limiter.py: Process-wide minimum-interval gate
- client.py: Retrying rewards API client
"""

from rotator.services.rewards.client import RewardsClient, parse_retry_after
from rotator.services.rewards.rate_limiter import RateLimiter


__all__ = [
    "RateLimiter",
    "RewardsClient",
    "parse_retry_after",
]
