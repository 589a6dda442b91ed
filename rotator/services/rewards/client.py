"""
Rewards API client.

Fetches season points, rank and category breakdowns for one wallet.
Failures never propagate: once retries are exhausted the client returns None
and callers skip rewards reporting for that cycle.
"""

import asyncio
import random
from collections.abc import Awaitable, Callable
from typing import Any

import aiohttp
from loguru import logger

from rotator.config.constants import (
    REWARDS_BACKOFF_BASE,
    REWARDS_BACKOFF_CAP,
    REWARDS_DEFAULT_RETRY_AFTER,
    REWARDS_MAX_JITTER,
    REWARDS_MAX_RETRIES,
    REWARDS_REFERER,
    REWARDS_SEASON_KEY,
    REWARDS_TIMEOUT,
    REWARDS_URL,
    REWARDS_USER_AGENT,
)
from rotator.models import RewardsData
from rotator.utils.exceptions import RateLimited, RewardsFetchError
from rotator.utils.security import mask_address

from .rate_limiter import RateLimiter


def parse_retry_after(value: str | None) -> float | None:
    """Parse a Retry-After header given in seconds."""
    if not value:
        return None
    try:
        seconds = float(value.strip())
    except ValueError:
        return None
    return seconds if seconds >= 0 else None


class RewardsClient:
    """
    Rate-limited, retrying rewards client.

    Retry policy per attempt:
    - 429: wait Retry-After (or the default) plus 0-jitter seconds
    - other non-2xx / network errors: exponential backoff min(2^attempt * base, cap)
    """

    def __init__(
        self,
        rate_limiter: RateLimiter,
        session_token: str,
        url: str = REWARDS_URL,
        season_key: str = REWARDS_SEASON_KEY,
        session: aiohttp.ClientSession | None = None,
        timeout: float = REWARDS_TIMEOUT,
        max_retries: int = REWARDS_MAX_RETRIES,
        default_retry_after: float = REWARDS_DEFAULT_RETRY_AFTER,
        max_jitter: float = REWARDS_MAX_JITTER,
        backoff_base: float = REWARDS_BACKOFF_BASE,
        backoff_cap: float = REWARDS_BACKOFF_CAP,
        rng: random.Random | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.rate_limiter = rate_limiter
        self.session_token = session_token
        self.url = url
        self.season_key = season_key
        self.timeout = timeout
        self.max_retries = max_retries
        self.default_retry_after = default_retry_after
        self.max_jitter = max_jitter
        self.backoff_base = backoff_base
        self.backoff_cap = backoff_cap
        self._rng = rng or random.Random()
        self._sleep = sleep
        self._session = session
        self._owns_session = session is None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    @property
    def headers(self) -> dict[str, str]:
        return {
            "accept": "application/json, text/plain, */*",
            "content-type": "application/json",
            "x-session-token": self.session_token,
            "Referer": REWARDS_REFERER,
            "User-Agent": REWARDS_USER_AGENT,
        }

    def rate_limit_delay(self, retry_after: float | None) -> float:
        """Delay after a 429: server hint (or default) plus random jitter."""
        base = retry_after if retry_after is not None else self.default_retry_after
        return base + self._rng.uniform(0, self.max_jitter)

    def backoff_delay(self, attempt: int) -> float:
        """Exponential backoff for attempt n (1-based): 4s, 8s, 16s, capped."""
        return min((2 ** attempt) * self.backoff_base, self.backoff_cap)

    async def _request(self, address: str) -> dict[str, Any]:
        session = await self._get_session()
        async with session.post(
            self.url,
            json={"publicKey": address},
            headers=self.headers,
            timeout=aiohttp.ClientTimeout(total=self.timeout),
        ) as response:
            if response.status == 429:
                raise RateLimited(parse_retry_after(response.headers.get("Retry-After")))
            if not 200 <= response.status < 300:
                raise RewardsFetchError(
                    f"HTTP {response.status}: {response.reason}", status=response.status
                )
            return await response.json()

    async def fetch(self, address: str) -> RewardsData | None:
        """
        Fetch rewards data with rate limiting and retry logic.

        Args:
            address: Wallet public key

        Returns:
            RewardsData or None if every attempt failed
        """
        for attempt in range(1, self.max_retries + 1):
            await self.rate_limiter.acquire()
            logger.info(
                f"🔄 Fetching rewards data for {mask_address(address)} "
                f"(attempt {attempt}/{self.max_retries})..."
            )

            try:
                payload = await self._request(address)
            except RateLimited as e:
                if attempt == self.max_retries:
                    logger.error(
                        f"❌ Rate limited after {self.max_retries} attempts, giving up"
                    )
                    return None
                delay = self.rate_limit_delay(e.retry_after)
                logger.warning(
                    f"Server responded with 429 Too Many Requests. "
                    f"Retrying after {delay:.1f}s delay..."
                )
                await self._sleep(delay)
                continue
            except (RewardsFetchError, aiohttp.ClientError, TimeoutError, ValueError) as e:
                logger.warning(f"⚠️ Attempt {attempt} failed: {str(e) or e.__class__.__name__}")
                if attempt == self.max_retries:
                    logger.error(
                        f"❌ Failed to fetch rewards after {self.max_retries} attempts"
                    )
                    return None
                delay = self.backoff_delay(attempt)
                logger.info(f"⏳ Waiting {delay:.1f}s before retry...")
                await self._sleep(delay)
                continue

            try:
                data = RewardsData.from_payload(payload, self.season_key)
            except (TypeError, AttributeError, ValueError) as e:
                logger.error(f"❌ Malformed rewards payload: {e}")
                return None

            logger.success("✅ Successfully fetched rewards data")
            return data

        return None
