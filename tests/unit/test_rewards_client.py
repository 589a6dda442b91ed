"""
Unit tests for the rewards client.

Tests cover:
- Request body and headers
- 429 handling with Retry-After and jitter
- Exponential backoff on other errors
- Soft failure once retries are exhausted
- Payload parsing
"""

import random
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from rotator.models import CategoryPoints, RewardsData
from rotator.services.rewards import RateLimiter, RewardsClient, parse_retry_after
from tests.fakes import FakeResponse, FakeSession

ADDRESS = "7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU"

PAYLOAD = {
    "preseason1RewardsData": {
        "totalPoints": 1234.5,
        "totalSwapVolume": 9876.0,
        "rank": 42,
        "rankPercentile": 97.5,
        "defiPoints": [
            {"name": "Swaps", "points": 1000},
            {"name": "Liquidity", "points": 234.5},
        ],
    }
}


@pytest.fixture
def limiter():
    """Mocked rate limiter counting acquisitions."""
    mock = MagicMock(spec=RateLimiter)
    mock.acquire = AsyncMock(return_value=0.0)
    return mock


def make_client(responses, limiter, recorded_sleep, **kwargs):
    sleep, delays = recorded_sleep
    session = FakeSession(responses)
    client = RewardsClient(
        limiter,
        "session-token",
        session=session,
        rng=random.Random(1),
        sleep=sleep,
        **kwargs,
    )
    return client, session, delays


class TestRequest:
    """Test request shape and parsing."""

    @pytest.mark.asyncio
    async def test_successful_fetch(self, limiter, recorded_sleep):
        """200 response is parsed into RewardsData."""
        client, session, delays = make_client([FakeResponse(200, PAYLOAD)], limiter, recorded_sleep)

        data = await client.fetch(ADDRESS)

        assert data.has_season_data
        assert data.total_points == 1234.5
        assert data.rank == 42
        assert data.defi_points == (
            CategoryPoints("Swaps", 1000),
            CategoryPoints("Liquidity", 234.5),
        )
        assert delays == []
        assert limiter.acquire.await_count == 1

    @pytest.mark.asyncio
    async def test_body_and_headers(self, limiter, recorded_sleep):
        """Request posts the public key with the session token header."""
        client, session, _ = make_client([FakeResponse(200, PAYLOAD)], limiter, recorded_sleep)

        await client.fetch(ADDRESS)

        request = session.requests[0]
        assert request["json"] == {"publicKey": ADDRESS}
        assert request["headers"]["x-session-token"] == "session-token"
        assert "User-Agent" in request["headers"]

    @pytest.mark.asyncio
    async def test_missing_season_block(self, limiter, recorded_sleep):
        """A payload without season data is returned but flagged."""
        client, _, _ = make_client([FakeResponse(200, {"other": 1})], limiter, recorded_sleep)

        data = await client.fetch(ADDRESS)

        assert data is not None
        assert not data.has_season_data

    @pytest.mark.asyncio
    async def test_malformed_categories_are_ignored(self, limiter, recorded_sleep):
        """Non-list defiPoints and non-dict entries do not break parsing."""
        responses = [
            FakeResponse(200, {"preseason1RewardsData": {"totalPoints": 7, "defiPoints": 5}}),
            FakeResponse(200, {"preseason1RewardsData": {"defiPoints": [3, {"name": "Swaps"}]}}),
        ]
        client, _, _ = make_client(responses, limiter, recorded_sleep)

        first = await client.fetch(ADDRESS)
        second = await client.fetch(ADDRESS)

        assert first.total_points == 7
        assert first.defi_points == ()
        assert second.defi_points == (CategoryPoints("Swaps", 0),)

    @pytest.mark.asyncio
    async def test_parse_error_returns_none(self, limiter, recorded_sleep, monkeypatch):
        """A payload that cannot be parsed soft-fails instead of raising."""
        client, _, _ = make_client([FakeResponse(200, PAYLOAD)], limiter, recorded_sleep)

        def broken(payload, season_key):
            raise TypeError("unexpected shape")

        monkeypatch.setattr(RewardsData, "from_payload", broken)

        assert await client.fetch(ADDRESS) is None


class TestRateLimited:
    """Test 429 handling."""

    @pytest.mark.asyncio
    async def test_retry_after_then_success(self, limiter, recorded_sleep):
        """429 with Retry-After=5 waits 5-15s and succeeds on attempt 2."""
        client, session, delays = make_client(
            [
                FakeResponse(429, headers={"Retry-After": "5"}, reason="Too Many Requests"),
                FakeResponse(200, PAYLOAD),
            ],
            limiter,
            recorded_sleep,
        )

        data = await client.fetch(ADDRESS)

        assert data is not None and data.has_season_data
        assert len(session.requests) == 2
        assert len(delays) == 1
        assert 5 <= delays[0] <= 15
        assert limiter.acquire.await_count == 2

    @pytest.mark.asyncio
    async def test_default_retry_after(self, limiter, recorded_sleep):
        """429 without a hint waits the default plus jitter."""
        client, _, delays = make_client(
            [FakeResponse(429), FakeResponse(200, PAYLOAD)],
            limiter,
            recorded_sleep,
        )

        await client.fetch(ADDRESS)

        assert 30 <= delays[0] <= 40

    @pytest.mark.asyncio
    async def test_exhausted_returns_none(self, limiter, recorded_sleep):
        """Three 429s give up with None after exactly three requests."""
        client, session, delays = make_client(
            [FakeResponse(429, headers={"Retry-After": "1"}) for _ in range(3)],
            limiter,
            recorded_sleep,
        )

        data = await client.fetch(ADDRESS)

        assert data is None
        assert len(session.requests) == 3
        assert len(delays) == 2


class TestBackoff:
    """Test exponential backoff on other errors."""

    @pytest.mark.asyncio
    async def test_server_errors_back_off_then_give_up(self, limiter, recorded_sleep):
        """500s back off 4s, 8s and then return None."""
        client, session, delays = make_client(
            [FakeResponse(500, reason="Internal Server Error") for _ in range(3)],
            limiter,
            recorded_sleep,
        )

        data = await client.fetch(ADDRESS)

        assert data is None
        assert len(session.requests) == 3
        assert delays == [4, 8]

    @pytest.mark.asyncio
    async def test_network_error_then_success(self, limiter, recorded_sleep):
        """Connection errors are retried."""
        client, _, delays = make_client(
            [aiohttp.ClientConnectionError("connection reset"), FakeResponse(200, PAYLOAD)],
            limiter,
            recorded_sleep,
        )

        data = await client.fetch(ADDRESS)

        assert data is not None
        assert delays == [4]

    def test_backoff_is_capped(self, limiter):
        """Backoff never exceeds the cap."""
        client = RewardsClient(limiter, "t", backoff_base=2, backoff_cap=30)

        assert client.backoff_delay(1) == 4
        assert client.backoff_delay(2) == 8
        assert client.backoff_delay(10) == 30


class TestParseRetryAfter:
    """Test Retry-After parsing."""

    def test_seconds(self):
        assert parse_retry_after("5") == 5.0
        assert parse_retry_after(" 2.5 ") == 2.5

    def test_missing_or_invalid(self):
        assert parse_retry_after(None) is None
        assert parse_retry_after("") is None
        assert parse_retry_after("soon") is None
        assert parse_retry_after("-3") is None
