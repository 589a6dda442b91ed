"""In-memory collaborators used across the test suite."""

from decimal import Decimal

from rotator.config.tokens import TokenConfig, get_token_config
from rotator.models import BalanceSnapshot, from_base_units, to_base_units
from rotator.services.blockchain.swap_operations import SwapRequest
from rotator.services.blockchain.wallet_operations import WalletAccount


class FakeBalanceProvider:
    """In-memory balances, one holding per wallet address."""

    def __init__(self, balances: dict | None = None, errors: dict | None = None):
        self.initial = {name: Decimal(str(v)) for name, v in (balances or {}).items()}
        self.errors = dict(errors or {})
        self.accounts: dict[str, dict[str, Decimal]] = {}
        self.reads = 0

    def holdings(self, account: WalletAccount) -> dict[str, Decimal]:
        return self.accounts.setdefault(account.address, dict(self.initial))

    async def get_balance(self, account: WalletAccount, token: TokenConfig) -> BalanceSnapshot:
        self.reads += 1
        if token.name in self.errors:
            return BalanceSnapshot.failed(token.name, self.errors[token.name])
        amount = self.holdings(account).get(token.name, Decimal("0"))
        return BalanceSnapshot.from_raw(
            token.name, to_base_units(amount, token.decimals), token.decimals
        )


class FakeSwapProvider:
    """Records swaps and, when given balances, applies them."""

    def __init__(self, balances: FakeBalanceProvider | None = None, error: Exception | None = None):
        self.balances = balances
        self.error = error
        self.requests: list[tuple[WalletAccount, SwapRequest]] = []

    async def swap_exact_in(self, account: WalletAccount, request: SwapRequest) -> str:
        self.requests.append((account, request))
        if self.error is not None:
            raise self.error

        if self.balances is not None:
            source = get_token_config(request.input_mint)
            target = get_token_config(request.output_mint)
            holdings = self.balances.holdings(account)
            holdings[source.name] -= from_base_units(request.exact_amount_in, source.decimals)
            holdings[target.name] = holdings.get(target.name, Decimal("0")) + from_base_units(
                request.min_amount_out, target.decimals
            )

        return f"sig-{len(self.requests)}"


class RecordingSink:
    """Notification sink that keeps every message."""

    def __init__(self):
        self.messages: list[tuple[str, int | None]] = []

    async def send(self, message: str, wallet_index: int | None = None) -> None:
        self.messages.append((message, wallet_index))

    def texts(self) -> list[str]:
        return [message for message, _ in self.messages]


class FakeResponse:
    """aiohttp response stand-in usable with `async with`."""

    def __init__(self, status: int = 200, payload=None, headers: dict | None = None, reason: str = "OK"):
        self.status = status
        self.reason = reason
        self.headers = headers or {}
        self._payload = payload if payload is not None else {}

    async def json(self):
        return self._payload

    async def text(self) -> str:
        return str(self._payload)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return None


class FakeSession:
    """aiohttp session stand-in returning queued responses (or raising queued errors)."""

    closed = False

    def __init__(self, responses: list):
        self.responses = list(responses)
        self.requests: list[dict] = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.requests.append({"url": url, "json": json, "headers": headers})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    async def close(self):
        self.closed = True


def snapshot(name: str, amount: str | int, decimals: int = 6) -> BalanceSnapshot:
    """Build an error-free snapshot from a decimal amount."""
    return BalanceSnapshot.from_raw(name, to_base_units(Decimal(str(amount)), decimals), decimals)
