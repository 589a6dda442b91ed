"""
Swap operations.

This module handles:
- The swap request passed to the exchange layer
- Bridge-built swaps: an HTTP swap builder returns an unsigned transaction
  which is signed locally and broadcast over RPC
- Dry-run swaps for configuration testing
"""

import base64
import uuid
from dataclasses import asdict, dataclass
from typing import Protocol

import aiohttp
from loguru import logger
from solana.rpc.async_api import AsyncClient
from solders.transaction import VersionedTransaction

from rotator.config.constants import RPC_CONFIRM_TIMEOUT, RPC_TIMEOUT
from rotator.utils.exceptions import SwapExecutionError

from .transaction_operations import send_and_confirm
from .wallet_operations import WalletAccount

SWAP_BRIDGE_TIMEOUT = 30.0


@dataclass(frozen=True)
class SwapRequest:
    """Integer-exact exact-in swap through a single pool."""

    pool: str
    input_mint: str
    output_mint: str
    exact_amount_in: int
    min_amount_out: int
    cu_limit: int


class SwapProvider(Protocol):
    """External exchange primitive."""

    async def swap_exact_in(self, account: WalletAccount, request: SwapRequest) -> str:
        """Execute the swap and return the transaction signature."""
        ...


class DryRunSwapProvider:
    """Logs swaps without executing them."""

    async def swap_exact_in(self, account: WalletAccount, request: SwapRequest) -> str:
        logger.info(
            f"[{account.label}] 🧪 DRY RUN swap {request.exact_amount_in} "
            f"{request.input_mint[:4]}… → {request.output_mint[:4]}… "
            f"(min out {request.min_amount_out})"
        )
        return f"dry-run-{uuid.uuid4().hex}"


class BridgeSwapProvider:
    """
    Swaps through an HTTP swap builder.

    The builder wraps the pool SDK: it receives the swap parameters and the
    payer address and answers {"transaction": "<base64 VersionedTransaction>"}.
    The transaction is signed with the wallet keypair and sent over RPC.
    """

    def __init__(
        self,
        bridge_url: str,
        client: AsyncClient,
        session: aiohttp.ClientSession | None = None,
        rpc_timeout: float = RPC_TIMEOUT,
        confirm_timeout: float = RPC_CONFIRM_TIMEOUT,
    ) -> None:
        """
        Initialize bridge swap provider.

        Args:
            bridge_url: Swap builder endpoint
            client: Solana RPC client
            session: Optional shared aiohttp session
            rpc_timeout: Timeout per RPC request
            confirm_timeout: Seconds to wait for confirmation
        """
        self.bridge_url = bridge_url
        self.client = client
        self.rpc_timeout = rpc_timeout
        self.confirm_timeout = confirm_timeout
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

    async def _build_transaction(
        self,
        account: WalletAccount,
        request: SwapRequest,
    ) -> VersionedTransaction:
        payload = {
            "payer": account.address,
            "pool": request.pool,
            "in": request.input_mint,
            "out": request.output_mint,
            "exactAmountIn": request.exact_amount_in,
            "minAmountOut": request.min_amount_out,
            "cuLimit": request.cu_limit,
        }

        session = await self._get_session()
        async with session.post(
            self.bridge_url,
            json=payload,
            timeout=aiohttp.ClientTimeout(total=SWAP_BRIDGE_TIMEOUT),
        ) as response:
            if response.status != 200:
                text = await response.text()
                raise SwapExecutionError(f"Swap builder HTTP {response.status}: {text[:200]}")
            data = await response.json()

        encoded = data.get("transaction") if isinstance(data, dict) else None
        if not encoded:
            raise SwapExecutionError("Swap builder returned no transaction")

        return VersionedTransaction.from_bytes(base64.b64decode(encoded))

    async def swap_exact_in(self, account: WalletAccount, request: SwapRequest) -> str:
        """
        Build, sign, send and confirm the swap.

        Raises:
            SwapExecutionError: On any builder, signing or RPC failure
        """
        if account.keypair is None:
            raise SwapExecutionError(f"{account.label} has no keypair")

        logger.debug(f"[{account.label}] Swap request: {asdict(request)}")

        try:
            unsigned = await self._build_transaction(account, request)
            signed = VersionedTransaction(unsigned.message, [account.keypair])
            return await send_and_confirm(
                self.client,
                bytes(signed),
                confirm_timeout=self.confirm_timeout,
                rpc_timeout=self.rpc_timeout,
            )
        except SwapExecutionError:
            raise
        except Exception as e:
            raise SwapExecutionError(str(e) or e.__class__.__name__) from e
