"""
Transaction operations for the Solana RPC.

This module handles:
- Broadcasting signed transactions
- Confirmation by signature-status polling
"""

import asyncio

from loguru import logger
from solana.rpc.async_api import AsyncClient
from solana.rpc.types import TxOpts
from solders.signature import Signature
from solders.transaction_status import TransactionConfirmationStatus

from rotator.config.constants import RPC_CONFIRM_POLL_INTERVAL, RPC_CONFIRM_TIMEOUT, RPC_TIMEOUT
from rotator.utils.exceptions import SwapExecutionError
from rotator.utils.security import mask_signature

from .rpc_wrapper import with_timeout

_CONFIRMED_LEVELS = (
    TransactionConfirmationStatus.Confirmed,
    TransactionConfirmationStatus.Finalized,
)


async def send_and_confirm(
    client: AsyncClient,
    tx_bytes: bytes,
    confirm_timeout: float = RPC_CONFIRM_TIMEOUT,
    rpc_timeout: float = RPC_TIMEOUT,
) -> str:
    """
    Send a signed, serialized transaction and wait for confirmation.

    Args:
        client: Solana RPC client
        tx_bytes: Serialized signed transaction
        confirm_timeout: Seconds to wait for "confirmed"
        rpc_timeout: Timeout per RPC request

    Returns:
        Transaction signature (base58)

    Raises:
        SwapExecutionError: On send failure, on-chain error or confirmation timeout
    """
    resp = await with_timeout(
        client.send_raw_transaction(tx_bytes, opts=TxOpts(skip_preflight=False)),
        timeout=rpc_timeout,
        operation_name="send_raw_transaction",
    )
    signature = resp.value
    if signature is None:
        raise SwapExecutionError("No signature returned by RPC")

    await confirm_signature(client, signature, confirm_timeout, rpc_timeout)
    return str(signature)


async def confirm_signature(
    client: AsyncClient,
    signature: Signature,
    confirm_timeout: float = RPC_CONFIRM_TIMEOUT,
    rpc_timeout: float = RPC_TIMEOUT,
) -> None:
    """
    Poll signature status until confirmed or finalized.

    Raises:
        SwapExecutionError: If the transaction failed on-chain or timed out
    """
    loop = asyncio.get_running_loop()
    started = loop.time()

    while True:
        elapsed = loop.time() - started
        if elapsed > confirm_timeout:
            raise SwapExecutionError(
                f"Confirmation timeout after {elapsed:.1f}s for {mask_signature(str(signature))}"
            )

        status_resp = await with_timeout(
            client.get_signature_statuses([signature]),
            timeout=rpc_timeout,
            operation_name="get_signature_statuses",
        )
        status = status_resp.value[0] if status_resp.value else None

        if status is not None:
            if status.err:
                raise SwapExecutionError(f"Transaction failed on-chain: {status.err}")
            if status.confirmation_status in _CONFIRMED_LEVELS:
                logger.debug(f"Transaction {mask_signature(str(signature))} confirmed")
                return

        await asyncio.sleep(RPC_CONFIRM_POLL_INTERVAL)
