"""
RPC Wrapper with Timeout.

Provides centralized timeout handling for all Solana RPC calls.
"""

import asyncio
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, TypeVar

from loguru import logger

from rotator.config.constants import RPC_TIMEOUT
from rotator.utils.exceptions import RpcTimeoutError

T = TypeVar("T")


async def with_timeout(
    coro: Awaitable[T],
    timeout: float = RPC_TIMEOUT,
    operation_name: str = "RPC call",
) -> T:
    """
    Execute async coroutine with timeout.

    Args:
        coro: Coroutine to execute
        timeout: Timeout in seconds (default: RPC_TIMEOUT)
        operation_name: Operation name for logging

    Returns:
        Result of the coroutine

    Raises:
        RpcTimeoutError: If operation times out
    """
    try:
        return await asyncio.wait_for(coro, timeout=timeout)
    except TimeoutError as e:
        error_msg = f"{operation_name} timed out after {timeout}s"
        logger.error(error_msg)
        raise RpcTimeoutError(error_msg) from e


def timeout_decorator(
    timeout: float = RPC_TIMEOUT,
    operation_name: str | None = None,
):
    """
    Decorator to add timeout to async functions.

    Usage:
        @timeout_decorator(timeout=30.0, operation_name="get_latest_blockhash")
        async def latest_blockhash(self):
            return await self.client.get_latest_blockhash()
    """
    def decorator(func: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[Any]]:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            op_name = operation_name or func.__name__
            return await with_timeout(
                func(*args, **kwargs),
                timeout=timeout,
                operation_name=op_name,
            )
        return wrapper
    return decorator
