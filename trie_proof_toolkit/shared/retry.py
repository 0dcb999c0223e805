"""
Retries for JSON-RPC calls.

eth_getProof and eth_getBlockByNumber time out and get rate-limited on
public nodes, so the fetchers run under retry_sync_operation. Errors that
cannot get better on a second try (NonRetryableException: malformed nodes,
proofs deeper than the layout allows, missing configuration) are raised on
the first attempt.
"""

import time
from typing import Any, Callable, Optional, Tuple, Type, TypeVar

from web3.exceptions import BlockNotFound, Web3Exception

from trie_proof_toolkit.shared.exceptions import (
    NonRetryableException,
    RetryableException,
)
from trie_proof_toolkit.shared.logging import get_logger

T = TypeVar("T")

logger = get_logger(__name__)

DEFAULT_RETRYABLE_EXCEPTIONS: Tuple[Type[Exception], ...] = (
    RetryableException,
    ConnectionError,
    TimeoutError,
    OSError,
    Web3Exception,
    BlockNotFound,
)


def _compute_delay(
    attempt: int, base_delay: float, max_delay: float, exponential: bool
) -> float:
    if exponential:
        return min(base_delay * (2**attempt), max_delay)
    return base_delay


def retry_sync_operation(
    operation: Callable[..., T],
    *args: Any,
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    exponential: bool = True,
    retryable_exceptions: Optional[Tuple[Type[Exception], ...]] = None,
    operation_name: Optional[str] = None,
    **kwargs: Any,
) -> T:
    """
    Call `operation(*args, **kwargs)`, retrying transient failures.

    Args:
        operation: Function to call
        max_attempts: Total number of calls before giving up
        base_delay: Delay after the first failure, in seconds
        max_delay: Upper bound on any single delay
        exponential: Double the delay after each failure
        retryable_exceptions: Exception types worth another attempt
        operation_name: Name used in log lines

    Returns:
        Whatever the operation returns

    Raises:
        The last retryable exception once attempts run out, or any other
        exception as soon as it happens
    """
    if retryable_exceptions is None:
        retryable_exceptions = DEFAULT_RETRYABLE_EXCEPTIONS

    name = operation_name or getattr(operation, "__name__", "operation")
    last_exception: Optional[Exception] = None

    for attempt in range(max_attempts):
        try:
            return operation(*args, **kwargs)
        except NonRetryableException:
            raise
        except retryable_exceptions as e:
            last_exception = e
            if attempt < max_attempts - 1:
                delay = _compute_delay(
                    attempt, base_delay, max_delay, exponential
                )
                logger.warning(
                    f"{name} failed ({attempt + 1}/{max_attempts}): {e}. "
                    f"Retrying in {delay:.1f}s"
                )
                time.sleep(delay)

    if last_exception:
        raise last_exception
    raise RuntimeError(f"{name} was never attempted (max_attempts=0)")


class RetryConfig:
    """Retry settings shared by several calls."""

    def __init__(
        self,
        max_attempts: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
        exponential: bool = True,
        retryable_exceptions: Optional[Tuple[Type[Exception], ...]] = None,
    ):
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.exponential = exponential
        self.retryable_exceptions = (
            retryable_exceptions or DEFAULT_RETRYABLE_EXCEPTIONS
        )

    def with_attempts(self, max_attempts: int) -> "RetryConfig":
        """Same settings with another attempt count."""
        return RetryConfig(
            max_attempts=max_attempts,
            base_delay=self.base_delay,
            max_delay=self.max_delay,
            exponential=self.exponential,
            retryable_exceptions=self.retryable_exceptions,
        )

    def run(
        self,
        operation: Callable[..., T],
        *args: Any,
        operation_name: Optional[str] = None,
        **kwargs: Any,
    ) -> T:
        """Run an operation under this configuration."""
        return retry_sync_operation(
            operation,
            *args,
            max_attempts=self.max_attempts,
            base_delay=self.base_delay,
            max_delay=self.max_delay,
            exponential=self.exponential,
            retryable_exceptions=self.retryable_exceptions,
            operation_name=operation_name,
            **kwargs,
        )


RPC_RETRY_CONFIG = RetryConfig(
    max_attempts=3,
    base_delay=1.0,
    max_delay=10.0,
    exponential=True,
)
