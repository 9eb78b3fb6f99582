"""
Bounded exponential-backoff retry shared by every download path.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

import aiohttp
from rich.markup import escape

from megadl.exceptions import ErrorKind, TransferError

log = logging.getLogger(__name__)

T = TypeVar("T")


def classify_error(error: BaseException) -> ErrorKind:
    """Maps an exception raised by a session onto an ErrorKind."""
    if isinstance(error, TransferError):
        return error.kind
    if isinstance(error, (aiohttp.ClientError, asyncio.TimeoutError, ConnectionError)):
        return ErrorKind.NETWORK
    return ErrorKind.OTHER


@dataclass(frozen=True)
class RetryDecision:
    """Outcome of consulting the retry policy after a failed attempt."""

    should_retry: bool
    wait: float = 0.0

    @classmethod
    def retry(cls, wait: float) -> "RetryDecision":
        return cls(True, wait)

    @classmethod
    def give_up(cls) -> "RetryDecision":
        return cls(False)


class RetryPolicy:
    """
    Decides whether a failed transfer is attempted again.

    Only transient failures are retried, at most ``max_attempts`` attempts in
    total, waiting ``initial_backoff`` seconds after the first failure and
    twice as long after each following one (2s, 4s, 8s, 16s by default).
    """

    def __init__(self, max_attempts: int = 5, initial_backoff: float = 2.0):
        self.max_attempts = max_attempts
        self.initial_backoff = initial_backoff

    def backoff_for(self, attempt: int) -> float:
        """Wait after the given (1-based) failed attempt."""
        return self.initial_backoff * (2 ** (attempt - 1))

    def decide(self, attempt: int, error: BaseException) -> RetryDecision:
        """
        Args:
            attempt: Number of attempts made so far, including the failed one.
            error: The exception raised by the failed attempt.
        """
        if not classify_error(error).is_transient:
            return RetryDecision.give_up()
        if attempt >= self.max_attempts:
            return RetryDecision.give_up()
        return RetryDecision.retry(self.backoff_for(attempt))


async def run_with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    description: str,
    on_failure: Optional[Callable[[], None]] = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    Runs ``operation`` until it succeeds or the policy gives up.

    Every failure is logged. When the policy gives up, the last error is
    re-raised.

    Args:
        operation: Zero-argument coroutine factory performing one attempt.
        policy: The retry policy to consult after each failure.
        description: What is being downloaded, for log messages.
        on_failure: Called after each failed attempt, before logging.
        sleep: Awaitable sleep, replaceable in tests.
    """
    attempt = 0
    while True:
        attempt += 1
        try:
            return await operation()
        except Exception as e:
            if on_failure:
                on_failure()
            log.error(
                f"[red]ERROR: Download failed for {escape(description)}: "
                f"{escape(str(e))}[/red]"
            )
            decision = policy.decide(attempt, e)
            if not decision.should_retry:
                raise
            log.warning(
                f"Attempt #{attempt} failed, trying again in "
                f"{decision.wait:g} seconds..."
            )
            await sleep(decision.wait)
