"""Bounded retry with exponential backoff for read operations."""
import asyncio
import logging
from typing import Awaitable, Callable, Generic, Optional, TypeVar

from fintrack.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

SleepFunc = Callable[[float], Awaitable[None]]


class RetryPolicy:
    """Fixed attempt count; the wait after failed attempt k is ``base_delay * 2**(k-1)`` seconds."""
    
    def __init__(self, max_attempts: int = 3, base_delay: float = 1.0):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if base_delay < 0:
            raise ValueError("base_delay must not be negative")
        self.max_attempts = max_attempts
        self.base_delay = base_delay
    
    @classmethod
    def from_settings(cls) -> "RetryPolicy":
        return cls(
            max_attempts=settings.retry_max_attempts,
            base_delay=settings.retry_base_delay,
        )
    
    def delay_for(self, attempt: int) -> float:
        return self.base_delay * 2 ** (attempt - 1)
    
    def __repr__(self) -> str:
        return f"RetryPolicy(max_attempts={self.max_attempts}, base_delay={self.base_delay})"


class RetryExhaustedError(Exception):
    """Every attempt failed."""
    
    def __init__(self, attempts: int, last_error: Optional[BaseException]):
        super().__init__(f"Gave up after {attempts} attempts: {last_error}")
        self.attempts = attempts
        self.last_error = last_error


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    policy: Optional[RetryPolicy] = None,
    sleep: SleepFunc = asyncio.sleep,
    description: str = "request",
) -> T:
    """
    Await ``operation()`` until it succeeds or the policy runs out of attempts.
    
    Every ``Exception`` is retried the same way (transport failures, 4xx and
    5xx alike). Cancellation is not an ``Exception`` and always propagates.
    
    Args:
        operation: Zero-argument coroutine factory, called once per attempt
        policy: Attempt count and base delay
        sleep: Awaitable sleep, injected so tests can fake elapsed time
        description: Label used in log lines
        
    Returns:
        The first successful result
        
    Raises:
        RetryExhaustedError: If every attempt failed
    """
    policy = policy or RetryPolicy.from_settings()
    last_error: Optional[Exception] = None
    
    for attempt in range(1, policy.max_attempts + 1):
        try:
            return await operation()
        except Exception as e:
            last_error = e
            if attempt == policy.max_attempts:
                break
            delay = policy.delay_for(attempt)
            logger.warning(
                "%s failed (attempt %d/%d), retrying in %.1fs: %s",
                description, attempt, policy.max_attempts, delay, e,
            )
            await sleep(delay)
    
    logger.error("%s failed after %d attempts: %s", description, policy.max_attempts, last_error)
    raise RetryExhaustedError(policy.max_attempts, last_error) from last_error


class ResilientFetch(Generic[T]):
    """
    A retrying fetch that runs as a cancellable task.
    
    ``attempts`` counts calls made to the operation in the latest run.
    """
    
    def __init__(
        self,
        operation: Callable[[], Awaitable[T]],
        policy: Optional[RetryPolicy] = None,
        sleep: SleepFunc = asyncio.sleep,
        description: str = "fetch",
    ):
        self.operation = operation
        self.policy = policy or RetryPolicy.from_settings()
        self.sleep = sleep
        self.description = description
        self.attempts = 0
        self._task: Optional[asyncio.Task] = None
    
    async def _attempt(self) -> T:
        self.attempts += 1
        return await self.operation()
    
    async def run(self) -> T:
        """Run the retry sequence in the current task."""
        self.attempts = 0
        return await retry_with_backoff(
            self._attempt,
            policy=self.policy,
            sleep=self.sleep,
            description=self.description,
        )
    
    def start(self) -> "asyncio.Task[T]":
        """Schedule :meth:`run` as a task; an unfinished task is reused."""
        if self.running:
            return self._task
        self._task = asyncio.create_task(self.run())
        return self._task
    
    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()
    
    def cancel(self) -> bool:
        """Cancel the in-flight sequence. Returns False if nothing was running."""
        if not self.running:
            return False
        logger.debug("Cancelling %s", self.description)
        return self._task.cancel()
