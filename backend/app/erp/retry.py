"""
Retry policy for outbound ERP calls.

One policy object is applied uniformly by the gateway instead of repeating
backoff loops at every call site. The wait is blocking: the calling request
is suspended for the backoff duration, so the worst-case latency of a call
is ``attempts * timeout + sum(delays)``.
"""
import logging
import random
import time
from dataclasses import dataclass
from typing import Callable, Optional, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    attempts: int = 3
    base_delay: float = 0.2  # seconds
    max_delay: float = 5.0  # seconds
    exponential_base: float = 2.0
    jitter: str = "none"  # "none" | "full"
    retry_on_status: Tuple[int, ...] = (429, 500, 502, 503, 504)

    def get_delay(self, attempt: int, rng: Callable[[], float] = random.random) -> float:
        """Delay before retrying after the given 0-based attempt."""
        delay = min(self.base_delay * (self.exponential_base ** attempt), self.max_delay)
        if self.jitter == "full":
            delay = delay * rng()
        return delay

    def worst_case_delay(self) -> float:
        return sum(self.get_delay(i, rng=lambda: 1.0) for i in range(max(self.attempts - 1, 0)))

    def run(
        self,
        fn: Callable[[], T],
        should_retry: Callable[[Exception], bool],
        sleep: Callable[[float], None] = time.sleep,
        operation: Optional[str] = None,
    ) -> T:
        """Call ``fn`` until it succeeds, a non-retryable error occurs, or attempts run out.

        The last error is re-raised unchanged; no delay follows the final attempt.
        """
        attempts = max(self.attempts, 1)
        for attempt in range(attempts):
            try:
                return fn()
            except Exception as exc:
                if not should_retry(exc):
                    raise
                if attempt == attempts - 1:
                    logger.error(
                        "erp_retry_exhausted operation=%s attempts=%s error=%s",
                        operation,
                        attempts,
                        exc,
                    )
                    raise
                delay = self.get_delay(attempt)
                logger.warning(
                    "erp_retry operation=%s attempt=%s/%s delay_s=%.3f error=%s",
                    operation,
                    attempt + 1,
                    attempts,
                    delay,
                    exc,
                )
                sleep(delay)
        raise RuntimeError("unreachable")  # pragma: no cover
