"""
Ouderschaps API: Outbound Call Resilience
===========================================

What:  Circuit breaker shared by the outbound HTTP clients (identity-provider
       key set, payment provider) plus the tenacity retry policy they use.
How:   Each client owns one named CircuitBreaker and wraps its raw HTTP call
       in `@retry(**retry_policy(...))`. The breaker is checked once per
       logical call, outside the retries, so retries never count as separate
       breaker attempts.
Who:   services/token_validator.py, services/mollie_client.py, routes/health.py.

State Machine:
    CLOSED (normal operation)
        → On failure: increment failure_count
        → When failure_count >= threshold: transition to OPEN
    OPEN (rejecting all requests)
        → All calls raise CircuitBreakerOpenError immediately
        → After recovery_timeout seconds: transition to HALF_OPEN
    HALF_OPEN (testing recovery)
        → Allow ONE request through
        → On success: transition to CLOSED (reset failure_count)
        → On failure: transition back to OPEN (reset timer)

Not thread-safe: plain counters on a single event loop.
"""

import logging
import time
from typing import Any, Dict, Optional, Tuple, Type

from tenacity import (
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from ouderschaps_api.config import settings
from ouderschaps_api.exceptions import CircuitBreakerOpenError

logger = logging.getLogger(__name__)

# name → breaker, read by the health endpoint
_registry: Dict[str, "CircuitBreaker"] = {}


class CircuitBreaker:
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"

    def __init__(
        self,
        name: str,
        failure_threshold: int = 5,
        recovery_timeout: int = 60,
    ):
        self.name = name
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.failure_count = 0
        self.state = self.CLOSED
        self.last_failure_time: Optional[float] = None
        _registry[name] = self

    def can_execute(self) -> bool:
        """
        Check if a request is allowed through the circuit breaker.

        Raises:
            CircuitBreakerOpenError if circuit is OPEN and recovery timeout hasn't elapsed.
        """
        if self.state == self.CLOSED:
            return True

        if self.state == self.OPEN:
            elapsed = time.time() - (self.last_failure_time or 0)
            if elapsed >= self.recovery_timeout:
                logger.info(
                    "Circuit breaker '%s' transitioning to HALF_OPEN after %.1fs",
                    self.name,
                    elapsed,
                )
                self.state = self.HALF_OPEN
                return True
            remaining = int(self.recovery_timeout - elapsed)
            raise CircuitBreakerOpenError(service=self.name, recovery_time=remaining)

        return True

    def record_success(self) -> None:
        if self.state == self.HALF_OPEN:
            logger.info("Circuit breaker '%s' transitioning to CLOSED (service recovered)", self.name)
        self.failure_count = 0
        self.state = self.CLOSED
        self.last_failure_time = None

    def record_failure(self) -> None:
        self.failure_count += 1
        self.last_failure_time = time.time()

        if self.state == self.HALF_OPEN:
            logger.warning("Circuit breaker '%s' returning to OPEN (test request failed)", self.name)
            self.state = self.OPEN
        elif self.failure_count >= self.failure_threshold:
            logger.warning(
                "Circuit breaker '%s' OPENING after %d consecutive failures",
                self.name,
                self.failure_count,
            )
            self.state = self.OPEN

    def reset(self) -> None:
        self.failure_count = 0
        self.state = self.CLOSED
        self.last_failure_time = None

    def snapshot(self) -> Dict[str, Any]:
        return {
            "state": self.state,
            "failure_count": self.failure_count,
            "failure_threshold": self.failure_threshold,
        }


def breaker_states() -> Dict[str, Dict[str, Any]]:
    """Current state of every registered breaker, keyed by service name."""
    return {name: breaker.snapshot() for name, breaker in sorted(_registry.items())}


def retry_policy(
    log: logging.Logger,
    retry_on: Tuple[Type[BaseException], ...],
) -> Dict[str, Any]:
    """
    Keyword arguments for tenacity's `@retry`.

    Exponential backoff with jitter, bounded by RETRY_MIN_WAIT / RETRY_MAX_WAIT,
    RETRY_MAX_ATTEMPTS attempts, only for the given (transient) exception types.
    The last exception is re-raised unchanged.
    """
    return dict(
        retry=retry_if_exception_type(retry_on),
        stop=stop_after_attempt(settings.retry_max_attempts),
        wait=wait_exponential_jitter(
            initial=settings.retry_min_wait,
            max=settings.retry_max_wait,
            jitter=1,
        ),
        before_sleep=before_sleep_log(log, logging.WARNING),
        reraise=True,
    )
