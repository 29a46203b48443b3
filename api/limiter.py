"""
============================================================================
FILE: limiter.py
LOCATION: api/limiter.py
============================================================================

PURPOSE:
    Rate limiting for the backend: a shared SlowAPI limiter that guards
    every route per client IP, and a keyed sliding-window admission
    controller that gates post creation per author.

ROLE IN PROJECT:
    Centralizes rate limiting configuration so the app and the posts
    procedures use the same storage and policies. Window counters live in
    the limiter storage (Redis in production), never in process memory of
    a single API instance unless memory:// is configured.

KEY COMPONENTS:
    - limiter: SlowAPI Limiter configured with default request limits
    - RateLimitResult: Outcome of a single admission check
    - AdmissionController: Interface consumed by the posts service
    - SlidingWindowAdmissionController: limits moving-window implementation
    - get_admission_controller: FastAPI dependency

DEPENDENCIES:
    - External: slowapi, limits (redis for redis:// storage)
    - Internal: config.py, logging_config.py

USAGE:
    from api.limiter import limiter, get_admission_controller

    result = get_admission_controller().limit(user_id)
    if not result.success:
        ...
============================================================================
"""

import threading
import time
from dataclasses import dataclass
from typing import Optional, Protocol

from limits import RateLimitItem, parse
from limits.storage import Storage, storage_from_string
from limits.strategies import MovingWindowRateLimiter
from slowapi import Limiter
from slowapi.util import get_remote_address

from api.config import (
    API_RATE_LIMIT,
    API_RATE_LIMIT_ENABLED,
    POST_RATE_LIMIT,
    RATE_LIMIT_PREFIX,
    RATE_LIMIT_STORAGE_URI,
)
from api.logging_config import get_logger

logger = get_logger("limiter")


limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[API_RATE_LIMIT],
    storage_uri=RATE_LIMIT_STORAGE_URI,
    strategy="moving-window",
    key_prefix=f"{RATE_LIMIT_PREFIX}:ip",
    enabled=API_RATE_LIMIT_ENABLED,
)


@dataclass(frozen=True)
class RateLimitResult:
    success: bool
    limit: int
    remaining: int
    reset: float  # epoch seconds when the oldest hit leaves the window


class AdmissionController(Protocol):
    def limit(self, key: str) -> RateLimitResult:
        """Record one action for key and report whether it is admitted."""
        ...


class SlidingWindowAdmissionController:
    """
    Keyed sliding-window admission control.

    Each key gets an independent moving window. The check and the increment
    are one atomic storage operation (a Lua script on Redis, a lock on
    memory storage), so concurrent callers cannot both take the last slot.
    """

    def __init__(
        self,
        rate: str = POST_RATE_LIMIT,
        storage: Optional[Storage] = None,
        prefix: str = RATE_LIMIT_PREFIX,
    ):
        self.item: RateLimitItem = parse(rate)
        self.storage = storage or storage_from_string(RATE_LIMIT_STORAGE_URI)
        self.strategy = MovingWindowRateLimiter(self.storage)
        self.prefix = prefix

    def limit(self, key: str) -> RateLimitResult:
        success = self.strategy.hit(self.item, self.prefix, key)
        stats = self.strategy.get_window_stats(self.item, self.prefix, key)
        result = RateLimitResult(
            success=success,
            limit=self.item.amount,
            remaining=stats.remaining,
            reset=stats.reset_time,
        )
        if not success:
            logger.info(
                f"Admission denied for {key}: {self.item} "
                f"(resets in {max(0.0, result.reset - time.time()):.1f}s)",
                extra={
                    "extra_data": {
                        "key": key,
                        "limit": result.limit,
                        "remaining": result.remaining,
                        "reset": result.reset,
                    }
                },
            )
        return result

    def reset(self) -> None:
        """Drop every window in the backing storage."""
        self.storage.reset()

    def is_available(self) -> bool:
        try:
            return bool(self.storage.check())
        except Exception as e:
            logger.warning(f"Rate limit storage check failed: {e}")
            return False


_admission_controller: Optional[SlidingWindowAdmissionController] = None
_admission_lock = threading.Lock()


def get_admission_controller() -> AdmissionController:
    """Dependency returning the process-wide post admission controller."""
    global _admission_controller
    if _admission_controller is None:
        with _admission_lock:
            if _admission_controller is None:
                _admission_controller = SlidingWindowAdmissionController()
                logger.info(
                    f"Post admission policy {POST_RATE_LIMIT} on {RATE_LIMIT_STORAGE_URI}",
                )
    return _admission_controller
