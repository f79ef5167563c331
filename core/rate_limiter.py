# core/rate_limiter.py

from typing import Dict, List, Tuple
from collections import defaultdict
from threading import Lock
import time

from fastapi import HTTPException


# Simple in-memory sliding-window limiter (per process)
_rate_limit_store: Dict[str, List[float]] = defaultdict(list)
_lock = Lock()


def check_rate_limit(
    identifier: str,
    max_requests: int = 10,
    window_seconds: int = 60,
) -> Tuple[bool, int]:
    """
    Record one attempt for `identifier` and report whether it is allowed.

    Returns:
        Tuple of (allowed: bool, remaining: int)
    """
    now = time.time()
    window_start = now - window_seconds

    with _lock:
        attempts = [ts for ts in _rate_limit_store[identifier] if ts > window_start]

        if len(attempts) >= max_requests:
            _rate_limit_store[identifier] = attempts
            return False, 0

        attempts.append(now)
        _rate_limit_store[identifier] = attempts
        return True, max_requests - len(attempts)


def require_rate_limit(identifier: str, max_requests: int = 10, window_seconds: int = 60) -> int:
    """
    Raises HTTPException 429 once `identifier` exceeds the limit.
    Returns the number of remaining attempts otherwise.
    """
    allowed, remaining = check_rate_limit(identifier, max_requests, window_seconds)

    if not allowed:
        raise HTTPException(
            status_code=429,
            detail=f"Too many attempts. Maximum {max_requests} per {window_seconds} seconds.",
            headers={
                "X-RateLimit-Limit": str(max_requests),
                "X-RateLimit-Window": str(window_seconds),
                "Retry-After": str(window_seconds),
            },
        )

    return remaining


def reset_rate_limits():
    """Forget all recorded attempts (tests, process restart semantics)."""
    with _lock:
        _rate_limit_store.clear()
