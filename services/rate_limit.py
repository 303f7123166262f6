"""Fixed-window, in-memory rate limiting keyed by client IP.

Protects the endpoints that call paid AI services. State lives in the
process, so each worker enforces its own limits.
"""

import logging
import math
import threading
import time
from collections import OrderedDict
from typing import Callable, NamedTuple, Optional

from fastapi import HTTPException, Request

from config import Config


class RateLimitResult(NamedTuple):
    success: bool
    reset: Optional[float] = None  # clock time at which the window ends


class _Window:
    __slots__ = ("started", "count")

    def __init__(self, started: float):
        self.started = started
        self.count = 0


class RateLimiter:
    """Allow `limit` requests per `interval` seconds for each token.

    A token's window opens on its first request. At most `max_tokens`
    tokens are tracked; the least recently seen one is dropped first.
    """

    def __init__(self, limit: int, interval: float, max_tokens: int = 500,
                 clock: Callable[[], float] = time.monotonic):
        self.limit = limit
        self.interval = interval
        self.max_tokens = max_tokens
        self.clock = clock
        self._windows: "OrderedDict[str, _Window]" = OrderedDict()
        self._lock = threading.Lock()

    def _current_window(self, token: str, now: float) -> Optional[_Window]:
        window = self._windows.get(token)
        if window is not None and now - window.started >= self.interval:
            del self._windows[token]
            return None
        return window

    def check(self, token: str) -> RateLimitResult:
        now = self.clock()
        with self._lock:
            window = self._current_window(token, now)
            if window is None:
                window = _Window(now)
                self._windows[token] = window
                if len(self._windows) > self.max_tokens:
                    self._windows.popitem(last=False)
            self._windows.move_to_end(token)

            window.count += 1
            if window.count > self.limit:
                return RateLimitResult(success=False, reset=window.started + self.interval)
            return RateLimitResult(success=True)

    def get_usage(self, token: str) -> int:
        with self._lock:
            window = self._current_window(token, self.clock())
            return window.count if window else 0

    def reset(self, token: str) -> None:
        with self._lock:
            self._windows.pop(token, None)


def get_identifier(request: Request, fallback: str = "anonymous") -> str:
    """Client IP as seen through common proxy headers, else the peer address."""
    forwarded = request.headers.get("x-forwarded-for")
    ip = (
        (forwarded.split(",")[0] if forwarded else None)
        or request.headers.get("x-real-ip")
        or request.headers.get("cf-connecting-ip")
        or (request.client.host if request.client else None)
        or fallback
    )
    return ip.strip() or fallback


def format_reset_time(reset: float, now: float) -> str:
    seconds = max(0, math.ceil(reset - now))
    if seconds < 60:
        return f"{seconds} second{'' if seconds == 1 else 's'}"
    minutes = math.ceil(seconds / 60)
    return f"{minutes} minute{'' if minutes == 1 else 's'}"


def enforce(limiter: RateLimiter):
    """FastAPI dependency that rejects over-limit clients with 429."""
    async def dependency(request: Request) -> None:
        identifier = get_identifier(request)
        result = limiter.check(identifier)
        if result.success:
            return
        now = limiter.clock()
        logging.warning(f"Rate limit exceeded for {identifier} on {request.url.path}")
        raise HTTPException(
            status_code=429,
            detail=f"Too many requests. Please try again in {format_reset_time(result.reset, now)}.",
            headers={"Retry-After": str(max(1, math.ceil(result.reset - now)))},
        )
    return dependency


# Expensive AI operations (transcription, analysis)
strict_rate_limit = RateLimiter(Config.STRICT_RATE_LIMIT, Config.RATE_LIMIT_WINDOW, Config.RATE_LIMIT_MAX_TOKENS)
# File uploads
moderate_rate_limit = RateLimiter(Config.MODERATE_RATE_LIMIT, Config.RATE_LIMIT_WINDOW, Config.RATE_LIMIT_MAX_TOKENS)
# Cheap operations (scenario generation)
generous_rate_limit = RateLimiter(Config.GENEROUS_RATE_LIMIT, Config.RATE_LIMIT_WINDOW, Config.RATE_LIMIT_MAX_TOKENS)
