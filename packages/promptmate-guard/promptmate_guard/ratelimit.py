"""Rate limiting middleware for FastAPI"""
import time
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple
import logging

from fastapi import status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

FIFTEEN_MINUTES = 15 * 60

GLOBAL_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."
API_LIMIT_MESSAGE = "Too many API requests, please try again later."


@dataclass(frozen=True)
class RateLimitRule:
    """A request budget for every path starting with prefix"""
    name: str
    prefix: str
    max_requests: int
    window_seconds: int = FIFTEEN_MINUTES
    message: str = GLOBAL_LIMIT_MESSAGE

    def matches(self, path: str) -> bool:
        return path.startswith(self.prefix)


def default_rules(
    global_max: int = 100,
    api_max: int = 30,
    window_seconds: int = FIFTEEN_MINUTES,
) -> List[RateLimitRule]:
    """Global budget for every request plus a tighter one for /api"""
    return [
        RateLimitRule("global", "/", global_max, window_seconds, GLOBAL_LIMIT_MESSAGE),
        RateLimitRule("api", "/api", api_max, window_seconds, API_LIMIT_MESSAGE),
    ]


class RateLimiter:
    """Sliding-window in-memory rate limiter"""

    def __init__(self, clock: Callable[[], float] = time.time):
        # Store: {client_id: {bucket: [timestamps]}}
        self._requests: Dict[str, Dict[str, List[float]]] = defaultdict(lambda: defaultdict(list))
        self._clock = clock
        self._cleanup_interval = 300
        self._max_window = FIFTEEN_MINUTES
        self._last_cleanup = clock()

    def _cleanup_old_requests(self):
        """Drop timestamps older than the longest window seen so far"""
        current_time = self._clock()

        if current_time - self._last_cleanup < self._cleanup_interval:
            return

        cutoff_time = current_time - self._max_window

        for client_id in list(self._requests.keys()):
            buckets = self._requests[client_id]
            for bucket in list(buckets.keys()):
                buckets[bucket] = [ts for ts in buckets[bucket] if ts > cutoff_time]
                if not buckets[bucket]:
                    del buckets[bucket]

            if not buckets:
                del self._requests[client_id]

        self._last_cleanup = current_time
        logger.debug("Cleaned up old rate limit records")

    def is_allowed(
        self,
        client_id: str,
        bucket: str,
        max_requests: int,
        window_seconds: int = FIFTEEN_MINUTES,
    ) -> Tuple[bool, int]:
        """
        Check and record a request

        Rejected requests are not recorded.

        Args:
            client_id: Unique identifier for the client (IP address)
            bucket: Budget the request is counted against
            max_requests: Requests allowed per window
            window_seconds: Window length

        Returns:
            Tuple of (allowed, remaining requests in the window)
        """
        self._max_window = max(self._max_window, window_seconds)
        self._cleanup_old_requests()

        current_time = self._clock()
        history = self._requests[client_id][bucket]
        window_start = current_time - window_seconds
        used = sum(1 for ts in history if ts > window_start)

        if used >= max_requests:
            return False, 0

        history.append(current_time)
        return True, max_requests - used - 1

    def get_usage(self, client_id: str, bucket: str, window_seconds: int = FIFTEEN_MINUTES) -> int:
        """Requests recorded for client_id in bucket during the current window"""
        if client_id not in self._requests:
            return 0
        window_start = self._clock() - window_seconds
        return sum(1 for ts in self._requests[client_id].get(bucket, []) if ts > window_start)


def client_id_from_request(request) -> str:
    """Client IP, honouring proxy headers"""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    return request.client.host if request.client else "unknown"


class RateLimitMiddleware:
    """HTTP middleware applying every matching rule to each request"""

    def __init__(
        self,
        limiter: Optional[RateLimiter] = None,
        rules: Optional[Sequence[RateLimitRule]] = None,
        get_client_id: Optional[Callable] = None,
    ):
        self.limiter = limiter or RateLimiter()
        self.rules = list(rules) if rules is not None else default_rules()
        self.get_client_id = get_client_id or client_id_from_request

    async def __call__(self, request, call_next):
        client_id = self.get_client_id(request)
        path = request.url.path

        limit = None
        remaining = None
        for rule in self.rules:
            if not rule.matches(path):
                continue

            allowed, left = self.limiter.is_allowed(
                client_id, rule.name, rule.max_requests, rule.window_seconds
            )
            if not allowed:
                logger.warning(f"Rate limit '{rule.name}' exceeded for {client_id} on {path}")
                return JSONResponse(
                    status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                    content={"error": rule.message},
                    headers={
                        "X-RateLimit-Limit": str(rule.max_requests),
                        "X-RateLimit-Remaining": "0",
                        "Retry-After": str(rule.window_seconds),
                    },
                )

            # Report the tightest budget
            if remaining is None or left < remaining:
                limit, remaining = rule.max_requests, left

        response = await call_next(request)

        if limit is not None:
            response.headers["X-RateLimit-Limit"] = str(limit)
            response.headers["X-RateLimit-Remaining"] = str(remaining)

        return response
