"""PromptMate Guard - per-client request budgets and security headers"""
__version__ = "0.1.0"

from .ratelimit import (
    RateLimiter,
    RateLimitMiddleware,
    RateLimitRule,
    default_rules,
    client_id_from_request,
)
from .headers import SecurityHeadersMiddleware, DEFAULT_SECURITY_HEADERS

__all__ = [
    "RateLimiter",
    "RateLimitMiddleware",
    "RateLimitRule",
    "default_rules",
    "client_id_from_request",
    "SecurityHeadersMiddleware",
    "DEFAULT_SECURITY_HEADERS",
]
