"""Security response headers for FastAPI"""
from typing import Dict, Mapping, Optional

DEFAULT_SECURITY_HEADERS: Dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Permitted-Cross-Domain-Policies": "none",
    "X-XSS-Protection": "0",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
}


class SecurityHeadersMiddleware:
    """HTTP middleware adding security headers to every response"""

    def __init__(self, headers: Optional[Mapping[str, str]] = None):
        self.headers = dict(DEFAULT_SECURITY_HEADERS if headers is None else headers)

    async def __call__(self, request, call_next):
        response = await call_next(request)

        # Headers set by the route itself win
        for name, value in self.headers.items():
            response.headers.setdefault(name, value)

        return response
