"""Rewrite result container and failure classification"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

NETWORK = "network"
TIMEOUT = "timeout"
AUTH = "auth"
UNKNOWN = "unknown"

ERROR_MESSAGES = {
    NETWORK: "Network connection failed - check your internet connection",
    TIMEOUT: "Request timed out - please try again",
    AUTH: "API key is invalid or expired",
    UNKNOWN: "Failed to rewrite prompt",
}

CONNECTION_FAILED_MESSAGE = "Failed to connect to Gemini API"

_NETWORK_MARKERS = ("fetch failed", "connecterror", "connection", "network", "name resolution", "unreachable")
_TIMEOUT_MARKERS = ("timeout", "timed out")
_AUTH_MARKERS = ("api key", "api_key", "permission_denied", "unauthenticated")


def classify_failure(detail: str) -> str:
    """Map a raw failure message to network, timeout, auth or unknown"""
    lowered = (detail or "").lower()
    if any(marker in lowered for marker in _NETWORK_MARKERS):
        return NETWORK
    if any(marker in lowered for marker in _TIMEOUT_MARKERS):
        return TIMEOUT
    if any(marker in lowered for marker in _AUTH_MARKERS):
        return AUTH
    return UNKNOWN


@dataclass
class RewriteResult:
    """Outcome of one rewrite; failures carry a fallback result"""
    success: bool
    rewritten_prompt: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None
    error_type: Optional[str] = None
    details: Optional[str] = None
    fallback: Optional["RewriteResult"] = None

    def to_dict(self) -> Dict[str, Any]:
        """camelCase view, omitting unset fields"""
        data: Dict[str, Any] = {"success": self.success}
        if self.rewritten_prompt is not None:
            data["rewrittenPrompt"] = self.rewritten_prompt
        if self.metadata:
            data["metadata"] = dict(self.metadata)
        if self.error is not None:
            data["error"] = self.error
        if self.error_type is not None:
            data["errorType"] = self.error_type
        if self.details is not None:
            data["details"] = self.details
        if self.fallback is not None:
            data["fallback"] = self.fallback.to_dict()
        return data
