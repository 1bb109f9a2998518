"""API client for the PromptMate gateway"""
import asyncio
import os
from typing import Any, Dict, Optional

import httpx


class GatewayClient:
    """Client for interacting with the PromptMate HTTP API"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: int = 60,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize gateway client

        Args:
            base_url: Gateway base URL (defaults to env GATEWAY_URL)
            timeout: Request timeout in seconds; above the server's AI timeout
            transport: Optional httpx transport (tests)
        """
        self.base_url = (base_url or os.getenv("GATEWAY_URL", "http://localhost:3000")).rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self.transport)

    async def health_check(self) -> Dict[str, Any]:
        """Check gateway health"""
        async with self._client() as client:
            response = await client.get("/api/health")
            response.raise_for_status()
            return response.json()

    async def rewrite(
        self,
        prompt: str,
        tone: Optional[str] = None,
        prompt_type: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Rewrite a prompt

        AI failures come back as HTTP 500 with a fallback; the body is
        returned as-is so callers can still show the fallback text.
        """
        payload: Dict[str, Any] = {"prompt": prompt}
        if tone:
            payload["tone"] = tone
        if prompt_type:
            payload["type"] = prompt_type
        if user_id:
            payload["userId"] = user_id

        async with self._client() as client:
            response = await client.post("/api/rewrite", json=payload)
            if response.status_code == 500 and "fallback" in response.json():
                return response.json()
            response.raise_for_status()
            return response.json()

    async def get_history(self, user_id: str, page: int = 1, limit: int = 20) -> Dict[str, Any]:
        """One page of a user's history"""
        async with self._client() as client:
            response = await client.get(f"/api/history/{user_id}", params={"page": page, "limit": limit})
            response.raise_for_status()
            return response.json()

    async def get_info(self) -> Dict[str, Any]:
        """API, model and popularity information"""
        async with self._client() as client:
            response = await client.get("/api/info")
            response.raise_for_status()
            return response.json()


def run_async(coro):
    """Helper to run async functions in sync context"""
    return asyncio.run(coro)
