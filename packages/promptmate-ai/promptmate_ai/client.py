"""Rewrite clients with ENV-based switching"""
import asyncio
import os
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Set
import logging

import httpx

from .fallback import mock_response
from .instructions import (
    DEFAULT_TONE,
    DEFAULT_TYPE,
    TONE_INSTRUCTIONS,
    TYPE_INSTRUCTIONS,
    build_rewrite_request,
)
from .result import (
    CONNECTION_FAILED_MESSAGE,
    ERROR_MESSAGES,
    RewriteResult,
    classify_failure,
)

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-1.5-flash"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_TIMEOUT_S = 30.0
API_KEY_PREFIX = "AIza"
PROBE_TEXT = "Hello, this is a test."
NOT_INITIALIZED = "Service not initialized"

# Estimated USD per 1000 characters (input + output)
COST_PER_1K_CHARS = 0.0005

GENERATION_CONFIG = {
    "temperature": 0.7,
    "topP": 0.8,
    "topK": 40,
    "maxOutputTokens": 2048,
}


class ProviderError(Exception):
    """The provider could not produce a completion"""


def calculate_cost(original_text: str, rewritten_text: str) -> float:
    """Estimated cost of a rewrite, rounded to 6 decimal places"""
    total_chars = len(original_text) + len(rewritten_text)
    return round((total_chars / 1000) * COST_PER_1K_CHARS, 6)


class RewriteClient(ABC):
    """Base class for rewrite clients"""

    model: str = DEFAULT_MODEL

    @abstractmethod
    async def rewrite(
        self,
        original_prompt: str,
        tone: str = DEFAULT_TONE,
        prompt_type: str = DEFAULT_TYPE,
    ) -> RewriteResult:
        """Rewrite a prompt; never raises, failures are reported in the result"""
        pass

    @abstractmethod
    async def get_model_info(self) -> Dict[str, Any]:
        """Model name, availability and supported tones/types"""
        pass

    async def aclose(self):
        """Release resources held by the client"""
        return None


class MockRewriteClient(RewriteClient):
    """Offline client - always answers with the deterministic fallback rewrite"""

    model = "mock"

    def __init__(self):
        logger.warning("AI rewriting is disabled (provider='mock')")

    async def rewrite(
        self,
        original_prompt: str,
        tone: str = DEFAULT_TONE,
        prompt_type: str = DEFAULT_TYPE,
    ) -> RewriteResult:
        return mock_response(original_prompt, tone, prompt_type)

    async def get_model_info(self) -> Dict[str, Any]:
        return {
            "model": self.model,
            "available": False,
            "connectionStatus": "disconnected",
            "supportedTones": list(TONE_INSTRUCTIONS),
            "supportedTypes": list(TYPE_INSTRUCTIONS),
            "lastError": NOT_INITIALIZED,
        }


class GeminiRewriteClient(RewriteClient):
    """
    Gemini generateContent client

    Config via env:
      GEMINI_API_KEY (required; must look like a Google API key)
      GEMINI_MODEL (default gemini-1.5-flash)
      AI_TIMEOUT_SECONDS (default 30)

    Credentials are checked once at construction. A missing or malformed key
    leaves the client unavailable for its whole lifetime and every rewrite is
    answered by the fallback transform.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout_s: Optional[float] = None,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else os.getenv("GEMINI_API_KEY", "")
        self.model = model or os.getenv("GEMINI_MODEL") or DEFAULT_MODEL
        if timeout_s is None:
            timeout_s = os.getenv("AI_TIMEOUT_SECONDS") or DEFAULT_TIMEOUT_S
        self.timeout_s = float(timeout_s)
        self.base_url = (base_url or os.getenv("GEMINI_BASE_URL") or DEFAULT_BASE_URL).rstrip("/")
        self.transport = transport
        self._detached: Set[asyncio.Future] = set()
        self.available = self._check_credentials()

    def _check_credentials(self) -> bool:
        if not self.api_key:
            logger.warning("GEMINI_API_KEY not found in environment variables")
            return False
        if not self.api_key.startswith(API_KEY_PREFIX):
            logger.warning(f"GEMINI_API_KEY format appears invalid (should start with \"{API_KEY_PREFIX}\")")
            return False
        logger.info(f"Gemini client initialized with model: {self.model}")
        return True

    async def generate(self, text: str) -> str:
        """
        Single generateContent call

        Raises:
            ProviderError: transport failure, error status or empty answer
        """
        url = f"{self.base_url}/models/{self.model}:generateContent"
        payload = {
            "contents": [{"role": "user", "parts": [{"text": text}]}],
            "generationConfig": GENERATION_CONFIG,
        }

        # The rewrite deadline is enforced by the timeout race; the HTTP
        # timeout only bounds how long a discarded request can linger.
        async with httpx.AsyncClient(timeout=self.timeout_s * 2, transport=self.transport) as client:
            try:
                response = await client.post(url, json=payload, headers={"x-goog-api-key": self.api_key})
            except httpx.HTTPError as e:
                raise ProviderError(f"{type(e).__name__}: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.status_code >= 400:
            error = data.get("error") if isinstance(data, dict) else None
            message = (error or {}).get("message") or response.text or response.reason_phrase
            raise ProviderError(f"Gemini API error {response.status_code}: {message}")

        return self._extract_text(data)

    @staticmethod
    def _extract_text(data: Dict[str, Any]) -> str:
        candidates = data.get("candidates") or []
        if not candidates:
            reason = (data.get("promptFeedback") or {}).get("blockReason", "no candidates returned")
            raise ProviderError(f"Gemini returned no text: {reason}")

        parts = (candidates[0].get("content") or {}).get("parts") or []
        text = "".join(part.get("text", "") for part in parts)
        if not text:
            raise ProviderError("Gemini returned an empty response")
        return text

    async def test_connection(self) -> Dict[str, Any]:
        """Lightweight probe: one trivial generation call"""
        if not self.available:
            return {"success": False, "error": NOT_INITIALIZED}

        try:
            logger.info("Testing Gemini API connection...")
            text = await self.generate(PROBE_TEXT)
            logger.info("Gemini API connection successful")
            return {"success": True, "response": text}
        except Exception as e:
            detail = str(e) if isinstance(e, ProviderError) else f"{type(e).__name__}: {e}"
            logger.error(f"Gemini API connection test failed: {detail}")
            return {"success": False, "error": detail}

    async def _generate_with_timeout(self, text: str) -> str:
        """
        Race the generation against a timer

        Whichever finishes first wins. A generation that loses is left
        running and its eventual result is dropped.
        """
        generation = asyncio.ensure_future(self.generate(text))
        timer = asyncio.ensure_future(asyncio.sleep(self.timeout_s))

        try:
            done, _ = await asyncio.wait({generation, timer}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            self._detach(generation)
            raise
        finally:
            timer.cancel()

        if generation in done:
            return generation.result()

        self._detach(generation)
        raise ProviderError(f"Request timeout after {self.timeout_s:g} seconds")

    def _detach(self, future: asyncio.Future):
        self._detached.add(future)
        future.add_done_callback(self._on_detached_done)

    def _on_detached_done(self, future: asyncio.Future):
        self._detached.discard(future)
        if not future.cancelled() and future.exception() is not None:
            logger.debug(f"Discarded generation failed: {future.exception()}")
        else:
            logger.debug("Discarded generation completed")

    async def rewrite(
        self,
        original_prompt: str,
        tone: str = DEFAULT_TONE,
        prompt_type: str = DEFAULT_TYPE,
    ) -> RewriteResult:
        started_at = time.monotonic()

        if not self.available:
            logger.info("Using mock response - Gemini API not available")
            return mock_response(original_prompt, tone, prompt_type, started_at)

        probe = await self.test_connection()
        if not probe["success"]:
            logger.error("Connection test failed, using mock response")
            return RewriteResult(
                success=False,
                error=CONNECTION_FAILED_MESSAGE,
                error_type=classify_failure(probe["error"]),
                details=probe["error"],
                fallback=mock_response(original_prompt, tone, prompt_type, started_at),
            )

        try:
            logger.info("Sending request to Gemini API...")
            text = await self._generate_with_timeout(
                build_rewrite_request(original_prompt, tone, prompt_type)
            )
        except Exception as e:
            detail = str(e) if isinstance(e, ProviderError) else f"{type(e).__name__}: {e}"
            kind = classify_failure(detail)
            logger.error(f"Gemini API error ({kind}): {detail}")
            return RewriteResult(
                success=False,
                error=ERROR_MESSAGES[kind],
                error_type=kind,
                details=detail,
                fallback=mock_response(original_prompt, tone, prompt_type, started_at),
            )

        rewritten = text.strip()
        processing_time = int((time.monotonic() - started_at) * 1000)
        logger.info(f"Received rewrite from Gemini API in {processing_time}ms")

        return RewriteResult(
            success=True,
            rewritten_prompt=rewritten,
            metadata={
                "processingTime": processing_time,
                "model": self.model,
                "tone": tone,
                "type": prompt_type,
                "originalLength": len(original_prompt),
                "rewrittenLength": len(rewritten),
                "apiCost": calculate_cost(original_prompt, rewritten),
            },
        )

    async def get_model_info(self) -> Dict[str, Any]:
        probe = await self.test_connection()
        return {
            "model": self.model,
            "available": self.available and probe["success"],
            "connectionStatus": "connected" if probe["success"] else "disconnected",
            "supportedTones": list(TONE_INSTRUCTIONS),
            "supportedTypes": list(TYPE_INSTRUCTIONS),
            "lastError": None if probe["success"] else probe["error"],
        }

    async def aclose(self):
        """Wait for discarded generations to settle"""
        if self._detached:
            await asyncio.gather(*list(self._detached), return_exceptions=True)


def get_rewrite_client(provider: Optional[str] = None, **kwargs) -> RewriteClient:
    """
    Factory function to get a rewrite client based on ENV or parameters

    Args:
        provider: 'gemini' or 'mock'. Defaults to AI_PROVIDER env var or 'gemini'
        **kwargs: Passed to GeminiRewriteClient

    Returns:
        RewriteClient instance
    """
    provider = provider or os.getenv("AI_PROVIDER", "gemini")
    logger.info(f"Creating rewrite client: {provider}")

    if provider == "mock":
        return MockRewriteClient()
    elif provider == "gemini":
        return GeminiRewriteClient(**kwargs)
    else:
        raise ValueError(f"Unknown rewrite provider: {provider}")
