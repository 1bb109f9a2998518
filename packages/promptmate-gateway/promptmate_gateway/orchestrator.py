"""Rewrite pipeline: validate, call the AI client, optionally save to history"""
from dataclasses import dataclass
from typing import Any, Dict, Optional
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from promptmate_ai import RewriteClient
from promptmate_store.models import Tone, PromptType, MAX_ORIGINAL_LENGTH, MAX_REWRITTEN_LENGTH
from promptmate_store.repositories import PromptRepository

from .errors import ValidationError, ExternalServiceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RewriteRequest:
    """A validated rewrite request"""
    prompt: str
    tone: str = Tone.PROFESSIONAL.value
    prompt_type: str = PromptType.OTHER.value
    user_id: Optional[str] = None

    @classmethod
    def parse(cls, payload: Dict[str, Any]) -> "RewriteRequest":
        """
        Validate a raw request body

        Raises:
            ValidationError: describing the first violated field
        """
        prompt = payload.get("prompt")
        if not isinstance(prompt, str) or not prompt.strip():
            raise ValidationError("Prompt must be a non-empty string", error="Invalid prompt")

        prompt = prompt.strip()
        if len(prompt) > MAX_ORIGINAL_LENGTH:
            raise ValidationError(
                f"Prompt must be less than {MAX_ORIGINAL_LENGTH} characters",
                error="Prompt too long",
            )

        tone = payload.get("tone") or Tone.PROFESSIONAL.value
        if tone not in Tone.values():
            raise ValidationError(f"Tone must be one of: {', '.join(Tone.values())}", error="Invalid tone")

        prompt_type = payload.get("type") or PromptType.OTHER.value
        if prompt_type not in PromptType.values():
            raise ValidationError(f"Type must be one of: {', '.join(PromptType.values())}", error="Invalid type")

        user_id = payload.get("userId")
        if user_id is not None and not isinstance(user_id, str):
            raise ValidationError("userId must be a string", error="Invalid userId")

        return cls(prompt=prompt, tone=tone, prompt_type=prompt_type, user_id=(user_id or "").strip() or None)


class RewriteOrchestrator:
    """
    Runs one rewrite request end to end

    The AI client is injected so tests can substitute a fake implementing
    the same rewrite(prompt, tone, type) contract.
    """

    def __init__(self, ai_client: RewriteClient, session: Optional[AsyncSession] = None):
        self.ai_client = ai_client
        self.session = session

    async def handle_rewrite(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Rewrite a prompt and shape the response data

        Raises:
            ValidationError: invalid input; the AI client is not called
            ExternalServiceError: the AI client reported a failure
        """
        request = RewriteRequest.parse(payload)
        logger.info(f"Rewriting prompt for user: {request.user_id or 'anonymous'}")

        result = await self.ai_client.rewrite(request.prompt, request.tone, request.prompt_type)

        if not result.success:
            raise ExternalServiceError(
                result.error,
                error=f"AI service error ({result.error_type})",
                error_type=result.error_type,
                details=result.details,
                fallback=result.fallback.to_dict() if result.fallback else None,
            )

        data: Dict[str, Any] = {
            "originalPrompt": request.prompt,
            "rewrittenPrompt": result.rewritten_prompt,
            "tone": request.tone,
            "type": request.prompt_type,
            "metadata": result.metadata,
        }

        if request.user_id:
            history_id = await self._save_to_history(request, result.rewritten_prompt, result.metadata)
            data["savedToHistory"] = history_id is not None
            if history_id is not None:
                data["historyId"] = str(history_id)

        return data

    async def _save_to_history(self, request: RewriteRequest, rewritten: str, metadata: Dict[str, Any]):
        """Persist the rewrite; any failure is logged and reported as None"""
        if self.session is None:
            logger.warning("Failed to auto-save to history: no database session")
            return None

        if len(rewritten) > MAX_REWRITTEN_LENGTH:
            logger.warning(f"Failed to auto-save to history: rewritten prompt exceeds {MAX_REWRITTEN_LENGTH} characters")
            return None

        repo = PromptRepository(self.session)
        try:
            prompt = await repo.create_prompt(
                user_id=request.user_id,
                original_prompt=request.prompt,
                rewritten_prompt=rewritten,
                tone=Tone(request.tone),
                prompt_type=PromptType(request.prompt_type),
                metadata=metadata,
            )
            await self.session.commit()
        except (SQLAlchemyError, OSError) as e:
            logger.warning(f"Failed to auto-save to history: {type(e).__name__}: {e}")
            await self._rollback()
            return None

        return prompt.id

    async def _rollback(self):
        try:
            await self.session.rollback()
        except (SQLAlchemyError, OSError) as e:
            logger.debug(f"Rollback after failed auto-save also failed: {e}")
