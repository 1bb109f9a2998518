"""HTTP routes: root banner plus the /api surface"""
import time
from datetime import datetime, timezone
from typing import Any, Awaitable, Dict, List, Optional, Tuple
from uuid import UUID
import logging

import pydantic
from fastapi import APIRouter, Body, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from promptmate_ai import RewriteClient
from promptmate_store.database import get_db
from promptmate_store.models import Prompt, Tone, PromptType
from promptmate_store.repositories import PromptRepository, InvalidQueryError
from promptmate_store.schemas import (
    PromptCreate,
    PromptResponse,
    PaginationInfo,
    UserStats,
    RecentActivity,
    Popularity,
)

from .config import API_VERSION
from .errors import ValidationError, NotFoundError, invalid_id_error
from .orchestrator import RewriteOrchestrator

logger = logging.getLogger(__name__)

root_router = APIRouter()
router = APIRouter()

REQUIRED_HISTORY_FIELDS = ("userId", "originalPrompt", "rewrittenPrompt")


# Dependencies
def get_ai_client(request: Request) -> RewriteClient:
    return request.app.state.ai_client


def get_repository(db: AsyncSession = Depends(get_db)) -> PromptRepository:
    return PromptRepository(db)


def get_orchestrator(
    ai_client: RewriteClient = Depends(get_ai_client),
    db: AsyncSession = Depends(get_db),
) -> RewriteOrchestrator:
    return RewriteOrchestrator(ai_client, db)


def _user_id(user_id: str) -> str:
    if not user_id or not user_id.strip():
        raise ValidationError("userId is required and must be a non-empty string", error="Invalid userId")
    return user_id.strip()


def _record_id(raw_id: str) -> UUID:
    try:
        return UUID(raw_id)
    except ValueError:
        raise invalid_id_error()


def _dump(model: pydantic.BaseModel, **kwargs) -> Dict[str, Any]:
    return model.model_dump(by_alias=True, mode="json", **kwargs)


def _describe(exc: pydantic.ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(item) for item in err['loc'])}: {err['msg']}" for err in exc.errors()
    )


async def _page(listing: Awaitable[Tuple[List[Prompt], int]], page: int, limit: int):
    try:
        prompts, total = await listing
    except InvalidQueryError as e:
        raise ValidationError(str(e))

    return (
        [_dump(PromptResponse.from_model(prompt)) for prompt in prompts],
        _dump(PaginationInfo.build(page, limit, total, len(prompts))),
    )


# Endpoints
@root_router.get("/")
async def root():
    """Service banner"""
    return {
        "message": "PromptMate Backend API",
        "version": API_VERSION,
        "status": "running",
    }


@router.get("/health")
async def health(request: Request):
    """Health check endpoint"""
    return {
        "success": True,
        "message": "PromptMate API is healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - request.app.state.started_at, 3),
    }


@router.post("/rewrite")
async def rewrite_prompt(
    payload: Dict[str, Any] = Body(...),
    orchestrator: RewriteOrchestrator = Depends(get_orchestrator),
):
    """
    Rewrite a prompt with the configured AI client

    When userId is present the result is also saved to that user's history;
    a failed save is reported as savedToHistory=false, not as an error.
    """
    data = await orchestrator.handle_rewrite(payload)
    return {"success": True, "data": data}


@router.post("/history", status_code=status.HTTP_201_CREATED)
async def save_to_history(
    payload: Dict[str, Any] = Body(...),
    repo: PromptRepository = Depends(get_repository),
):
    """Save an already rewritten prompt"""
    if any(not payload.get(name) for name in REQUIRED_HISTORY_FIELDS):
        raise ValidationError(
            "userId, originalPrompt, and rewrittenPrompt are required",
            error="Missing required fields",
        )

    # Null tone/type/metadata mean "use the default"
    cleaned = {key: value for key, value in payload.items() if value not in (None, "")}
    try:
        create = PromptCreate.model_validate(cleaned)
    except pydantic.ValidationError as e:
        raise ValidationError(_describe(e))

    prompt = await repo.create_prompt(
        user_id=create.user_id,
        original_prompt=create.original_prompt,
        rewritten_prompt=create.rewritten_prompt,
        tone=create.tone,
        prompt_type=create.prompt_type,
        metadata=create.metadata.model_dump(by_alias=True),
    )
    await repo.session.commit()
    logger.info(f"Saved history record {prompt.id} for user {prompt.user_id}")

    return {
        "success": True,
        "data": _dump(PromptResponse.from_model(prompt)),
        "message": "Prompt saved to history successfully",
    }


@router.get("/history/{user_id}")
async def get_history(
    user_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
    prompt_type: Optional[PromptType] = Query(None, alias="type"),
    tone: Optional[Tone] = Query(None),
    search: Optional[str] = Query(None),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    repo: PromptRepository = Depends(get_repository),
):
    """One page of a user's history, optionally filtered and searched"""
    listing = repo.list_prompts(
        _user_id(user_id),
        prompt_type=prompt_type,
        tone=tone,
        search=search,
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    prompts, pagination = await _page(listing, page, limit)
    return {"success": True, "data": {"prompts": prompts, "pagination": pagination}}


@router.delete("/history/{record_id}")
async def delete_history_item(
    record_id: str,
    user_id: Optional[str] = Query(None, alias="userId"),
    repo: PromptRepository = Depends(get_repository),
):
    """Delete a record; with userId only when that user owns it"""
    deleted = await repo.delete_prompt(_record_id(record_id), owner_user_id=user_id)
    if not deleted:
        raise NotFoundError(
            "The requested history item does not exist or you do not have permission to delete it",
            error="History item not found",
        )
    await repo.session.commit()

    return {
        "success": True,
        "message": "History item deleted successfully",
        "data": {"deletedId": record_id},
    }


@router.post("/history/favorite/{record_id}")
async def toggle_favorite(
    record_id: str,
    payload: Optional[Dict[str, Any]] = Body(None),
    repo: PromptRepository = Depends(get_repository),
):
    """Flip the favorite flag of a record"""
    owner = (payload or {}).get("userId")
    if owner is not None and not isinstance(owner, str):
        raise ValidationError("userId must be a string", error="Invalid userId")

    prompt = await repo.toggle_favorite(_record_id(record_id), owner_user_id=owner)
    if prompt is None:
        raise NotFoundError(
            "The requested history item does not exist or you do not have permission to modify it",
            error="History item not found",
        )
    await repo.session.commit()

    return {
        "success": True,
        "data": {"id": str(prompt.id), "isFavorite": prompt.is_favorite},
        "message": f"Prompt {'added to' if prompt.is_favorite else 'removed from'} favorites",
    }


@router.get("/favorites/{user_id}")
async def get_favorites(
    user_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    repo: PromptRepository = Depends(get_repository),
):
    """One page of a user's favorite records"""
    listing = repo.list_favorites(
        _user_id(user_id),
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    favorites, pagination = await _page(listing, page, limit)
    return {"success": True, "data": {"favorites": favorites, "pagination": pagination}}


@router.get("/stats/{user_id}")
async def get_user_stats(
    user_id: str,
    repo: PromptRepository = Depends(get_repository),
):
    """Aggregate statistics and the five most recent records of a user"""
    user_id = _user_id(user_id)
    stats = await repo.get_user_stats(user_id) or {}
    recent = await repo.get_recent_activity(user_id, limit=5)

    return {
        "success": True,
        "data": {
            "stats": _dump(UserStats(**stats), exclude_none=True),
            "recentActivity": [_dump(RecentActivity(**item)) for item in recent],
        },
    }


@router.get("/info")
async def get_info(
    ai_client: RewriteClient = Depends(get_ai_client),
    repo: PromptRepository = Depends(get_repository),
):
    """API status, AI model information and global tone/type popularity"""
    model_info = await ai_client.get_model_info()
    total = await repo.count_prompts()
    popular = await repo.get_popular_tones_and_types()

    return {
        "success": True,
        "data": {
            "api": {
                "version": API_VERSION,
                "status": "active",
                "totalPromptsProcessed": total,
            },
            "ai": model_info,
            "popular": _dump(Popularity(**popular)),
        },
    }
