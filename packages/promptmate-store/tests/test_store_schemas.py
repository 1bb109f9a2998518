"""Tests for Pydantic schemas"""
import pytest
from uuid import uuid4
from datetime import datetime, timezone
from pydantic import ValidationError

from promptmate_store.models import Prompt, Tone, PromptType
from promptmate_store.schemas import (
    PromptCreate,
    PromptResponse,
    PaginationInfo,
    UserStats,
)


def test_prompt_create_defaults():
    """Test PromptCreate applies tone/type defaults"""
    data = PromptCreate.model_validate({
        "userId": "user-1",
        "originalPrompt": "hello",
        "rewrittenPrompt": "Hello.",
    })
    assert data.user_id == "user-1"
    assert data.tone == Tone.PROFESSIONAL
    assert data.prompt_type == PromptType.OTHER
    assert data.metadata.api_cost == 0.0
    assert data.metadata.model == "gemini-pro"


def test_prompt_create_strips_whitespace():
    data = PromptCreate.model_validate({
        "userId": "  user-1 ",
        "originalPrompt": "  hello  ",
        "rewrittenPrompt": "Hello.",
        "type": "email",
    })
    assert data.user_id == "user-1"
    assert data.original_prompt == "hello"
    assert data.prompt_type == PromptType.EMAIL


def test_prompt_create_rejects_unknown_tone():
    with pytest.raises(ValidationError):
        PromptCreate.model_validate({
            "userId": "user-1",
            "originalPrompt": "hello",
            "rewrittenPrompt": "Hello.",
            "tone": "sarcastic",
        })


def test_prompt_create_enforces_lengths():
    with pytest.raises(ValidationError):
        PromptCreate.model_validate({
            "userId": "user-1",
            "originalPrompt": "x" * 5001,
            "rewrittenPrompt": "Hello.",
        })
    with pytest.raises(ValidationError):
        PromptCreate.model_validate({
            "userId": "user-1",
            "originalPrompt": "hello",
            "rewrittenPrompt": "x" * 10001,
        })
    with pytest.raises(ValidationError):
        PromptCreate.model_validate({
            "userId": "user-1",
            "originalPrompt": "   ",
            "rewrittenPrompt": "Hello.",
        })


def test_prompt_response_from_model():
    """Test serializing a model instance with camelCase keys"""
    prompt = Prompt(
        id=uuid4(),
        user_id="user-1",
        original_prompt="hi there",
        rewritten_prompt="Hello there.",
        tone=Tone.FRIENDLY,
        type=PromptType.MESSAGE,
        is_favorite=True,
        processing_time=50,
        model="mock",
        api_cost=0.0,
        created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
    )
    prompt.refresh_word_counts()

    data = PromptResponse.from_model(prompt).model_dump(by_alias=True, mode="json")
    assert data["userId"] == "user-1"
    assert data["type"] == "message"
    assert data["tone"] == "friendly"
    assert data["isFavorite"] is True
    assert data["metadata"]["wordCount"] == {"original": 2, "rewritten": 2}
    assert data["metadata"]["processingTime"] == 50
    assert data["createdAt"].startswith("2026-01-01")


@pytest.mark.parametrize("page,limit,total,returned", [
    (1, 20, 0, 0),
    (1, 10, 25, 10),
    (2, 10, 25, 10),
    (3, 10, 25, 5),
    (4, 10, 25, 0),
])
def test_pagination_has_next(page, limit, total, returned):
    """hasNext is true exactly when more records follow this page"""
    info = PaginationInfo.build(page=page, limit=limit, total=total, returned=returned)
    skip = (page - 1) * limit
    assert info.has_next == (skip + returned < total)
    assert info.has_prev == (page > 1)


def test_pagination_totals():
    info = PaginationInfo.build(page=2, limit=10, total=25, returned=10)
    data = info.model_dump(by_alias=True)
    assert data == {
        "currentPage": 2,
        "totalPages": 3,
        "totalItems": 25,
        "itemsPerPage": 10,
        "hasNext": True,
        "hasPrev": True,
    }


def test_user_stats_defaults():
    data = UserStats().model_dump(by_alias=True)
    assert data["totalPrompts"] == 0
    assert data["favoritePrompts"] == 0
    assert data["averageProcessingTime"] == 0.0
    assert data["totalApiCost"] == 0.0
