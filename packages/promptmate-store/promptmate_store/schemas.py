"""Pydantic schemas for validation and serialization"""
import math
from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional, List
from datetime import datetime
from uuid import UUID

from .models.prompts import (
    Prompt,
    Tone,
    PromptType,
    MAX_ORIGINAL_LENGTH,
    MAX_REWRITTEN_LENGTH,
    DEFAULT_MODEL_NAME,
)


class CamelModel(BaseModel):
    """Base schema exposed on the wire with camelCase keys"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class WordCount(CamelModel):
    """Word counts derived from prompt text"""
    original: int = 0
    rewritten: int = 0


class PromptMetadataIn(CamelModel):
    """Caller-supplied metadata; word counts are never accepted from input"""
    processing_time: Optional[int] = Field(None, ge=0, description="Processing time in milliseconds")
    model: str = Field(DEFAULT_MODEL_NAME, max_length=100)
    api_cost: float = Field(0.0, ge=0.0, description="Estimated API cost")


class PromptMetadata(PromptMetadataIn):
    """Stored metadata"""
    word_count: WordCount = Field(default_factory=WordCount)


class PromptCreate(CamelModel):
    """Schema for creating a history record"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    user_id: str = Field(..., min_length=1, max_length=255)
    original_prompt: str = Field(..., min_length=1, max_length=MAX_ORIGINAL_LENGTH)
    rewritten_prompt: str = Field(..., min_length=1, max_length=MAX_REWRITTEN_LENGTH)
    tone: Tone = Tone.PROFESSIONAL
    prompt_type: PromptType = Field(PromptType.OTHER, alias="type")
    metadata: PromptMetadataIn = Field(default_factory=PromptMetadataIn)


class PromptResponse(CamelModel):
    """Schema for a history record response"""
    id: UUID
    user_id: str
    original_prompt: str
    rewritten_prompt: str
    tone: Tone
    prompt_type: PromptType = Field(..., alias="type")
    is_favorite: bool
    created_at: datetime
    updated_at: Optional[datetime] = None
    metadata: PromptMetadata

    @classmethod
    def from_model(cls, prompt: Prompt) -> "PromptResponse":
        return cls(
            id=prompt.id,
            user_id=prompt.user_id,
            original_prompt=prompt.original_prompt,
            rewritten_prompt=prompt.rewritten_prompt,
            tone=prompt.tone,
            prompt_type=prompt.type,
            is_favorite=bool(prompt.is_favorite),
            created_at=prompt.created_at,
            updated_at=prompt.updated_at,
            metadata=PromptMetadata.model_validate(prompt.metadata_dict),
        )


class PaginationInfo(CamelModel):
    """Page bookkeeping returned alongside list results"""
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int, returned: int) -> "PaginationInfo":
        skip = (page - 1) * limit
        return cls(
            current_page=page,
            total_pages=math.ceil(total / limit) if limit else 0,
            total_items=total,
            items_per_page=limit,
            has_next=skip + returned < total,
            has_prev=page > 1,
        )


class UserStats(CamelModel):
    """Aggregate statistics over one user's history"""
    total_prompts: int = 0
    favorite_prompts: int = 0
    most_used_tone: Optional[Tone] = None
    most_used_type: Optional[PromptType] = None
    average_processing_time: float = 0.0
    total_api_cost: float = 0.0


class RecentActivity(CamelModel):
    """Short view of a recent history record"""
    id: UUID
    prompt_type: PromptType = Field(..., alias="type")
    tone: Tone
    timestamp: datetime


class ToneCount(BaseModel):
    tone: Tone
    count: int


class TypeCount(BaseModel):
    type: PromptType
    count: int


class Popularity(CamelModel):
    """Tone and type usage across all users, most used first"""
    tone_stats: List[ToneCount] = Field(default_factory=list)
    type_stats: List[TypeCount] = Field(default_factory=list)
