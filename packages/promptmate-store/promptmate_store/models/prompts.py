"""Prompt history models"""
from sqlalchemy import Column, String, Text, DateTime, Integer, Float, Boolean, Index, Uuid, Enum as SQLEnum
import uuid
from datetime import datetime, timezone
from enum import Enum

from ..database import Base

MAX_ORIGINAL_LENGTH = 5000
MAX_REWRITTEN_LENGTH = 10000
DEFAULT_MODEL_NAME = "gemini-pro"


class Tone(str, Enum):
    """Rewrite tone enumeration"""
    FORMAL = "formal"
    CASUAL = "casual"
    FRIENDLY = "friendly"
    PROFESSIONAL = "professional"
    CREATIVE = "creative"
    CONCISE = "concise"

    @classmethod
    def values(cls) -> list:
        return [member.value for member in cls]


class PromptType(str, Enum):
    """Rewrite content type enumeration"""
    EMAIL = "email"
    MESSAGE = "message"
    EXPLANATION = "explanation"
    SUMMARY = "summary"
    PROPOSAL = "proposal"
    REPORT = "report"
    OTHER = "other"

    @classmethod
    def values(cls) -> list:
        return [member.value for member in cls]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def count_words(text: str) -> int:
    """Number of whitespace-separated words in text"""
    return len(text.split()) if text else 0


class Prompt(Base):
    """One persisted rewrite (original text, rewritten text and metadata)"""
    __tablename__ = "prompts"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(String(255), nullable=False, index=True)
    original_prompt = Column(Text, nullable=False)
    rewritten_prompt = Column(Text, nullable=False)
    tone = Column(
        SQLEnum(Tone, name="prompt_tone", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=Tone.PROFESSIONAL,
    )
    type = Column(
        SQLEnum(PromptType, name="prompt_type", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=PromptType.OTHER,
    )
    is_favorite = Column(Boolean, nullable=False, default=False, index=True)

    # Metadata
    word_count_original = Column(Integer, nullable=False, default=0)
    word_count_rewritten = Column(Integer, nullable=False, default=0)
    processing_time = Column(Integer)  # milliseconds
    model = Column(String(100), default=DEFAULT_MODEL_NAME)
    api_cost = Column(Float, nullable=False, default=0.0)

    # Timestamps
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        Index('idx_prompts_user_created', 'user_id', 'created_at'),
        Index('idx_prompts_user_favorite', 'user_id', 'is_favorite', 'created_at'),
        Index('idx_prompts_user_type', 'user_id', 'type'),
        Index('idx_prompts_user_tone', 'user_id', 'tone'),
    )

    def refresh_word_counts(self):
        """Recompute word counts from the current prompt texts"""
        self.word_count_original = count_words(self.original_prompt)
        self.word_count_rewritten = count_words(self.rewritten_prompt)

    @property
    def metadata_dict(self) -> dict:
        return {
            "wordCount": {
                "original": self.word_count_original or 0,
                "rewritten": self.word_count_rewritten or 0,
            },
            "processingTime": self.processing_time,
            "model": self.model or DEFAULT_MODEL_NAME,
            "apiCost": self.api_cost or 0.0,
        }

    def __repr__(self):
        return f"<Prompt id={self.id} user_id={self.user_id!r} tone={self.tone} type={self.type}>"
