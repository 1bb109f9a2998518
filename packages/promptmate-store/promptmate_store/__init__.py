"""PromptMate Store - Prompt history models, schemas and repositories"""
__version__ = "0.1.0"

from .database import (
    Base,
    get_db,
    init_db,
    drop_db,
    close_db,
    build_engine,
    build_session_factory,
    async_engine,
    AsyncSessionLocal,
)

from .models import (
    Prompt,
    Tone,
    PromptType,
)

from .repositories import (
    PromptRepository,
    InvalidQueryError,
)

from . import schemas

__all__ = [
    # Database
    "Base",
    "get_db",
    "init_db",
    "drop_db",
    "close_db",
    "build_engine",
    "build_session_factory",
    "async_engine",
    "AsyncSessionLocal",
    # Models
    "Prompt",
    "Tone",
    "PromptType",
    # Repositories
    "PromptRepository",
    "InvalidQueryError",
    # Schemas
    "schemas",
]
