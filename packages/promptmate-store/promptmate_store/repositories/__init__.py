"""Repository modules for database operations"""
from .prompt_repo import PromptRepository, InvalidQueryError, SORTABLE_FIELDS

__all__ = [
    "PromptRepository",
    "InvalidQueryError",
    "SORTABLE_FIELDS",
]
