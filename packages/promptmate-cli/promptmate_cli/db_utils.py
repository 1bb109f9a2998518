"""Database utilities for CLI"""
from pathlib import Path
from typing import Any, Dict

import promptmate_store


async def init_database():
    """Initialize database (create tables)"""
    from promptmate_store.database import init_db
    await init_db()


async def drop_all_tables():
    """Drop all tables (destructive)"""
    from promptmate_store.database import drop_db
    await drop_db()


async def get_database_stats() -> Dict[str, Any]:
    """Record counts and tone/type popularity straight from the store"""
    from sqlalchemy import select, func
    from promptmate_store.database import AsyncSessionLocal
    from promptmate_store.models import Prompt
    from promptmate_store.repositories import PromptRepository

    async with AsyncSessionLocal() as session:
        repo = PromptRepository(session)

        users_result = await session.execute(select(func.count(func.distinct(Prompt.user_id))))
        favorites_result = await session.execute(
            select(func.count(Prompt.id)).where(Prompt.is_favorite.is_(True))
        )
        popular = await repo.get_popular_tones_and_types()

        return {
            "prompts": await repo.count_prompts(),
            "users": users_result.scalar() or 0,
            "favorites": favorites_result.scalar() or 0,
            "tones": popular["tone_stats"],
            "types": popular["type_stats"],
        }


def alembic_ini_path() -> Path:
    """alembic.ini shipped inside the promptmate_store package"""
    return Path(promptmate_store.__file__).parent / "alembic.ini"


def run_alembic_command(command: str, *args):
    """Run alembic command"""
    from alembic.config import Config
    from alembic import command as alembic_command

    alembic_ini = alembic_ini_path()
    if not alembic_ini.exists():
        raise FileNotFoundError(f"alembic.ini not found at {alembic_ini}")

    alembic_cfg = Config(str(alembic_ini))

    if command == "upgrade":
        alembic_command.upgrade(alembic_cfg, args[0] if args else "head")
    elif command == "downgrade":
        alembic_command.downgrade(alembic_cfg, args[0] if args else "-1")
    elif command == "current":
        alembic_command.current(alembic_cfg)
    elif command == "history":
        alembic_command.history(alembic_cfg)
    else:
        raise ValueError(f"Unknown alembic command: {command}")
