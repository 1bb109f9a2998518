"""Gateway settings parsed from the environment (and an optional .env file)"""
import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Tuple

from dotenv import find_dotenv, load_dotenv

# Importing the store loads .env before the engine is built
from promptmate_store.database import DATABASE_URL

load_dotenv(find_dotenv(usecwd=True))

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
API_VERSION = "1.0.0"


def _read_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def _read_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


def _read_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _read_list(name: str, default: str) -> Tuple[str, ...]:
    raw = os.getenv(name) or default
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    database_url: str = DATABASE_URL
    ai_provider: str = "gemini"
    gemini_api_key: str = field(default="", repr=False)
    gemini_model: str = "gemini-1.5-flash"
    ai_timeout_seconds: float = 30.0
    frontend_urls: Tuple[str, ...] = ("*",)
    host: str = "0.0.0.0"
    port: int = 3000
    environment: str = "development"
    log_level: str = "INFO"
    rate_limit_enabled: bool = True
    auto_create_tables: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            database_url=os.getenv("DATABASE_URL", DATABASE_URL),
            ai_provider=os.getenv("AI_PROVIDER", "gemini"),
            gemini_api_key=os.getenv("GEMINI_API_KEY", ""),
            gemini_model=os.getenv("GEMINI_MODEL", "gemini-1.5-flash"),
            ai_timeout_seconds=_read_float("AI_TIMEOUT_SECONDS", 30.0),
            frontend_urls=_read_list("FRONTEND_URL", "*"),
            host=os.getenv("GATEWAY_HOST", "0.0.0.0"),
            port=_read_int("GATEWAY_PORT", 3000),
            environment=os.getenv("ENVIRONMENT", "development"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            rate_limit_enabled=_read_bool("RATE_LIMIT_ENABLED", True),
            auto_create_tables=_read_bool("AUTO_CREATE_TABLES", True),
        )

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def as_dict(self) -> dict:
        """Settings safe to log (credentials masked)"""
        return {
            "database_url": _mask_password(self.database_url),
            "ai_provider": self.ai_provider,
            "gemini_api_key": "***" if self.gemini_api_key else "",
            "gemini_model": self.gemini_model,
            "ai_timeout_seconds": self.ai_timeout_seconds,
            "frontend_urls": list(self.frontend_urls),
            "host": self.host,
            "port": self.port,
            "environment": self.environment,
            "rate_limit_enabled": self.rate_limit_enabled,
        }


def _mask_password(url: str) -> str:
    if "@" not in url or "://" not in url:
        return url
    scheme, rest = url.split("://", 1)
    credentials, host = rest.rsplit("@", 1)
    user = credentials.split(":", 1)[0]
    return f"{scheme}://{user}:***@{host}"


@lru_cache()
def get_settings() -> Settings:
    return Settings.from_env()
