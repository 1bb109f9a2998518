"""FastAPI Application for the PromptMate backend"""
import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from promptmate_ai import RewriteClient, get_rewrite_client
from promptmate_guard import RateLimitMiddleware, SecurityHeadersMiddleware
from promptmate_store.database import init_db, close_db

from .config import Settings, get_settings, LOG_FORMAT, API_VERSION
from .errors import register_exception_handlers
from .routes import root_router, router

logger = logging.getLogger(__name__)


def build_ai_client(settings: Settings) -> RewriteClient:
    """Rewrite client for the configured provider"""
    if settings.ai_provider == "mock":
        return get_rewrite_client("mock")
    return get_rewrite_client(
        settings.ai_provider,
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        timeout_s=settings.ai_timeout_seconds,
    )


def create_app(settings: Optional[Settings] = None, ai_client: Optional[RewriteClient] = None) -> FastAPI:
    """
    Build the application

    Args:
        settings: Defaults to settings read from the environment
        ai_client: Rewrite client to inject; built from settings when omitted
    """
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.auto_create_tables:
            await init_db()
        logger.info(f"PromptMate backend started ({settings.environment})")
        yield
        await app.state.ai_client.aclose()
        await close_db()
        logger.info("PromptMate backend stopped")

    app = FastAPI(
        title="PromptMate Backend",
        version=API_VERSION,
        description="Prompt rewriting with AI, plus per-user history, favorites and statistics",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.ai_client = ai_client or build_ai_client(settings)
    app.state.started_at = time.monotonic()

    origins = list(settings.frontend_urls) or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
    )

    if settings.rate_limit_enabled:
        app.middleware("http")(RateLimitMiddleware())
        logger.info("Rate limiting enabled")

    # Wraps the rate limiter, 429 responses included
    app.middleware("http")(SecurityHeadersMiddleware())

    register_exception_handlers(app, debug=settings.is_development)

    app.include_router(root_router)
    app.include_router(router, prefix="/api")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)
