"""FastAPI main application."""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from .api.v1 import actions, telegram
from .clients.telegram import TelegramTransport
from .config import settings
from .db import DatabaseConnection, DuckDBStore
from .services.orchestrator import build_orchestrator
from .utils.logger import init_app_logger


# Initialize logger
logger = init_app_logger(settings)


def _mask(secret: str) -> str:
    if not secret:
        return "Not set"
    return secret[:8] + "..." + secret[-4:] if len(secret) > 12 else "***"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.

    Args:
        app: FastAPI application instance
    """
    # Startup
    logger.info("=" * 70)
    logger.info("Starting Front Desk Agent...")
    logger.info("=" * 70)

    logger.info("")
    logger.info("📡 Server Configuration:")
    logger.info(f"  Host: {settings.host}")
    logger.info(f"  Port: {settings.port}")
    logger.info(f"  Debug: {settings.debug}")
    logger.info(f"  Log Level: {settings.log_level}")
    logger.info(f"  Log File: {settings.log_file}")
    logger.info(f"  Database: {settings.database_path}")

    logger.info("")
    logger.info("🤖 Completion Provider:")
    logger.info(f"  Model: {settings.perplexity_model}")
    logger.info(f"  API Base: {settings.perplexity_api_base}")
    logger.info(f"  API Key: {_mask(settings.perplexity_api_key)}")

    logger.info("")
    logger.info("⚙️  Quotas:")
    logger.info(f"  Actions: {settings.action_minute_limit}/min, {settings.action_daily_limit}/day")
    logger.info(f"  Completions: {settings.llm_daily_limit}/day")
    logger.info(f"  Telegram reply mode: {settings.telegram_reply_mode}")

    missing = settings.missing_required()
    if missing:
        logger.error(f"⛔ Critical settings missing: {', '.join(missing)}")

    db = DatabaseConnection(settings.database_path)
    store = DuckDBStore(db)
    http_client = httpx.AsyncClient()
    orchestrator = build_orchestrator(settings, store, http_client)

    # Set pipeline in API modules
    telegram.orchestrator = orchestrator
    telegram.store = store
    telegram.transport = TelegramTransport(settings.telegram_api_base, http_client=http_client)
    telegram.reply_mode = settings.telegram_reply_mode
    actions.registry = orchestrator.registry

    logger.info("")
    logger.info("=" * 70)
    logger.info("✅ Front Desk Agent started successfully!")
    logger.info(f"📍 Webhook: http://{settings.host}:{settings.port}/api/v1/telegram/{{project_id}}")
    logger.info("=" * 70)

    yield

    # Shutdown
    logger.info("Shutting down Front Desk Agent...")
    await http_client.aclose()
    db.close()
    logger.info("✅ Front Desk Agent shut down successfully")


# Create FastAPI application
app = FastAPI(
    title="Front Desk Agent",
    description="Conversational front desk for local businesses over Telegram",
    version="1.0.0",
    lifespan=lifespan
)

# Include API routers
app.include_router(telegram.router)
app.include_router(actions.router)


@app.get("/health")
async def health():
    """
    Simple health check endpoint.

    Returns:
        Health status
    """
    return {
        "status": "healthy",
        "service": "Front Desk Agent",
        "version": "1.0.0"
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "frontdesk.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
