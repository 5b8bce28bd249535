"""FastAPI main application."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import Optional

from .config import settings
from .adapters import create_adapter
from .db import DatabaseConnection
from .services import ChatService
from .utils.logger import init_app_logger
from .api.v1 import chat, conversations, dependencies


# Initialize logger
logger = init_app_logger(settings)

# Global database connection
db_conn: Optional[DatabaseConnection] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.

    Args:
        app: FastAPI application instance
    """
    # Startup
    logger.info("=" * 70)
    logger.info("Starting Sales Assistant...")
    logger.info("=" * 70)

    logger.info(f"  Host: {settings.host}")
    logger.info(f"  Port: {settings.port}")
    logger.info(f"  Debug: {settings.debug}")
    logger.info(f"  Log Level: {settings.log_level}")
    logger.info(f"  Database: {settings.database_path}")
    logger.info(f"  Adapter: {settings.adapter} (timeout {settings.adapter_timeout}s)")
    if settings.adapter == "openai":
        logger.info(f"  Model: {settings.openai_model}")
        if settings.openai_api_key:
            key = settings.openai_api_key
            masked_key = key[:8] + "..." + key[-4:] if len(key) > 12 else "***"
            logger.info(f"  API Key (from .env): {masked_key}")
        else:
            logger.info("  API Key (from .env): Not set, falling back to OPENAI_API_KEY")

    global db_conn
    db_conn = DatabaseConnection(settings.database_path)
    adapter = create_adapter(settings)

    # Set chat service in API modules
    dependencies.chat_service = ChatService(db_conn, adapter, settings)

    logger.info(f"Sales Assistant started at http://{settings.host}:{settings.port}")

    yield

    # Shutdown
    logger.info("Shutting down Sales Assistant...")
    dependencies.chat_service = None
    if db_conn:
        db_conn.close()
        db_conn = None


# Create FastAPI application
app = FastAPI(
    title="Sales Assistant",
    description="Sales chat assistant with running purchase-intent synthesis",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(chat.router)
app.include_router(conversations.router)


@app.get("/health")
async def health():
    """
    Simple health check endpoint.

    Returns:
        Health status
    """
    return {
        "status": "healthy",
        "service": "Sales Assistant",
        "version": "1.0.0"
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "sales_assistant.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
