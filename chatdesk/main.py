"""FastAPI main application."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from .config import settings
from .container import Container, build_container
from .utils.logger import init_app_logger
from .api import deps, websocket
from .api.v1 import accounts, conversations, messages


# Initialize logger
logger = init_app_logger(settings)

# Global service container
container_instance: Container = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.

    Args:
        app: FastAPI application instance
    """
    # Startup
    logger.info("=" * 70)
    logger.info("Starting Chatdesk...")
    logger.info("=" * 70)

    logger.info("Server Configuration:")
    logger.info(f"  Host: {settings.host}")
    logger.info(f"  Port: {settings.port}")
    logger.info(f"  Debug: {settings.debug}")
    logger.info(f"  Log Level: {settings.log_level}")
    logger.info(f"  Log File: {settings.log_file}")

    logger.info("Conversation Configuration:")
    logger.info(f"  Database: {settings.database_path}")
    logger.info(f"  Page Size: {settings.conversations_per_page}")
    logger.info(f"  Assignment Retries: {settings.assignment_max_retries}")
    if settings.mail_enabled():
        logger.info(f"  SMTP: {settings.smtp_address}:{settings.smtp_port}")
    else:
        logger.info("  SMTP: Not set, assignment mails disabled")

    global container_instance
    container_instance = build_container(settings)
    deps.container = container_instance

    logger.info(f"Chatdesk started at http://{settings.host}:{settings.port}")

    yield

    # Shutdown
    logger.info("Shutting down Chatdesk...")
    if container_instance:
        container_instance.shutdown()
    deps.container = None
    logger.info("Chatdesk shut down successfully")


# Create FastAPI application
app = FastAPI(
    title="Chatdesk",
    description="Conversation lifecycle and assignment engine",
    version="1.0.0",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(accounts.router)
app.include_router(conversations.router)
app.include_router(messages.router)
app.include_router(websocket.router)


@app.get("/health")
async def health():
    """
    Simple health check endpoint.

    Returns:
        Health status
    """
    return {"status": "healthy", "version": "1.0.0"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "chatdesk.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
