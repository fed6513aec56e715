"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.api import auth
from src.config import get_settings
from src.database import init_db
from src.errors import register_error_handlers
from src.logging_config import configure_logging

settings = get_settings()
configure_logging(settings.log_level)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    if settings.is_development:
        # Migrations own the schema elsewhere
        init_db()
    logger.info(f"Credential service started ({settings.environment})")
    yield


app = FastAPI(
    title="Credential Service",
    description="Account registration, password login and bearer token verification",
    version="0.1.0",
    lifespan=lifespan,
)

register_error_handlers(app)

# Register routers
app.include_router(auth.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "environment": settings.environment}
