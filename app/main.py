"""
FastAPI application for the LinkedIn connector.

This module wires dependencies and configures the application.
Handshake logic is in app/core, LinkedIn specifics in app/integrations/linkedin,
HTTP transport in app/infrastructure.
"""

import logging
import os
from contextlib import asynccontextmanager
from datetime import UTC, datetime

# Configure logging FIRST, before other local imports
from app.logging_config import setup_global_logging

setup_global_logging()

# Now import other modules (they will use the configured logging)
from fastapi import FastAPI  # noqa: E402
from starlette.middleware.sessions import SessionMiddleware  # noqa: E402

from app.integrations.linkedin import router as linkedin_router  # noqa: E402
from app.oauth import router as oauth_router  # noqa: E402
from app.oauth.config import get_request_executor  # noqa: E402

logger = logging.getLogger(__name__)


# ============================================================================
# Application Lifecycle
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events using modern FastAPI pattern.
    """
    # Startup: nothing to do (dependencies are lazy-loaded)
    logger.info("Application starting up...")
    yield
    logger.info("Shutting down application...")
    try:
        await get_request_executor().aclose()
    except Exception as e:
        logger.warning(f"Error closing request executor during shutdown: {e}")


app = FastAPI(
    title="LinkedIn Connector",
    description="Connects a LinkedIn account via OAuth2 and calls the LinkedIn API",
    version="1.0.0",
    lifespan=lifespan,
)

# Session middleware keeps the pending OAuth2 handshake between redirects
SESSION_SECRET_KEY = os.getenv("SESSION_SECRET_KEY")
if not SESSION_SECRET_KEY:
    raise ValueError("SESSION_SECRET_KEY is not set in the environment.")
app.add_middleware(SessionMiddleware, secret_key=SESSION_SECRET_KEY)


# ============================================================================
# Health Check Endpoints
# ============================================================================


@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "linkedin-connector",
        "timestamp": datetime.now(UTC).isoformat(),
    }


@app.get("/health")
async def health():
    """Health check endpoint for Cloud Run."""
    return {"status": "healthy"}


# ============================================================================
# Include Routers
# ============================================================================

app.include_router(oauth_router.router)
app.include_router(linkedin_router.router)


# ============================================================================
# Main Entry Point
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", 8080))
    uvicorn.run(app, host="0.0.0.0", port=port)
