# ============================================================================
# REQUEST AGGREGATOR - MAIN APPLICATION
# ============================================================================
# EPOCH: 1 - REQUEST AGGREGATION
# STATUS: Core - FastAPI application entry point
# PURPOSE: Main application wiring transport, scheduler and routes
# CREATED: 19 OCT 2026
# ============================================================================
"""
Request Aggregator Main Application

FastAPI application that:
1. Provides POST /cc/aggregate and POST /cc/proxy
2. Owns the pooled upstream HTTP client for its whole lifetime
3. Renders every failure through the error envelope

Usage:
    uvicorn main:app --host 0.0.0.0 --port 8002
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from __version__ import __version__, BUILD_DATE, EPOCH, CODENAME
from core.config import get_defaults
from infrastructure.http_client import TransportClient, set_transport_client
from orchestrator import TaskExecutor, TaskGraphScheduler
from api import router, set_services, register_exception_handlers

# Health check probes
from health import health_router

# Configure logging using our structured logging system
from core.logging import configure_logging, get_logger

configure_logging(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    json_output=os.environ.get("LOG_FORMAT", "").lower() == "json",
)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Initializes services on startup, cleans up on shutdown.
    """
    logger.info(f"Starting {CODENAME} v{__version__} (Epoch {EPOCH}, Build {BUILD_DATE})")

    defaults = get_defaults()

    transport = TransportClient(defaults.transport)
    await transport.start()
    set_transport_client(transport)

    executor = TaskExecutor(transport, defaults.aggregation)
    scheduler = TaskGraphScheduler(executor, defaults.aggregation)
    set_services(scheduler=scheduler)
    logger.info(
        f"Scheduler ready (forwarded headers: {', '.join(defaults.aggregation.forwarded_headers)})"
    )

    yield

    # Shutdown
    logger.info(f"Shutting down {CODENAME}...")
    set_services(scheduler=None)
    set_transport_client(None)
    await transport.close()
    logger.info(f"{CODENAME} stopped")


# Create FastAPI app
app = FastAPI(
    title=CODENAME,
    description="Dependency-aware aggregation of upstream HTTP calls",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)

register_exception_handlers(app)

# Health probes (no prefix - /livez, /readyz)
app.include_router(health_router)

# Aggregation routes (/cc/aggregate, /cc/proxy)
app.include_router(router)


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": CODENAME,
        "version": __version__,
        "epoch": EPOCH,
        "build_date": BUILD_DATE,
        "status": "running",
        "docs": "/docs",
    }


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "8002"))

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=os.environ.get("RELOAD", "false").lower() == "true",
    )
