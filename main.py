"""
FastAPI Application Entry Point

Integrates:
  - Messenger webhook (verification + events)
  - Delivery worker lifecycle
  - Health checks
  - Middleware for logging & error handling
  - Optional static files

Run: uvicorn main:app --reload --host 0.0.0.0 --port 3000
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from config import Config
from infra.bootstrap import bootstrap_infrastructure
from transport.messenger.webhook import router as messenger_router

# Setup logging
logging.basicConfig(
    level=getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan: startup and shutdown handlers.
    """
    # Startup
    infra = bootstrap_infrastructure()
    logger.info("=" * 60)
    logger.info("Messenger relay starting up...")
    logger.info(f"Environment: {Config.ENVIRONMENT}")
    logger.info(f"Infrastructure: {infra!r}")
    Config.validate()
    logger.info("=" * 60)

    await infra.get_sequencer().start()

    yield

    # Shutdown
    logger.info("Messenger relay shutting down...")
    await infra.get_sequencer().stop()


# Create FastAPI app
app = FastAPI(
    title="Messenger Relay",
    description="Webhook relay between Messenger and third-party content APIs",
    version="1.0.0",
    lifespan=lifespan,
)


# Middleware for logging
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests."""
    logger.debug(f"{request.method} {request.url.path}")
    try:
        response = await call_next(request)
        return response
    except Exception as e:
        logger.error(f"Request error: {str(e)}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )


# Include routers
app.include_router(messenger_router)


# Health check endpoints
@app.get("/health/live")
async def health_live():
    """Live health check (Kubernetes liveness probe)."""
    return {"status": "alive"}


@app.get("/health/ready")
async def health_ready():
    """Readiness health check (Kubernetes readiness probe)."""
    missing = Config.missing()
    if missing:
        return {"status": "not_ready", "reason": f"missing {', '.join(missing)}"}
    return {"status": "ready"}


@app.get("/config/info")
async def config_info():
    """Get non-sensitive configuration info."""
    infra = bootstrap_infrastructure()
    return {
        "environment": Config.ENVIRONMENT,
        "port": Config.PORT,
        "graph_api_version": Config.GRAPH_API_VERSION,
        "capability_backend": infra.config.capability_backend,
        "delivery_interval_s": infra.config.delivery_interval_s,
        "max_message_chars": infra.config.max_message_chars,
        "session_capacity": infra.config.session_capacity,
    }


# Static files last so they never shadow the API routes
if Path(Config.STATIC_DIR).is_dir():
    app.mount("/", StaticFiles(directory=Config.STATIC_DIR, html=True), name="static")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=Config.PORT,
    )
