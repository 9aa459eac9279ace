"""TaleemHub — dashboard personalization and push notification service.

FastAPI entry point with lifespan management and CORS.
"""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api.router import api_router
from .config import get_config
from .database import close_engine
from .dependencies import get_notification_bridge, get_storage
from .middleware.error_handler import register_error_handlers
from .middleware.request_id import RequestIDMiddleware
from .notifications.events import ActivateEvent, InstallEvent
from .utils.logging import get_logger, setup_logging

config = get_config()
setup_logging(
    debug=config.debug,
    log_dir=config.log_dir,
    log_max_bytes=config.log_max_bytes,
    log_backup_count=config.log_backup_count,
    version=__version__,
)
logger = get_logger("taleemhub.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown."""
    logger.info("taleemhub_starting", host=config.host, port=config.port)

    storage = get_storage()

    # A fresh process replaces any previous bridge instance immediately
    bridge = get_notification_bridge()
    await bridge.dispatch(InstallEvent())
    await bridge.dispatch(ActivateEvent())

    logger.info("taleemhub_started", storage=storage.name, bridge=bridge.state.value)

    yield

    logger.info("taleemhub_shutting_down")
    close_engine()
    logger.info("taleemhub_stopped")


app = FastAPI(
    title="TaleemHub",
    description="Dashboard personalization and push notification delivery",
    version=__version__,
    lifespan=lifespan,
)

register_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in config.cors_origins.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
)

# Added last so it runs first
app.add_middleware(RequestIDMiddleware)

app.include_router(api_router)


@app.get("/")
async def root():
    return {
        "name": config.app_name,
        "version": __version__,
        "status": "operational",
    }


@app.get("/health")
async def health():
    """Detailed health check."""
    return {
        "status": "healthy",
        "storage": get_storage().name,
        "bridge": get_notification_bridge().get_stats(),
    }


def main():
    """Run the TaleemHub server."""
    uvicorn.run(
        "taleemhub.main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )


if __name__ == "__main__":
    main()
