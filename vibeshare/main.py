# ============================================================================
# FILE: vibeshare/main.py
# ============================================================================
from datetime import datetime, timezone
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from vibeshare import __version__
from vibeshare.api.v1.router import api_router
from vibeshare.core.exceptions import register_exception_handlers
from vibeshare.core.logging import setup_logging
from vibeshare.core.scheduler import start_scheduler, shutdown_scheduler
from vibeshare.config import settings
import logging
import os

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)

# Create FastAPI app instance
app = FastAPI(
    title=settings.APP_NAME,
    description="Share playlists of songs from any platform, like, save and discover",
    version=__version__
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include API router
app.include_router(api_router, prefix=settings.API_PREFIX)

# Serve uploaded images
os.makedirs(settings.MEDIA_ROOT, exist_ok=True)
app.mount(settings.MEDIA_URL, StaticFiles(directory=settings.MEDIA_ROOT), name="media")

@app.on_event("startup")
async def startup_event():
    """Initialize services on startup"""
    logger.info(f"Starting {settings.APP_NAME}")
    # Create database tables if they do not exist yet
    from vibeshare.db.base import Base
    from vibeshare.db.session import engine
    import vibeshare.db.models  # noqa: F401
    Base.metadata.create_all(bind=engine)
    start_scheduler()

@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown"""
    shutdown_scheduler()
    logger.info(f"Shutting down {settings.APP_NAME}")

@app.get("/health")
async def health_check():
    return {"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat()}
