"""
FastAPI Application Entry Point
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from . import __version__
from .api import api_router
from .config import get_settings
from .dependencies import cleanup, get_video_poller
from .exceptions import setup_exception_handlers

settings = get_settings()
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
# httpx logs every request URL at INFO
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Resume an in-flight video job on startup, stop polling on shutdown"""
    logger.info("Starting Promo Studio API...")
    logger.info(f"Debug mode: {settings.debug}")
    logger.info(f"State file: {settings.state_file}")

    if not settings.gemini_api_key:
        logger.warning("GEMINI_API_KEY not configured! Generation requests will fail.")
    else:
        state = await get_video_poller().resume()
        logger.info(f"Video slot on startup: {state.status.value}")

    yield

    logger.info("Shutting down Promo Studio API...")
    await cleanup()
    logger.info("Stopped video polling and closed Gemini client")


app = FastAPI(
    title="Promo Studio API",
    description="Promotional content generation for musicians and writers",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_exception_handlers(app)

app.include_router(api_router)

# Finished videos, addressed by the locators the media store hands out
app.mount("/media", StaticFiles(directory=str(settings.media_dir)), name="media")


@app.get("/")
async def root():
    return {
        "name": "Promo Studio API",
        "version": __version__,
        "docs": "/docs",
        "health": "/api/health",
    }
