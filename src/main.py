"""Citewise API - answer engine optimization scoring service."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import analyses_router, health_router
from config import settings
from db.session import dispose_engine, init_models

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and the history store on startup, release it on shutdown."""
    configure_logging()
    logger.info(f"Starting {settings.app_name}...")
    await init_models()
    yield
    await dispose_engine()
    logger.info(f"Shutting down {settings.app_name}...")


app = FastAPI(
    title="Citewise API",
    description="Scores web pages for citation readiness by AI answer engines.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router, prefix="/api/v1")
app.include_router(analyses_router, prefix="/api/v1")


@app.get("/", include_in_schema=False)
async def root():
    return {
        "service": "Citewise API",
        "docs": "/docs",
        "health": "/api/v1/health",
    }
