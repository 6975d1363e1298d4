"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dispatch import __version__
from dispatch.api.v1 import dispatch
from dispatch.core.config import settings
from dispatch.core.logging import get_logger, setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle hooks."""
    setup_logging(settings.LOG_LEVEL, json_logs=settings.LOG_JSON)
    logger = get_logger("startup")
    logger.info(
        "Application starting",
        env=settings.APP_ENV,
        max_processing_time_ms=settings.MAX_PROCESSING_TIME_MS,
        batch_size=settings.NESTED_ZIP_BATCH_SIZE,
    )
    yield
    logger.info("Application shutting down")


app = FastAPI(
    title="Dispatch File Processor",
    description="Extracts POD codes and consumption curves from distributor dispatch files",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

API_PREFIX = "/api/v1"
app.include_router(dispatch.router, prefix=API_PREFIX)


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Public health-check endpoint."""
    return {"status": "ok", "env": settings.APP_ENV}
