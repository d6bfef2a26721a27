"""
backend/app/main.py

Purpose:
    FastAPI application bootstrap: logging, middleware and router wiring,
    and provider client shutdown.

Dependencies:
    - app.routers.sports
    - app.providers.sports_provider
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.middleware.logging import StructuredLoggingMiddleware, setup_logging
from app.providers.sports_provider import sports_provider

logger = logging.getLogger("oddsfeed")


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("Sports provider base URL: %s", settings.SPORTS_GAME_PROVIDER_BASE_URL)

    yield

    await sports_provider.aclose()
    logger.info("Sports provider client closed")


app = FastAPI(
    title="Oddsfeed",
    description="Cache-backed sports odds views for the betting front-end",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["Content-Type"],
)

# Structured logging
app.add_middleware(StructuredLoggingMiddleware)

# Routers
from app.routers.sports import router as sports_router

app.include_router(sports_router)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Return clean validation errors without leaking internal field paths."""
    errors = []
    for err in exc.errors():
        loc = err.get("loc", ())
        # Strip the "query" / "path" prefix for cleaner messages
        field = ".".join(str(l) for l in loc[1:]) if len(loc) > 1 else str(loc[-1]) if loc else "unknown"
        errors.append({"field": field, "message": err.get("msg", "Invalid value.")})
    return JSONResponse(status_code=422, content={"detail": "Validation error.", "errors": errors})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Catch-all: log the real error, return a safe generic message."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "An internal error occurred."})


@app.get("/health")
async def health():
    return {
        "status": "healthy",
        "sports_provider": {"base_url": settings.SPORTS_GAME_PROVIDER_BASE_URL},
    }
