"""FastAPI application entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.history_router import router as history_router
from app.api.v1.saved_router import router as saved_router
from app.core.chat_store import close_chat_store, init_chat_store
from app.core.config import settings
from app.core.exceptions import (
    AppException,
    app_exception_handler,
    validation_exception_handler,
)
from app.core.redis import close_redis, get_redis, init_redis
from app.core.storage import RedisStorage
from app.schemas.response_schema import ApiResponse, success_response

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown events."""
    logger.info(
        "Starting application",
        app_name=settings.app.name,
        environment=settings.app.env,
        bind=settings.server.bind,
    )
    await init_redis()
    await init_chat_store(RedisStorage(get_redis()))
    yield
    await close_chat_store()
    await close_redis()
    logger.info("Shutting down application")


app = FastAPI(
    title=settings.app.name,
    description="Browse, search, save and delete a personal history of Q&A chats",
    version=settings.app.version,
    lifespan=lifespan,
    debug=settings.app.debug,
    docs_url="/docs" if settings.app.docs_enabled else None,
    redoc_url="/redoc" if settings.app.docs_enabled else None,
)

# Exception handlers
app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.app.is_development else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", response_model=ApiResponse[dict])
async def health_check() -> dict:
    """Health check endpoint."""
    return success_response({"status": "healthy"})


@app.get("/", response_model=ApiResponse[dict])
async def root() -> dict:
    """Root endpoint."""
    return success_response(
        {
            "app": settings.app.name,
            "version": settings.app.version,
            "docs": "/docs",
        }
    )


# Register routers
app.include_router(history_router)
app.include_router(saved_router)
