"""FastAPI application entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
import structlog
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from app.api.routes.chat_router import router as chat_router
from app.api.routes.mcp_router import router as mcp_router
from app.api.routes.settings_router import router as settings_router
from app.api.routes.system_router import router as system_router
from app.core.config import settings
from app.core.database import Database
from app.core.exceptions import (
    AppException,
    app_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from app.core.rate_limit import limiter, rate_limit_exceeded_handler
from app.models.chat import Chat  # noqa: F401
from app.models.message import Message  # noqa: F401
from app.models.user_settings import UserSettings  # noqa: F401
from app.schemas.response_schema import ApiResponse, success_response

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Own the database handle and outbound HTTP client for the process."""
    logger.info(
        "Starting application",
        app_name=settings.app.name,
        environment=settings.app.env,
        mcp_enabled=settings.mcp.enabled,
    )
    database = Database(settings.database, echo=settings.app.debug)
    await database.create_all()
    app.state.database = database
    app.state.http_client = httpx.AsyncClient(follow_redirects=True)
    yield
    await app.state.http_client.aclose()
    await database.dispose()
    logger.info("Shutting down application")


app = FastAPI(
    title=settings.app.name,
    description="Multi-model chat console backend: chats, settings and MCP tool bridge",
    version=settings.app.version,
    lifespan=lifespan,
    debug=settings.app.debug,
)

app.state.limiter = limiter

# Exception handlers
app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)  # type: ignore[arg-type]
app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(Exception, unhandled_exception_handler)

# Middleware (registration order: inner→outer, execution order: outer→inner)
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.app.is_development else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


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
app.include_router(chat_router)
app.include_router(settings_router)
app.include_router(mcp_router)
app.include_router(system_router)


def run() -> None:
    """Serve the application with uvicorn using HOST/PORT."""
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.app.is_development,
    )


if __name__ == "__main__":
    run()
