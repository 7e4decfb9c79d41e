"""FastAPI application factory and main entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

import config
import logging_config
from api import router as api_router
from api.cors import PermissiveCORSMiddleware
from db import close_db, create_engine, create_session_factory, init_db


async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException):
    """Render 405s in the waitlist response shape; defer everything else to FastAPI."""
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return JSONResponse(
            status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
            content={"success": False, "message": "Method not allowed"},
            headers=exc.headers,
        )
    return await http_exception_handler(request, exc)


def create_app(settings: config.Settings | None = None) -> FastAPI:
    """
    Build the FastAPI app for the given settings.

    The engine and session factory are created here and kept on
    ``app.state`` together with the settings, so handlers never read
    process-wide configuration.
    """
    if settings is None:
        settings = config.settings
    engine = create_engine(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Lifespan context manager for startup and shutdown events.
        """
        # Startup
        if settings.DB_CREATE_ALL:
            await init_db(engine)
        yield
        # Shutdown
        await close_db(engine)

    app = FastAPI(
        title="Waitlist Backend",
        description="Waitlist signup API",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    # Configure CORS
    app.add_middleware(
        PermissiveCORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
    )

    app.add_exception_handler(StarletteHTTPException, method_not_allowed_handler)

    # Include API router
    app.include_router(api_router.api_router, prefix=settings.API_PREFIX)

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "message": "Waitlist Backend API",
            "version": "0.1.0",
        }

    return app


# Setup logging
logging_config.setup_logging(config.settings.LOG_LEVEL)

# Create FastAPI app
app = create_app()
