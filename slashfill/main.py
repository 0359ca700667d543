"""FastAPI application entry point.

Main application setup with middleware, routing, and lifecycle management.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from slashfill import __version__
from slashfill.api.fill import router as fill_router
from slashfill.api.schemas import ErrorResponse
from slashfill.core.config import Settings, get_settings
from slashfill.core.factory import ComponentFactory
from slashfill.core.logging_config import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    Validates the completion backend on startup and closes its network
    clients on shutdown.
    """
    factory: ComponentFactory = app.state.factory

    # Startup
    logger.info("Starting SlashFill API...")

    try:
        connectivity = factory.get_connectivity()
        if await connectivity.validate():
            logger.info("Completion backend connected")
        else:
            logger.warning(f"Completion backend not connected: {connectivity.status.value}")
    except ValueError as e:
        logger.warning(f"Completion backend is not configured: {e}")

    yield

    # Shutdown
    logger.info("Shutting down SlashFill API...")
    await factory.aclose()


def create_app(
    settings: Settings | None = None,
    factory: ComponentFactory | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings. If None, loads from environment.
        factory: Optional component factory. If None, builds one from settings.

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="SlashFill",
        description="Fill / blanks in notes with model completions",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.state.settings = settings
    app.state.factory = factory or ComponentFactory(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(fill_router)

    @app.get("/health", tags=["health"])
    async def health_check():
        """Health check endpoint for load balancers and monitoring."""
        try:
            connectivity = app.state.factory.get_connectivity().status.value
        except ValueError:
            connectivity = "unconfigured"
        return {
            "status": "healthy",
            "service": "slashfill-api",
            "version": __version__,
            "connectivity": connectivity,
        }

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request, exc):
        """Handle Pydantic validation errors."""
        logger.warning(f"Validation error: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "detail": "Validation error",
                "errors": exc.errors(),
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request, exc):
        """Handle uncaught exceptions."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(
                detail="Internal server error",
                error_code="INTERNAL_ERROR",
            ).model_dump(),
        )

    logger.info("FastAPI application created successfully")
    return app


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    setup_logging(settings)
    logger.info("Starting uvicorn server on port 8000...")
    uvicorn.run(
        create_app(settings),
        host="0.0.0.0",
        port=8000,
        log_level=settings.log_level.lower(),
    )
