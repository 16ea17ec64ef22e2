"""FastAPI application entry point.

Main application setup with middleware, routing, and lifecycle management.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sectionforge import __version__
from sectionforge.api.schemas import ErrorResponse
from sectionforge.api.sections import router as sections_router
from sectionforge.core.config import Settings, get_settings
from sectionforge.core.exceptions import (
    AllProvidersFailedError,
    ConfigurationError,
    NoMatchError,
)
from sectionforge.core.factory import ComponentFactory
from sectionforge.core.logging_config import setup_logging

# Initialize logging before importing other modules
setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    Handles startup and shutdown events for proper resource management.
    """
    settings: Settings = app.state.settings

    # Startup
    logger.info("Starting SectionForge API...")
    logger.info(f"Section catalog directory: {settings.sections_dir}")

    yield

    # Shutdown
    logger.info("Shutting down SectionForge API...")

    # Flush write-through persistence
    try:
        await app.state.factory.get_section_service().drain()
        logger.info("Pending section writes flushed")
    except Exception as e:
        logger.error(f"Error flushing pending section writes: {e}", exc_info=True)


def _error(status_code: int, detail: str, error_code: str, extra: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(detail=detail, error_code=error_code, extra=extra).model_dump(),
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings. If None, loads from environment.

    Returns:
        Configured FastAPI application instance.
    """
    try:
        settings = settings or get_settings()

        app = FastAPI(
            title="SectionForge",
            description="Section catalog matching and multi-provider section generation",
            version=__version__,
            lifespan=lifespan,
            docs_url="/docs",
            redoc_url="/redoc",
        )

        # Store settings and strategies in app state
        app.state.settings = settings
        app.state.factory = ComponentFactory(settings)

        # CORS middleware
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        app.include_router(sections_router)
        logger.info("Registered sections router")

        # Health check endpoint
        @app.get("/health", tags=["health"])
        async def health_check():
            """Health check endpoint for load balancers and monitoring."""
            return {
                "status": "healthy",
                "service": "sectionforge-api",
                "version": __version__,
            }

        # Exception handlers
        @app.exception_handler(NoMatchError)
        async def no_match_handler(request: Request, exc: NoMatchError):
            logger.info(f"No match: {exc}")
            extra = {"attempts": [{"provider": a.provider, "reason": a.reason} for a in exc.attempts]}
            return _error(status.HTTP_404_NOT_FOUND, str(exc), "NO_MATCH", extra if exc.attempts else None)

        @app.exception_handler(ConfigurationError)
        async def configuration_handler(request: Request, exc: ConfigurationError):
            logger.error(f"Generation not configured: {exc}")
            return _error(status.HTTP_503_SERVICE_UNAVAILABLE, str(exc), "PROVIDER_NOT_CONFIGURED")

        @app.exception_handler(AllProvidersFailedError)
        async def providers_failed_handler(request: Request, exc: AllProvidersFailedError):
            logger.error(f"Generation failed: {exc}")
            return _error(
                status.HTTP_502_BAD_GATEWAY,
                str(exc),
                "ALL_PROVIDERS_FAILED",
                {"attempts": [{"provider": a.provider, "reason": a.reason} for a in exc.attempts]},
            )

        @app.exception_handler(RequestValidationError)
        async def validation_exception_handler(request: Request, exc: RequestValidationError):
            """Handle Pydantic validation errors."""
            logger.warning(f"Validation error: {exc.errors()}")
            errors = [{"loc": list(e["loc"]), "msg": e["msg"], "type": e["type"]} for e in exc.errors()]
            return JSONResponse(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                content={
                    "detail": "Validation error",
                    "errors": errors,
                },
            )

        @app.exception_handler(Exception)
        async def general_exception_handler(request: Request, exc: Exception):
            """Handle uncaught exceptions."""
            logger.error(f"Unhandled exception: {exc}", exc_info=True)
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", "INTERNAL_ERROR")

        logger.info("FastAPI application created successfully")
        return app

    except Exception as e:
        logger.error(f"Failed to create FastAPI app: {e}", exc_info=True)
        raise


# Create the app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    logger.info("Starting uvicorn server on port 8000...")
    uvicorn.run(
        "sectionforge.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=settings.log_level.lower(),
    )
