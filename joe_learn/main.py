"""
FastAPI application entry point.

This module creates and configures the FastAPI application.
Using an application factory pattern (create_app function) because:
- Easier to test with different configurations
- Explicit about initialization order
- Tests can pass in AppServices built from in-memory fakes

For local development:
    uvicorn joe_learn.main:app --reload

For production:
    joe-learn
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.dependencies import AppServices, build_services
from .api.routes import assessments, health, signatures, uploads, videos
from .config.credentials import (
    ConfigurationError,
    CredentialsNotFoundError,
    InvalidCredentialsError,
    StartupError,
)
from .config.settings import Settings, get_settings

# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = (
    "An internal server error occurred. Please check the server logs for details."
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Builds the external clients on startup unless create_app was given
    them already. A StartupError here aborts startup before any request
    is accepted.
    """
    if app.state.services is None:
        app.state.services = build_services(app.state.settings)

    logger.info("Joe Learn API starting", extra={"version": app.state.settings.api_version})

    yield

    logger.info("Joe Learn API shutting down")


def create_app(
    settings: Optional[Settings] = None,
    services: Optional[AppServices] = None,
) -> FastAPI:
    """
    Application factory.

    Creates and configures the FastAPI application. Building the app
    never touches credentials; that happens in ``lifespan`` (or before
    calling this, when ``services`` is passed in).
    """
    settings = settings or (services.settings if services else get_settings())

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description="""
        Upload broker for Joe Learn videos and assessments.

        ## Workflow

        1. **Sign**: `POST /api/generate-signature` with the upload fields
        2. **Upload**: send the file straight to Cloudinary with that signature
        3. **Record**: `POST /api/upload-video` or `POST /api/upload-assessment`
           with the returned `url` and `public_id`
        """,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.services = services

    # CORS middleware
    # Any origin by default; credentials only make sense with explicit origins
    origins = settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log every incoming request."""
        logger.info(f"Received {request.method} request for {request.url.path}")
        return await call_next(request)

    # Include routers
    for module in (health, signatures, videos, assessments, uploads):
        app.include_router(module.router, prefix="/api", tags=["API"])

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Expected 4xx/5xx responses, reshaped to ``{"message": ...}``."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Malformed bodies (not JSON, wrong types) are client errors."""
        logger.warning(
            "Rejected malformed request",
            extra={"path": request.url.path, "errors": exc.errors()}
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": "Invalid request payload."},
        )

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catch-all exception handler.

        Every store or storage failure ends up here. We log the full
        error server-side but return a generic message.
        """
        logger.error(
            "Unhandled exception",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": str(exc),
            },
            exc_info=exc,
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": INTERNAL_ERROR_MESSAGE},
        )

    return app


# Create the application instance
# This is what uvicorn imports
app = create_app()


def run() -> None:
    """
    Process entry point.

    Loads credentials before binding the port so a bad key file exits
    with status 1 instead of a half-started server.
    """
    import uvicorn

    settings = get_settings()

    try:
        logging.getLogger().setLevel(settings.log_level.upper())
        services = build_services(settings)
    except (CredentialsNotFoundError, InvalidCredentialsError) as e:
        logger.critical("FATAL ERROR: Could not initialize Firebase Admin SDK. %s", e)
        sys.exit(1)
    except ConfigurationError as e:
        logger.critical("FATAL ERROR: %s", e)
        sys.exit(1)
    except StartupError as e:
        logger.critical("FATAL ERROR: Could not start the server. %s", e)
        sys.exit(1)
    except Exception as e:
        logger.critical(
            "FATAL ERROR: An unexpected error occurred during startup: %s", e, exc_info=e
        )
        sys.exit(1)

    logger.info(f"Server is running on http://localhost:{settings.port}")

    uvicorn.run(
        create_app(settings, services),
        host="0.0.0.0",
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


# For debugging/development
if __name__ == "__main__":
    run()
