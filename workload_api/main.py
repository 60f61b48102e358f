"""FastAPI application entry point."""

import asyncio
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from workload_api.api import auth, users, workload
from workload_api.config import Settings, get_settings
from workload_api.database import Database
from workload_api.exceptions import AppError

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _fatal_loop_exception(loop: asyncio.AbstractEventLoop, context: dict) -> None:
    """Exit when a task or future failed and nothing retrieved its exception.

    Other loop errors, such as a failing plain callback, go to the default handler.
    """
    failed_future = context.get("task") or context.get("future")
    if failed_future is None or context.get("exception") is None:
        loop.default_exception_handler(context)
        return
    logger.critical(
        f"Unhandled task exception outside request scope: {context.get('message')}",
        exc_info=context.get("exception"),
    )
    logging.shutdown()
    os._exit(1)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    loop = asyncio.get_running_loop()
    previous_handler = loop.get_exception_handler()
    loop.set_exception_handler(_fatal_loop_exception)

    settings = app.state.settings
    if settings.is_development:
        app.state.database.create_all()
    logger.info(f"Starting workload API ({settings.environment})")
    yield
    app.state.database.dispose()
    loop.set_exception_handler(previous_handler)


def _format_validation_errors(exc: RequestValidationError) -> list[dict]:
    errors = []
    for error in exc.errors():
        location, *path = error.get("loc", ()) or ("body",)
        errors.append(
            {
                "location": location,
                "field": ".".join(str(part) for part in path),
                "message": error.get("msg", "Invalid value"),
                "type": error.get("type", "value_error"),
            }
        )
    return errors


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain, validation and unexpected errors to JSON responses."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message},
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "Validation failed", "errors": _format_validation_errors(exc)},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application around an explicit settings and database instance."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Workload Analytics API",
        description="Developer workload tracking with per-project and per-developer statistics",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = Database(settings.database_url)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Register routers
    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(workload.router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "environment": settings.environment}

    return app


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "workload_api.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
