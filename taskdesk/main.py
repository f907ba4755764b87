"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from sqlmodel import SQLModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskdesk.api.auth import router as auth_router
from taskdesk.api.tasks import router as tasks_router
from taskdesk.api.users import router as users_router
from taskdesk.config import Settings, get_settings
from taskdesk.db.session import create_db_engine
from taskdesk.logging_setup import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Validate settings and create database tables on startup."""
    # Import models to register them with SQLModel
    from taskdesk.models import Task, User  # noqa: F401

    app.state.settings.validate()
    SQLModel.metadata.create_all(app.state.engine)
    logger.info("Database tables ready")
    yield
    app.state.engine.dispose()


def _format_location(loc: tuple) -> str:
    parts = [str(part) for part in loc if part not in ("body", "query", "path")]
    return ".".join(parts) or "body"


def register_exception_handlers(app: FastAPI) -> None:
    """Render every failure in the ``{success: false, message}`` envelope."""

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = [
            {"field": _format_location(error["loc"]), "message": error["msg"]}
            for error in exc.errors()
        ]
        logger.info("Validation failed on %s: %s", request.url.path, errors)
        return JSONResponse(
            status_code=400,
            content={"success": False, "message": "Validation failed", "errors": errors},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        message = exc.detail
        if exc.status_code == 404 and message == "Not Found":
            message = f"Route {request.url.path} not found."
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": message},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": "An unexpected error occurred."},
        )


def register_frontend(app: FastAPI, frontend_dist: Path) -> None:
    """Serve the built SPA, falling back to index.html for client routes.

    Paths under /api never fall back and keep the JSON 404.
    """
    root = frontend_dist.resolve()
    index_file = root / "index.html"

    @app.api_route(
        "/{full_path:path}",
        methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE"],
        include_in_schema=False,
    )
    def serve_frontend(request: Request, full_path: str):
        if request.method not in ("GET", "HEAD") or full_path == "api" or full_path.startswith("api/"):
            raise StarletteHTTPException(status_code=404)

        candidate = (root / full_path).resolve()
        if full_path and candidate.is_file() and candidate.is_relative_to(root):
            return FileResponse(candidate)
        if not index_file.is_file():
            raise StarletteHTTPException(status_code=404)
        return FileResponse(index_file)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="Taskdesk API",
        description="RESTful API for personal task management",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = create_db_engine(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    @app.get("/api/health", tags=["Health"])
    def health_check() -> dict:
        """Health check endpoint."""
        return {
            "success": True,
            "message": "API is running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    # Register routers
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(tasks_router)

    # Built SPA, registered last so /api routes win
    if settings.FRONTEND_DIST:
        frontend_dist = Path(settings.FRONTEND_DIST)
        if frontend_dist.is_dir():
            register_frontend(app, frontend_dist)
        else:
            logger.warning("FRONTEND_DIST %s is not a directory; not serving the SPA", frontend_dist)

    return app


app = create_app()
