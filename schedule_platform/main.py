import time
import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from schedule_platform.config import Settings, get_settings
from schedule_platform.database import Database
from schedule_platform.errors import ScheduleError, ServerError
from schedule_platform.logging import clear_request_context, logger, set_request_context, setup_logging
from schedule_platform.routers import auth, comments, goals, likes, todos
from schedule_platform.schema import ErrorResponse
from schedule_platform.uploads import ImageStore


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(message=message).model_dump())


def register_error_handlers(app: FastAPI) -> None:
    """Render every failure as ``{"success": false, "message": ...}``."""

    @app.exception_handler(ScheduleError)
    async def schedule_error_handler(request: Request, exc: ScheduleError):
        if exc.status_code >= 500:
            logger.error("{} {} failed: {}", request.method, request.url.path, exc.message)
        else:
            logger.warning("{} {} -> {}: {}", request.method, request.url.path, exc.status_code, exc.message)
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if errors:
            first = errors[0]
            location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
            message = f"Invalid {location}: {first.get('msg')}" if location else first.get("msg", "Invalid request")
        else:
            message = "Invalid request"
        logger.warning("{} {} -> 400: {}", request.method, request.url.path, message)
        return _error(400, message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail))


def unhandled_error_response(request: Request, exc: Exception) -> JSONResponse:
    logger.opt(exception=exc).error("Unhandled error on {} {}", request.method, request.url.path)
    error = ServerError(str(exc) or "Internal server error")
    return _error(error.status_code, error.message)


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """Build the API with its process-wide resources.

    Args:
        settings: Configuration; read from the environment when omitted
        database: Pre-built database handle; built from ``settings`` when omitted
    """
    settings = settings or get_settings()
    setup_logging(level=settings.log_level, json_logs=settings.log_json)

    database = database or Database(settings.sqlalchemy_url, pool_size=settings.db_pool_size)
    database.create_all()

    image_store = ImageStore(settings.upload_dir, max_bytes=settings.max_upload_bytes)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        database.dispose()

    app = FastAPI(title="Schedule Platform API", lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database
    app.state.image_store = image_store

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        set_request_context(request_id=request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12])
        started = time.perf_counter()
        try:
            try:
                response = await call_next(request)
            except Exception as exc:
                response = unhandled_error_response(request, exc)
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.info(
                "{} {} {} ({:.1f} ms)",
                request.method,
                request.url.path,
                response.status_code,
                elapsed_ms,
            )
            return response
        finally:
            clear_request_context()

    # Outermost middleware; wraps unhandled-error responses too
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    app.include_router(auth.router)
    app.include_router(todos.router)
    app.include_router(goals.router)
    app.include_router(likes.router)
    app.include_router(comments.router)

    app.mount("/uploads", StaticFiles(directory=str(image_store.upload_dir)), name="uploads")

    @app.get("/")
    async def root():
        return {"message": "Server is running"}

    return app
