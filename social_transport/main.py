from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from social_transport import __version__
from social_transport.api.router import router as api_router
from social_transport.config import Settings
from social_transport.container import Services
from social_transport.errors import AppError, InternalError, PartialFailureError
from social_transport.middleware import RequestLoggingMiddleware
from social_transport.utils.logging_config import get_logger, setup_access_logging, setup_logging

logger = get_logger(__name__)


def _error_response(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(PartialFailureError)
    async def handle_partial_failure(request: Request, exc: PartialFailureError):
        logger.error(
            f"{request.method} {request.url.path} failed part way: {exc.message}; "
            f"created_ids={exc.created_ids}, rolled_back={exc.rolled_back}, cause={exc.cause!r}"
        )
        return _error_response(
            exc.status_code,
            exc.message,
            createdIds=exc.created_ids,
            rolledBack=exc.rolled_back,
        )

    @app.exception_handler(InternalError)
    async def handle_internal_error(request: Request, exc: InternalError):
        logger.error(f"{request.method} {request.url.path} internal error: {exc.message}", exc_info=exc)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, InternalError.PUBLIC_MESSAGE)

    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path}: {exc.message}")
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = "invalid request"
        if errors:
            first = errors[0]
            location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
            message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
        return _error_response(status.HTTP_400_BAD_REQUEST, message)

    @app.exception_handler(SQLAlchemyError)
    async def handle_store_error(request: Request, exc: SQLAlchemyError):
        logger.error(f"{request.method} {request.url.path} store error: {exc}", exc_info=exc)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, InternalError.PUBLIC_MESSAGE)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.error(f"{request.method} {request.url.path} unhandled error: {exc}", exc_info=exc)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, InternalError.PUBLIC_MESSAGE)


def create_app(settings: Optional[Settings] = None, services: Optional[Services] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    setup_logging(log_level=settings.log_level, log_dir=settings.log_dir, enable_file=settings.log_to_file)
    setup_access_logging(log_dir=settings.log_dir, enable_file=settings.log_to_file)
    services = services or Services.build(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Prepare the store when the API boots and release it on shutdown."""
        services.bootstrap()
        yield
        services.close()

    app = FastAPI(title="Social Transport Platform", version=__version__, lifespan=lifespan)
    app.state.services = services

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(api_router, prefix="/api")

    @app.get("/")
    def root():
        return {"status": "ok", "message": "Social Transport Platform is running"}

    logger.info(f"Log directory: {settings.log_dir}")
    logger.info("Application initialized with request logging enabled")
    return app


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    import os

    import uvicorn

    uvicorn.run(
        "social_transport.main:create_app",
        factory=True,
        host=os.getenv("SOCIAL_TRANSPORT_HOST", "0.0.0.0"),
        port=int(os.getenv("SOCIAL_TRANSPORT_PORT", "3001")),
    )
