"""
Authentication service application factory.

Run with: uvicorn salesauth.auth_service.main:create_app --factory
"""
from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings
from .db import build_engine, build_session_factory, init_db
from .errors import (
    AuthServiceError,
    DuplicateIdentity,
    Forbidden,
    HashFormatError,
    InvalidCredentials,
    StoreUnavailable,
    Unauthorized,
    ValidationError,
)
from .routes import auth, health
from .service import AuthenticationService
from .store import UserStore
from .utils.event_logger import configure_logging

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    DuplicateIdentity: status.HTTP_409_CONFLICT,
    InvalidCredentials: status.HTTP_401_UNAUTHORIZED,
    Unauthorized: status.HTTP_401_UNAUTHORIZED,
    Forbidden: status.HTTP_403_FORBIDDEN,
    StoreUnavailable: status.HTTP_500_INTERNAL_SERVER_ERROR,
    HashFormatError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


async def handle_auth_error(request: Request, exc: AuthServiceError) -> JSONResponse:
    status_code = ERROR_STATUS.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    if status_code >= 500:
        logger.error("%s on %s %s", type(exc).__name__, request.method, request.url.path)
    return _error(status_code, exc.message)


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error(status.HTTP_400_BAD_REQUEST, "Invalid request body")


async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return _error(exc.status_code, "Route not found")
    return _error(exc.status_code, str(exc.detail))


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Settings are read from the environment when not given; missing token
    secrets raise here, before the server starts accepting requests.
    """
    settings = settings or Settings()
    configure_logging(settings.LOG_LEVEL, settings.LOG_DIR)

    engine = build_engine(settings.DATABASE_URL)
    store = UserStore(build_session_factory(engine))

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        init_db(engine)
        logger.info("Authentication service started (database=%s)", engine.url.render_as_string(hide_password=True))
        yield
        engine.dispose()

    app = FastAPI(
        title="Sales Desk Auth Service",
        description="Registration, login and token refresh",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.auth_service = AuthenticationService.from_settings(settings, store)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AuthServiceError, handle_auth_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(Exception, handle_unexpected)

    app.include_router(auth.router)
    app.include_router(health.router)
    return app
