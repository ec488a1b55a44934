from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from miniapp_rooms.api.deps import get_extractor, get_verifier
from miniapp_rooms.api.middleware.request_context import RequestContextMiddleware
from miniapp_rooms.api.v1.routers import auth, health, rooms
from miniapp_rooms.application.exceptions import (
    AppError,
    ConfigurationError,
    ConflictError,
    ExpiredLaunchDataError,
    ForbiddenError,
    InvalidSignatureError,
    MalformedInputError,
    MissingIdentityError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from miniapp_rooms.config import settings
from miniapp_rooms.infrastructure.db.session import engine

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: dict[type[AppError], int] = {
    MalformedInputError: 400,
    MissingIdentityError: 400,
    ValidationError: 400,
    InvalidSignatureError: 401,
    ExpiredLaunchDataError: 401,
    ForbiddenError: 403,
    NotFoundError: 404,
    ConflictError: 409,
    ConfigurationError: 500,
    StorageError: 500,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    # Refuse to start without a bot token or with a bad identity field map.
    get_verifier()
    get_extractor()
    logger.info("Launch data verifier configured")

    yield

    await engine.dispose()
    logger.info("Database engine disposed")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Mini App Rooms Service",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestContextMiddleware)

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(rooms.router)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    async def _app_error(_req: Request, exc: AppError) -> JSONResponse:
        status_code = _STATUS_BY_ERROR.get(type(exc), 500)
        if status_code >= 500:
            logger.error("%s: %s", type(exc).__name__, exc.detail)
        return JSONResponse(status_code=status_code, content={"detail": exc.detail})

    for error_cls in _STATUS_BY_ERROR:
        app.add_exception_handler(error_cls, _app_error)

    @app.exception_handler(RequestValidationError)
    async def _request_validation(_req: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})
