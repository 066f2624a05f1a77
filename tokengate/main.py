"""FastAPI application factory. No business logic; only wiring, middleware and error mapping."""

import logging
from datetime import timedelta

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from tokengate.api import router as api_router
from tokengate.core.config import Settings, get_settings
from tokengate.core.database import build_engine, build_session_factory
from tokengate.core.security import PasswordHasher, TokenIssuer
from tokengate.models import Base
from tokengate.services.exceptions import AuthError, ServerError, TokenError
from tokengate.services.revocation import (
    DatabaseRevocationRegistry,
    InMemoryRevocationRegistry,
    RevocationRegistry,
)

logger = logging.getLogger(__name__)


def _error_response(exc: AuthError) -> Response:
    if isinstance(exc, TokenError):
        return PlainTextResponse(
            exc.message,
            status_code=exc.status_code,
            headers={"WWW-Authenticate": "Bearer"},
        )
    if exc.plain_text:
        return PlainTextResponse(exc.message, status_code=exc.status_code)
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message, "result": False, "data": None},
    )


async def handle_auth_error(request: Request, exc: AuthError) -> Response:
    return _error_response(exc)


async def handle_unexpected_error(request: Request, exc: Exception) -> Response:
    """Any unmapped exception becomes a generic 500; details stay in the log."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error_response(ServerError())


def create_app(
    settings: Settings | None = None,
    revocation_registry: RevocationRegistry | None = None,
) -> FastAPI:
    """
    Build the application with its components created from settings.

    Pass revocation_registry to override the backend chosen by REVOCATION_BACKEND.
    """
    settings = settings or get_settings()

    engine = build_engine(settings)
    session_factory = build_session_factory(engine)
    if settings.DB_CREATE_TABLES:
        Base.metadata.create_all(engine)

    if revocation_registry is None:
        if settings.REVOCATION_BACKEND == "memory":
            revocation_registry = InMemoryRevocationRegistry()
        else:
            revocation_registry = DatabaseRevocationRegistry(session_factory)

    app = FastAPI(
        title="Tokengate API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.password_hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)
    app.state.token_issuer = TokenIssuer(
        secret=settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
        ttl=timedelta(minutes=settings.JWT_EXPIRE_MINUTES),
    )
    app.state.revocation_registry = revocation_registry

    if settings.CORS_ORIGINS:
        origins = settings.CORS_ORIGINS
    else:
        origins = ["*"] if settings.APP_ENV == "dev" else []
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AuthError, handle_auth_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.include_router(api_router, prefix=settings.API_PREFIX)

    logger.info(
        "Application configured",
        extra={"app_env": settings.APP_ENV, "revocation_backend": type(revocation_registry).__name__},
    )
    return app


def get_app() -> FastAPI:
    """Uvicorn factory entrypoint: load .env, then build from environment settings."""
    load_dotenv()
    return create_app()
