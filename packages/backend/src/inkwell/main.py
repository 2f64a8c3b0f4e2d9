"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Everything stateful (settings, DB engine, session factory,
token service) is built here and parked on app.state, then handed to
routes through dependencies. Lifespan manages startup/shutdown.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from inkwell import __version__
from inkwell.api import api_router
from inkwell.auth.jwt import SessionTokenService
from inkwell.config import Settings, get_settings
from inkwell.db.engine import build_engine, build_session_factory, create_tables
from inkwell.errors import BlogError, InternalFailure
from inkwell.logging_config import configure_logging
from inkwell.middleware.request_id import RequestIdMiddleware
from inkwell.middleware.security import SecurityHeadersMiddleware
from inkwell.schemas.validation import describe_errors

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` runs at
    shutdown. If the database can't be reached while creating tables the
    error propagates and the server refuses to start.
    """
    settings: Settings = app.state.settings
    logger.info(
        "inkwell.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    if settings.create_tables:
        try:
            await create_tables(app.state.engine)
        except (SQLAlchemyError, OSError) as e:
            logger.critical("inkwell.database_unavailable", error=str(e))
            raise
        logger.info("inkwell.tables_ready")

    yield

    logger.info("inkwell.shutdown")
    await app.state.engine.dispose()


# ─── Error rendering ─────────────────────────────────────
# Every failure leaves the API as {"error": "<message>"}.


async def _blog_error_handler(request: Request, exc: BlogError) -> JSONResponse:
    if isinstance(exc, InternalFailure):
        logger.error(
            "http.internal_failure",
            error_type=type(exc).__name__,
            path=request.url.path,
            cause=repr(exc.__cause__) if exc.__cause__ else None,
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message},
        headers=exc.headers,
    )


async def _validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"error": f"Invalid input: {describe_errors(exc.errors(), skip=1)}"},
    )


async def _http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("http.unhandled_error", path=request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build and return the FastAPI application."""
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="Inkwell",
        description="Blog backend — accounts, JWT sessions, author-scoped posts and comments",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = build_engine(settings)
    app.state.session_factory = build_session_factory(app.state.engine)
    app.state.tokens = SessionTokenService(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expire_hours=settings.token_expire_hours,
    )

    app.add_exception_handler(BlogError, _blog_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)

    # ── Middleware stack ──────────────────────────────────────
    # Starlette middleware executes in reverse order of registration.
    # Request flow: RequestId → Security → CORS → handler
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)

    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: inkwell.main:app)
app = create_app()
