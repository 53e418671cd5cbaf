"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance built from one Settings object. Everything the auth core needs
(TokenService with the signing secret, PasswordHasher with its cost
factor, the DB engine) is constructed here once and kept on app.state,
read-only for the life of the process.

Lifespan creates missing tables and connects Redis (optional).
"""

from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskhub import __version__
from taskhub.api import api_router
from taskhub.auth.password import PasswordHasher
from taskhub.auth.tokens import TokenService
from taskhub.config import Settings
from taskhub.db.engine import build_engine, build_session_factory, create_tables
from taskhub.errors import AppError, AuthenticationError, InternalError

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` runs at
    shutdown.
    """
    settings: Settings = app.state.settings
    logger.info(
        "taskhub.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    await create_tables(app.state.engine)

    app.state.redis = None
    if settings.redis_url:
        from redis.asyncio import from_url

        try:
            client = from_url(settings.redis_url)
            await client.ping()
            app.state.redis = client
            logger.info("taskhub.redis_connected", url=settings.redis_url)
        except Exception as e:
            logger.warning("taskhub.redis_unavailable", error=str(e))
            # Redis is optional — only rate limiting depends on it

    yield

    logger.info("taskhub.shutdown")
    if app.state.redis is not None:
        await app.state.redis.aclose()
    await app.state.engine.dispose()


# ── Error rendering ───────────────────────────────────────────
# Every error response has the same shape: {"message": "..."}.


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    headers = None
    if isinstance(exc, AuthenticationError):
        headers = {"WWW-Authenticate": "Bearer"}
    if exc.status_code >= 500:
        logger.error("request.failed", error=exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message},
        headers=headers,
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Pydantic validation failures are plain 400s, not FastAPI's 422."""
    problems = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p != "body"]
        field = ".".join(loc) or "body"
        problems.append(f"{field}: {err.get('msg', 'invalid')}")
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid request: " + "; ".join(problems)},
    )


async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Storage failures become a generic 500 — details go to the log only."""
    logger.error("request.database_error", error=str(exc), error_type=exc.__class__.__name__)
    return await app_error_handler(request, InternalError())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort for anything unexpected: generic 500, traceback to the log."""
    logger.exception("request.unhandled_error", error_type=exc.__class__.__name__)
    return await app_error_handler(request, InternalError())


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build and return the FastAPI application."""
    if settings is None:
        from taskhub.config import settings

    app = FastAPI(
        title="TaskHub",
        description="Project and task tracking with role-based access control",
        version=__version__,
        lifespan=lifespan,
    )

    engine = build_engine(settings.database_url, echo=settings.debug)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.token_service = TokenService(
        secret=settings.jwt_secret,
        ttl=timedelta(minutes=settings.access_token_expire_minutes),
        algorithm=settings.jwt_algorithm,
    )
    app.state.password_hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    app.state.redis = None

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: RequestId → Security → RateLimit → CORS → handler

    from taskhub.middleware.rate_limit import RateLimitMiddleware
    from taskhub.middleware.request_id import RequestIdMiddleware
    from taskhub.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RateLimitMiddleware, auth_rpm=settings.rate_limit_auth_rpm)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: taskhub.main:app)
app = create_app()
