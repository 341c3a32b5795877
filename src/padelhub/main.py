"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown (Redis, library bootstrap,
database engine). Middleware, CORS, exception handlers and routers are
all registered here.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from padelhub import __version__
from padelhub.api import api_router
from padelhub.auth.errors import AccessError, Unauthenticated
from padelhub.config import settings

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` runs at
    shutdown. httpx's ASGITransport does not run lifespans, so tests get
    neither Redis nor the seeded library unless they ask for them.
    """
    logger.info(
        "padelhub.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    from padelhub.cache import close_redis, init_redis
    try:
        await init_redis()
        logger.info("padelhub.redis_connected", url=settings.redis_url)
    except Exception as e:
        logger.warning("padelhub.redis_unavailable", error=str(e))
        # Redis is optional — only rate limiting is lost

    from padelhub.db.engine import async_session_factory, engine

    if settings.seed_library_on_startup:
        from padelhub.services.library_service import LibraryService
        async with async_session_factory() as db:
            await LibraryService(db).seed_defaults()

    yield

    logger.info("padelhub.shutdown")
    await close_redis()
    await engine.dispose()


async def access_error_handler(request: Request, exc: AccessError) -> JSONResponse:
    """Render an access denial as {"detail", "code", ...} with its status."""
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=headers,
    )


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="PadelHub",
        description="Padel training tracker — players, coaches and their data",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: CORS → RateLimit → Security → RequestId → handler

    from padelhub.middleware.rate_limit import RateLimitMiddleware
    from padelhub.middleware.request_id import RequestIdMiddleware
    from padelhub.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        default_rpm=settings.rate_limit_rpm,
        auth_rpm=settings.rate_limit_auth_rpm,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AccessError, access_error_handler)

    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: padelhub.main:app)
app = create_app()
