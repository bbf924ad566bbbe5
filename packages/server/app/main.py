"""
orgpass API Server

Entry point for the FastAPI application.
"""

from typing import Optional

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api import router as api_router
from app.api.auth import router as auth_router
from app.core.auth import TokenService
from app.core.config import Settings, get_settings
from app.core.database import Database
from app.core.errors import register_exception_handlers
from app.core.logging import configure_logging
from app.core.middleware import RequestContextMiddleware, SecurityHeadersMiddleware

log = structlog.get_logger()


def create_app(settings: Optional[Settings] = None, tokens: Optional[TokenService] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    ``settings`` is built once and handed explicitly to the store and the
    token service; nothing below reads the environment on its own.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.log_format)

    app = FastAPI(
        title="orgpass",
        description="User accounts and organisation membership.",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    app.state.settings = settings
    app.state.db = Database(settings)
    app.state.tokens = tokens or TokenService(settings)

    # Middleware (the last one added runs outermost)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", "Authorization"],
    )

    register_exception_handlers(app)

    # Auth routes (public)
    app.include_router(auth_router, prefix="/auth", tags=["Authentication"])

    # Protected routes
    app.include_router(api_router, prefix="/api")

    @app.get("/", tags=["System"])
    async def home():
        return {"message": "this is the default page"}

    @app.get("/health", tags=["System"])
    async def health_check():
        """Health check endpoint for liveness probes."""
        return {"status": "ok"}

    @app.get("/ready", tags=["System"])
    async def readiness_check():
        """Readiness check endpoint: the store must answer a round trip."""
        if not await app.state.db.ping():
            return JSONResponse(status_code=503, content={"status": "unavailable"})
        return {"status": "ready"}

    @app.on_event("startup")
    async def on_startup():
        if not settings.secret_key:
            log.warning("app.secret_missing", detail="token issue and verification will fail")
        if settings.create_tables:
            await app.state.db.create_all()
        log.info("app.starting", port=settings.port)

    @app.on_event("shutdown")
    async def on_shutdown():
        log.info("app.stopping")
        await app.state.db.dispose()

    return app


app = create_app()


def run() -> None:
    """CLI entry point: serve the app on the configured host and port."""
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level)


if __name__ == "__main__":
    run()
