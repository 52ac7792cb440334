"""Application factory: builds settings-bound engine, session factory and routes once."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import router as api_router
from app.core.config import Settings, get_settings
from app.core.database import build_engine, build_session_factory
from app.core.errors import register_exception_handlers
from app.core.security import ensure_token_secrets

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    Raises TokenConfigurationError if ACCESS_TOKEN_SECRET or REFRESH_TOKEN_SECRET is unset:
    the service must not start without both signing secrets.
    """
    settings = settings or get_settings()
    ensure_token_secrets(settings)

    app = FastAPI(
        title="Pollution Reports API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    engine = build_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.APP_ENV == "dev" else settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app, settings)
    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "Pollution Reports API"}

    logger.info("Application created (env=%s, prefix=%s)", settings.APP_ENV, settings.API_PREFIX)
    return app
