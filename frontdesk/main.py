from __future__ import annotations

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import sessionmaker

from frontdesk.api.v1.router import router as api_v1_router
from frontdesk.config.settings import Settings, get_settings
from frontdesk.core.error_handlers import register_exception_handlers
from frontdesk.core.logging import get_logger, setup_logging
from frontdesk.core.middleware import register_middlewares
from frontdesk.db.init_db import init_db
from frontdesk.db.session import create_db_engine, create_session_factory
from frontdesk.services.notification import EmailService, WhatsAppService

logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    session_factory: Optional[sessionmaker] = None,
) -> FastAPI:
    """
    Application factory for the FastAPI app.

    - Configures title, version, debug mode from Settings.
    - Registers CORS, core middleware, and exception handlers.
    - Owns the database engine and notification clients on ``app.state``.
    - Includes the versioned API router under /api/v1.

    Run with ``uvicorn frontdesk.main:create_app --factory``.
    """
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        debug=settings.DEBUG,
        version=settings.API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # CORS Configuration
    allow_all = not settings.CORS_ORIGINS or settings.CORS_ORIGINS == ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.CORS_ORIGINS,
        allow_credentials=not allow_all,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request ID and timing
    register_middlewares(app)
    register_exception_handlers(app)

    if session_factory is None:
        engine = create_db_engine(settings)
        if not settings.is_production():
            # Production schemas are managed by migrations
            init_db(engine)
        session_factory = create_session_factory(engine)

    app.state.settings = settings
    app.state.session_factory = session_factory
    app.state.email_service = EmailService(settings)
    app.state.whatsapp_service = WhatsAppService(settings)

    app.include_router(api_v1_router, prefix=settings.API_V1_STR)

    logger.info(f"{settings.APP_NAME} {settings.API_VERSION} started ({settings.ENVIRONMENT})")
    return app
