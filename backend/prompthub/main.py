"""
Application factory.

Run with:  uvicorn prompthub.main:create_app --factory
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from prompthub.config import Settings, load_settings
from prompthub.database import Database
from prompthub.errors import register_error_handlers
from prompthub.middleware import BodySizeLimitMiddleware
from prompthub.routes import admin, billing, challenges, growth, prompts, usage
from prompthub.utils import logger as app_logger

logger = logging.getLogger(__name__)

APP_NAME = "PromptHub API"


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    settings = settings or load_settings()
    database = database or Database.from_settings(settings)

    app_logger.configure(settings.log_level, development=settings.is_development)

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        database.init_db()
        logger.info(f"{APP_NAME} started (env={settings.environment})")
        try:
            yield
        finally:
            database.dispose()

    app = FastAPI(title=APP_NAME, lifespan=lifespan)
    app.state.settings = settings
    app.state.db = database

    register_error_handlers(app)

    app.add_middleware(BodySizeLimitMiddleware, max_bytes=settings.max_body_bytes)

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Include routers
    app.include_router(prompts.router, prefix="/api", tags=["prompts"])
    app.include_router(growth.router, prefix="/api", tags=["growth"])
    app.include_router(challenges.router, prefix="/api", tags=["challenges"])
    app.include_router(usage.router, prefix="/api", tags=["usage"])
    app.include_router(billing.router, prefix="/api", tags=["billing"])

    # Admin panel (admin role required on every route)
    app.include_router(admin.router, prefix="/api", tags=["admin"])

    @app.get("/api/health")
    def health_check():
        return {"app_name": APP_NAME, "status": "healthy"}

    return app
