"""
FastAPI application factory.
create_app() is the single entry point for building the app.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pymongo.asynchronous.mongo_client import AsyncMongoClient

from config import AppSettings
from errors import register_error_handlers
from infrastructure.cache.redis_client import create_redis_client
from infrastructure.email.protocol import EmailProvider
from infrastructure.email.zeptomail import ZeptoMailProvider
from infrastructure.http_client import HttpClient
from repositories.indexes import ensure_indexes
from routes.api_key_routes import router as api_key_router
from routes.auth_routes import router as auth_router
from routes.health_routes import router as health_router
from routes.otp_routes import router as otp_router
from routes.smtp_routes import router as smtp_router
from services.secret_cipher import SecretCipher
from services.token_service import TokenService
from shared.logging import get_logger, setup_logging

log = get_logger(__name__)


def bind_state(
    app: FastAPI,
    settings: AppSettings,
    db,
    redis_client,
    email_provider: EmailProvider,
) -> None:
    """Attach the process-wide objects that dependencies.py hands out.

    TokenService and SecretCipher refuse to build without their secrets, so a
    misconfigured deployment fails here, at startup.
    """
    app.state.settings = settings
    app.state.db = db
    app.state.redis = redis_client
    app.state.email_provider = email_provider
    app.state.token_service = TokenService(settings.jwt)
    app.state.secret_cipher = SecretCipher.from_settings(settings.encryption)


def include_routers(app: FastAPI) -> None:
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(otp_router)
    app.include_router(api_key_router)
    app.include_router(smtp_router)


def create_app(settings: Optional[AppSettings] = None) -> FastAPI:
    """Create and return a fully configured FastAPI application."""
    if settings is None:
        settings = AppSettings()

    setup_logging(settings.logging)

    # Initialise Sentry before anything else so it captures startup errors
    if settings.sentry.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry.sentry_dsn,
            environment=settings.env,
            send_default_pii=settings.sentry.sentry_send_pii,
            traces_sample_rate=settings.sentry.sentry_traces_sample_rate,
            profiles_sample_rate=settings.sentry.sentry_profile_sample_rate,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # ── Startup ──────────────────────────────────────────────────────────
        mongo_client: AsyncMongoClient = AsyncMongoClient(settings.db.mongodb_uri)
        db = mongo_client[settings.db.db_name]

        # Redis is optional; without it the resend cooldown falls back to
        # the pending challenge's issue time
        redis_client = await create_redis_client(settings.redis.redis_uri)

        http_client = HttpClient(user_agent=f"{settings.app_name}/1.0")
        email_provider = ZeptoMailProvider(
            settings.email,
            http_client,
            app_name=settings.app_name,
            app_url=settings.app_url,
        )

        bind_state(app, settings, db, redis_client, email_provider)
        app.state.mongo_client = mongo_client

        await ensure_indexes(db)
        log.info("app_started", env=settings.env)

        yield

        # ── Shutdown ─────────────────────────────────────────────────────────
        await http_client.aclose()
        await mongo_client.close()
        if redis_client is not None:
            await redis_client.aclose()
        log.info("app_stopped")

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        docs_url=settings.docs_url,
        redoc_url=None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    include_routers(app)

    return app
