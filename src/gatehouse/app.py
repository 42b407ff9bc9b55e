"""FastAPI application factories, one per service.

Learn: App factory pattern — each create_*_app() returns a configured
FastAPI instance with its collaborators built from Settings and parked on
app.state. Route dependencies read them from there, so tests can hand a
factory an in-memory store or an ASGI transport instead of a database or
a network. Lifespan handles shutdown (engine disposal, client pools).

- create_auth_app → credential store, credential service
- create_user_app → profile store, profile service
- create_gateway_app → service clients, registration coordinator, request gate
"""

from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Optional

import httpx
import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gatehouse import __version__
from gatehouse.api import (
    build_auth_service_router,
    build_gateway_router,
    build_user_service_router,
)
from gatehouse.api.errors import install_error_handlers
from gatehouse.api.health import router as health_router
from gatehouse.auth.jwt import TokenCodec
from gatehouse.auth.password import PasswordHasher
from gatehouse.clients.auth import AuthServiceClient
from gatehouse.clients.users import UserServiceClient
from gatehouse.config import Settings, settings as default_settings
from gatehouse.db.engine import build_engine, build_session_factory
from gatehouse.middleware.rate_limit import RateLimitMiddleware
from gatehouse.middleware.request_id import RequestIdMiddleware
from gatehouse.middleware.security import SecurityHeadersMiddleware
from gatehouse.services.credential_service import CredentialService
from gatehouse.services.profile_service import ProfileService
from gatehouse.services.registration import RegistrationCoordinator
from gatehouse.stores.base import CredentialStore, ProfileStore
from gatehouse.stores.sql import SqlCredentialStore, SqlProfileStore

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` at shutdown.
    """
    service = app.state.service_name
    cfg: Settings = app.state.settings
    logger.info(
        "gatehouse.starting",
        service=service,
        version=__version__,
        environment=cfg.environment,
    )

    if service == "gateway" and app.state.redis is None and cfg.redis_url:
        from redis.asyncio import from_url

        try:
            redis = from_url(cfg.redis_url)
            await redis.ping()
            app.state.redis = redis
            logger.info("gatehouse.redis_connected")
        except Exception as e:
            # Redis is optional — the gateway works without rate limiting
            logger.warning("gatehouse.redis_unavailable", error_type=type(e).__name__)

    yield

    logger.info("gatehouse.shutdown", service=service)
    for name in ("auth_client", "user_client"):
        client = getattr(app.state, name, None)
        if client is not None:
            await client.aclose()
    if getattr(app.state, "redis", None) is not None:
        await app.state.redis.aclose()
    if app.state.engine is not None:
        await app.state.engine.dispose()


def _base_app(service: str, title: str, cfg: Settings) -> FastAPI:
    app = FastAPI(title=title, version=__version__, lifespan=lifespan)
    app.state.service_name = service
    app.state.settings = cfg
    app.state.engine = None
    app.add_middleware(RequestIdMiddleware, service=service)
    install_error_handlers(app)
    app.include_router(health_router, tags=["health"])
    return app


def create_auth_app(
    settings: Optional[Settings] = None,
    store: Optional[CredentialStore] = None,
) -> FastAPI:
    """Build the auth service: accounts, sessions, token verification."""
    cfg = settings or default_settings
    app = _base_app("auth", "Gatehouse Auth Service", cfg)

    if store is None:
        app.state.engine = build_engine(cfg.auth_database_url, cfg)
        store = SqlCredentialStore(build_session_factory(app.state.engine))

    app.state.credential_service = CredentialService(
        store=store,
        hasher=PasswordHasher(rounds=cfg.bcrypt_rounds),
        codec=TokenCodec(
            cfg.jwt_secret,
            algorithm=cfg.jwt_algorithm,
            ttl=timedelta(hours=cfg.token_expire_hours),
        ),
    )
    app.include_router(build_auth_service_router())
    return app


def create_user_app(
    settings: Optional[Settings] = None,
    store: Optional[ProfileStore] = None,
) -> FastAPI:
    """Build the user service: profiles and addresses."""
    cfg = settings or default_settings
    app = _base_app("users", "Gatehouse User Service", cfg)

    if store is None:
        app.state.engine = build_engine(cfg.user_database_url, cfg)
        store = SqlProfileStore(build_session_factory(app.state.engine))

    app.state.profile_service = ProfileService(store)
    app.include_router(build_user_service_router())
    return app


def create_gateway_app(
    settings: Optional[Settings] = None,
    auth_transport: Optional[httpx.AsyncBaseTransport] = None,
    user_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Build the public gateway in front of the auth and user services."""
    cfg = settings or default_settings
    app = _base_app("gateway", "Gatehouse API Gateway", cfg)

    auth_client = AuthServiceClient(
        cfg.auth_service_url,
        timeout=cfg.service_timeout_seconds,
        transport=auth_transport,
    )
    user_client = UserServiceClient(
        cfg.user_service_url,
        timeout=cfg.service_timeout_seconds,
        transport=user_transport,
    )
    app.state.auth_client = auth_client
    app.state.user_client = user_client
    app.state.registration = RegistrationCoordinator(auth_client, user_client)
    app.state.reconcile_missing_profiles = cfg.reconcile_missing_profiles
    app.state.redis = None

    # ── Middleware stack ──────────────────────────────────────
    # Starlette middleware executes in reverse order of registration.
    # Request flow: CORS → RateLimit → Security → RequestId → handler
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        default_rpm=cfg.rate_limit_rpm,
        auth_rpm=cfg.rate_limit_auth_rpm,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(build_gateway_router())
    return app
