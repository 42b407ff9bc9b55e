"""API route aggregation — one router tree per service.

Learn: Auth is applied at the include_router level using FastAPI's
dependencies parameter. This gates every route in the /users group
without touching individual handlers. /auth routes are open.
"""

from fastapi import APIRouter, Depends

from gatehouse.api.accounts import router as accounts_router
from gatehouse.api.gateway_auth import router as gateway_auth_router
from gatehouse.api.gateway_users import router as gateway_users_router
from gatehouse.api.profiles import router as profiles_router
from gatehouse.auth.dependencies import get_current_identity

API_PREFIX = "/api/v1"


def build_gateway_router() -> APIRouter:
    router = APIRouter(prefix=API_PREFIX)
    # Open routes — no auth required
    router.include_router(gateway_auth_router, tags=["auth"])
    # Protected routes — require a valid bearer token
    router.include_router(
        gateway_users_router,
        tags=["users", "addresses"],
        dependencies=[Depends(get_current_identity)],
    )
    return router


def build_auth_service_router() -> APIRouter:
    router = APIRouter(prefix=API_PREFIX)
    router.include_router(accounts_router, tags=["accounts", "sessions"])
    return router


def build_user_service_router() -> APIRouter:
    router = APIRouter(prefix=API_PREFIX)
    router.include_router(profiles_router, tags=["profiles", "addresses"])
    return router
