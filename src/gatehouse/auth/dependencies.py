"""FastAPI auth dependencies for the gateway.

Learn: These are used as Depends() — get_current_identity at the router
level to gate the whole protected group, require_self_access per route to
bind the identity to the {user_id} in the path. Handlers receive the
verified identity as an ordinary typed parameter.

Request gate, per request:
  no Authorization header          → MissingAuth (401)
  not "Bearer <token>" / empty     → MalformedAuth (401)
  auth service says invalid        → InvalidToken (401)
  auth service unreachable / 5xx   → DependencyUnavailable (500)
  otherwise                        → CurrentIdentity
"""

from dataclasses import dataclass
from typing import Optional

import structlog
from fastapi import Depends, Header, Path, Request

from gatehouse.auth.access import authorize_self_access
from gatehouse.clients.auth import AuthServiceClient
from gatehouse.errors import MalformedAuth, MissingAuth

BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class CurrentIdentity:
    """The verified caller of a protected request."""

    user_id: str


def get_auth_client(request: Request) -> AuthServiceClient:
    return request.app.state.auth_client


def extract_bearer_token(authorization: Optional[str]) -> str:
    """Pull the token out of an Authorization header value."""
    if not authorization:
        raise MissingAuth()
    if not authorization.startswith(BEARER_PREFIX):
        raise MalformedAuth()
    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise MalformedAuth("Token cannot be empty")
    return token


async def get_current_identity(
    authorization: Optional[str] = Header(None),
    auth_client: AuthServiceClient = Depends(get_auth_client),
) -> CurrentIdentity:
    """Verify the bearer token with the auth service (required — 401 if no auth)."""
    token = extract_bearer_token(authorization)
    user_id = await auth_client.verify_token(token)
    structlog.contextvars.bind_contextvars(user_id=user_id)
    return CurrentIdentity(user_id=user_id)


async def require_self_access(
    user_id: str = Path(...),
    identity: CurrentIdentity = Depends(get_current_identity),
) -> CurrentIdentity:
    """Allow the request only if the path's {user_id} is the caller's own."""
    authorize_self_access(identity.user_id, user_id)
    return identity
