"""Public auth API — registration and login.

Learn: Open routes (no bearer token required):
- POST /auth/register → account in the auth service, then profile in the
  user service → 201 {user_id, message}
- POST /auth/login → email/password → {token, user_id, name}

Login failures are a 401 with one generic message whether the email is
unknown or the password is wrong.
"""

from fastapi import APIRouter, Depends, Request

from gatehouse.auth.dependencies import get_auth_client
from gatehouse.clients.auth import AuthServiceClient
from gatehouse.schemas.account import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
)
from gatehouse.services.registration import RegistrationCoordinator

router = APIRouter(prefix="/auth")


def _registration(request: Request) -> RegistrationCoordinator:
    return request.app.state.registration


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    body: RegisterRequest,
    registration: RegistrationCoordinator = Depends(_registration),
):
    """Create a new user account."""
    user_id = await registration.register(body.email, body.password, body.name)
    return RegisterResponse(user_id=user_id)


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    auth: AuthServiceClient = Depends(get_auth_client),
):
    """Login with email and password → session token."""
    session = await auth.login(body.email, body.password)
    return LoginResponse(token=session.token, user_id=session.user_id, name=session.name)
