"""Auth service API — accounts, sessions, token verification.

Learn: Internal routes, called by the gateway only:
- POST /accounts → register (201 {user_id, message})
- POST /sessions → login ({token, user_id, name})
- POST /tokens/verify → {valid, user_id} or {valid: false, error}
- GET /accounts/:id → account info, for profile reconciliation

Token verification answers 200 even for a bad token: "the token is
invalid" is a successful verdict. A non-200 means the verifier itself
failed, which the gateway must not confuse with a bad token.
"""

from fastapi import APIRouter, Depends, Request

from gatehouse.errors import InvalidToken
from gatehouse.schemas.account import (
    AccountRead,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    TokenVerifyRequest,
    TokenVerifyResponse,
)
from gatehouse.services.credential_service import CredentialService

router = APIRouter()


def _svc(request: Request) -> CredentialService:
    return request.app.state.credential_service


@router.post("/accounts", response_model=RegisterResponse, status_code=201)
async def register(body: RegisterRequest, svc: CredentialService = Depends(_svc)):
    account_id = await svc.register(
        email=body.email, password=body.password, name=body.name
    )
    return RegisterResponse(user_id=account_id)


@router.post("/sessions", response_model=LoginResponse)
async def login(body: LoginRequest, svc: CredentialService = Depends(_svc)):
    result = await svc.login(email=body.email, password=body.password)
    return LoginResponse(
        token=result.token, user_id=result.account_id, name=result.name
    )


@router.post("/tokens/verify", response_model=TokenVerifyResponse)
async def verify_token(body: TokenVerifyRequest, svc: CredentialService = Depends(_svc)):
    try:
        user_id = svc.verify_token(body.token)
    except InvalidToken as e:
        return TokenVerifyResponse(valid=False, error=e.message)
    return TokenVerifyResponse(valid=True, user_id=user_id)


@router.get("/accounts/{account_id}", response_model=AccountRead)
async def get_account(account_id: str, svc: CredentialService = Depends(_svc)):
    return await svc.get_account(account_id)
