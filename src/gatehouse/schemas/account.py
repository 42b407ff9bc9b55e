"""Pydantic schemas for accounts and sessions.

Learn: Fields default to "" rather than being required so that a missing
field reaches the service layer and comes back as the same 400
ValidationError as a blank one, instead of FastAPI's 422.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


# ─── Public (gateway) ───────────────────────────────────

class RegisterRequest(BaseModel):
    email: str = ""
    password: str = ""
    name: str = ""


class RegisterResponse(BaseModel):
    user_id: str
    message: str = "User registered successfully"


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class LoginResponse(BaseModel):
    token: str
    user_id: str
    name: str


# ─── Internal (auth service) ────────────────────────────

class TokenVerifyRequest(BaseModel):
    token: str = ""


class TokenVerifyResponse(BaseModel):
    valid: bool
    user_id: Optional[str] = None
    error: Optional[str] = None


class AccountRead(BaseModel):
    """Account info (without the password hash)."""
    id: str
    email: str
    name: str
    created_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
