"""Pydantic schemas for profiles and addresses.

Separate "Create"/"Update" schemas (input) from "Read" schemas (output).
The internal user service returns the full records; the gateway trims
them to the public shape.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


# ─── Profiles ───────────────────────────────────────────

class ProfileCreate(BaseModel):
    id: str = ""
    email: str = ""
    name: str = ""
    phone: Optional[str] = None


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None


class ProfileRead(BaseModel):
    id: str
    email: str
    name: str
    phone: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class UserRead(BaseModel):
    """Public profile shape returned by the gateway."""
    id: str
    email: str
    name: str
    phone: str = ""


class DeleteUserResponse(BaseModel):
    message: str = "User deleted successfully"


# ─── Addresses ──────────────────────────────────────────

class AddressCreate(BaseModel):
    street: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""
    country: str = ""
    is_default: bool = False


class AddressRead(BaseModel):
    id: str
    street: str
    city: str
    state: str
    postal_code: str
    country: str
    is_default: bool

    model_config = {"from_attributes": True}
