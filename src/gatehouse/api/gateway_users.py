"""Public user API — profiles and addresses, self-access only.

Learn: The whole router sits behind get_current_identity (see
gatehouse.api.build_gateway_router). Each route additionally depends on
require_self_access, so a valid token for user A gets 403 on any path
naming user B.

- GET /users/:id → profile (recreated from the account if missing)
- PUT /users/:id → update name and/or phone
- DELETE /users/:id → soft delete
- POST /users/:id/addresses → add address
- GET /users/:id/addresses → list addresses
"""

from fastapi import APIRouter, Depends, Request

from gatehouse.auth.dependencies import CurrentIdentity, require_self_access
from gatehouse.clients.users import UserServiceClient
from gatehouse.schemas.profile import (
    AddressCreate,
    AddressRead,
    DeleteUserResponse,
    ProfileUpdate,
    UserRead,
)
from gatehouse.services.registration import RegistrationCoordinator

router = APIRouter(prefix="/users")


def _users(request: Request) -> UserServiceClient:
    return request.app.state.user_client


def _registration(request: Request) -> RegistrationCoordinator:
    return request.app.state.registration


def _user_read(profile: dict) -> UserRead:
    return UserRead(
        id=profile["id"],
        email=profile["email"],
        name=profile["name"],
        phone=profile.get("phone") or "",
    )


# ─── Profile ────────────────────────────────────────────

@router.get("/{user_id}", response_model=UserRead)
async def get_user(
    request: Request,
    identity: CurrentIdentity = Depends(require_self_access),
    users: UserServiceClient = Depends(_users),
    registration: RegistrationCoordinator = Depends(_registration),
):
    if request.app.state.reconcile_missing_profiles:
        profile = await registration.ensure_profile(identity.user_id)
    else:
        profile = await users.get_profile(identity.user_id)
    return _user_read(profile)


@router.put("/{user_id}", response_model=UserRead)
async def update_user(
    body: ProfileUpdate,
    identity: CurrentIdentity = Depends(require_self_access),
    users: UserServiceClient = Depends(_users),
):
    profile = await users.update_profile(
        identity.user_id, name=body.name, phone=body.phone
    )
    return _user_read(profile)


@router.delete("/{user_id}", response_model=DeleteUserResponse)
async def delete_user(
    identity: CurrentIdentity = Depends(require_self_access),
    users: UserServiceClient = Depends(_users),
):
    await users.delete_profile(identity.user_id)
    return DeleteUserResponse()


# ─── Addresses ──────────────────────────────────────────

@router.post("/{user_id}/addresses", response_model=AddressRead, status_code=201)
async def add_address(
    body: AddressCreate,
    identity: CurrentIdentity = Depends(require_self_access),
    users: UserServiceClient = Depends(_users),
):
    return await users.add_address(identity.user_id, body.model_dump())


@router.get("/{user_id}/addresses", response_model=list[AddressRead])
async def list_addresses(
    identity: CurrentIdentity = Depends(require_self_access),
    users: UserServiceClient = Depends(_users),
):
    return await users.list_addresses(identity.user_id)
