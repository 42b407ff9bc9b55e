"""User service API — profiles and addresses.

Internal routes, called by the gateway only. Ownership is the gateway's
job; these routes trust the {profile_id} they are given.
"""

from fastapi import APIRouter, Depends, Request, Response

from gatehouse.schemas.profile import (
    AddressCreate,
    AddressRead,
    ProfileCreate,
    ProfileRead,
    ProfileUpdate,
)
from gatehouse.services.profile_service import ProfileService

router = APIRouter(prefix="/profiles")


def _svc(request: Request) -> ProfileService:
    return request.app.state.profile_service


# ─── Profiles ───────────────────────────────────────────

@router.post("", response_model=ProfileRead, status_code=201)
async def create_profile(
    body: ProfileCreate,
    response: Response,
    svc: ProfileService = Depends(_svc),
):
    """Create a profile. Idempotent: 200 with the existing one if present."""
    profile, created = await svc.create_profile(
        profile_id=body.id, email=body.email, name=body.name, phone=body.phone
    )
    if not created:
        response.status_code = 200
    return profile


@router.get("/{profile_id}", response_model=ProfileRead)
async def get_profile(profile_id: str, svc: ProfileService = Depends(_svc)):
    return await svc.get_profile(profile_id)


@router.patch("/{profile_id}", response_model=ProfileRead)
async def update_profile(
    profile_id: str,
    body: ProfileUpdate,
    svc: ProfileService = Depends(_svc),
):
    return await svc.update_profile(profile_id, name=body.name, phone=body.phone)


@router.delete("/{profile_id}", status_code=204)
async def delete_profile(profile_id: str, svc: ProfileService = Depends(_svc)):
    await svc.delete_profile(profile_id)


# ─── Addresses ──────────────────────────────────────────

@router.post("/{profile_id}/addresses", response_model=AddressRead, status_code=201)
async def add_address(
    profile_id: str,
    body: AddressCreate,
    svc: ProfileService = Depends(_svc),
):
    return await svc.add_address(profile_id, **body.model_dump())


@router.get("/{profile_id}/addresses", response_model=list[AddressRead])
async def list_addresses(profile_id: str, svc: ProfileService = Depends(_svc)):
    return await svc.list_addresses(profile_id)
