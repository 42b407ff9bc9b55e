"""Profile service — business logic for profiles and addresses.

Learn: create_profile is idempotent on the id: the gateway may call it
again for an account whose first mirror call failed, and a second call
for the same id must succeed rather than conflict. A soft-deleted profile
stays deleted; recreating it is not a side effect of a read.
"""

from typing import Optional

import structlog

from gatehouse.db.models import Address, Profile
from gatehouse.errors import DuplicateEmail, NotFound, ValidationError
from gatehouse.stores.base import ProfileStore

logger = structlog.get_logger()


class ProfileService:
    """Business logic for the user service."""

    def __init__(self, store: ProfileStore):
        self.store = store

    # ─── Profiles ───────────────────────────────────────

    async def create_profile(
        self,
        profile_id: str,
        email: str,
        name: str,
        phone: Optional[str] = None,
    ) -> tuple[Profile, bool]:
        """Create a profile, or return the existing one with this id.

        Returns (profile, created).
        """
        if not profile_id or not email or not name:
            raise ValidationError("User ID, email and name are required")

        existing = await self.store.find_profile(profile_id, include_deleted=True)
        if existing is not None:
            return self._existing(existing), False

        try:
            profile = await self.store.insert_profile(
                profile_id=profile_id, email=email, name=name, phone=phone
            )
        except DuplicateEmail:
            # Lost a race against a concurrent create for the same id,
            # or another profile owns this email.
            existing = await self.store.find_profile(profile_id, include_deleted=True)
            if existing is None:
                raise
            return self._existing(existing), False

        logger.info("profile.created", profile_id=profile_id)
        return profile, True

    @staticmethod
    def _existing(profile: Profile) -> Profile:
        if profile.is_deleted:
            raise NotFound("User not found")
        return profile

    async def get_profile(self, profile_id: str) -> Profile:
        if not profile_id:
            raise ValidationError("User ID is required")
        profile = await self.store.find_profile(profile_id)
        if profile is None:
            raise NotFound("User not found")
        return profile

    async def update_profile(
        self,
        profile_id: str,
        name: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> Profile:
        """Partial update: fields left as None keep their current value."""
        if not name and phone is None:
            raise ValidationError("At least one field (name or phone) must be provided")
        profile = await self.store.update_profile(
            profile_id, name=name or None, phone=phone
        )
        if profile is None:
            raise NotFound("User not found")
        return profile

    async def delete_profile(self, profile_id: str) -> None:
        """Soft delete — the row stays, reads stop seeing it."""
        if not await self.store.soft_delete_profile(profile_id):
            raise NotFound("User not found")
        logger.info("profile.deleted", profile_id=profile_id)

    # ─── Addresses ──────────────────────────────────────

    async def add_address(
        self,
        profile_id: str,
        street: str,
        city: str,
        postal_code: str,
        country: str,
        state: str = "",
        is_default: bool = False,
    ) -> Address:
        if not street or not city or not postal_code or not country:
            raise ValidationError(
                "Street, city, postal code, and country are required"
            )
        await self.get_profile(profile_id)
        return await self.store.insert_address(
            profile_id=profile_id,
            street=street,
            city=city,
            state=state or "",
            postal_code=postal_code,
            country=country,
            is_default=is_default,
        )

    async def list_addresses(self, profile_id: str) -> list[Address]:
        await self.get_profile(profile_id)
        return await self.store.list_addresses(profile_id)
