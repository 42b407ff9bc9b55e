from typing import Optional, Protocol

from gatehouse.db.models import Account, Address, Profile


class CredentialStore(Protocol):
    """Account persistence for the auth service."""

    async def insert(self, email: str, password_hash: str, name: str) -> Account:
        """Persist a new account with a fresh id.

        Raises DuplicateEmail if the email is taken, atomically with the insert.
        """
        ...

    async def find_by_email(self, email: str) -> Optional[Account]:
        ...

    async def find_by_id(self, account_id: str) -> Optional[Account]:
        ...

    async def touch_last_login(self, account_id: str) -> None:
        """Set last_login_at to now."""
        ...


class ProfileStore(Protocol):
    """Profile and address persistence for the user service."""

    async def insert_profile(
        self, profile_id: str, email: str, name: str, phone: Optional[str] = None
    ) -> Profile:
        """Raises DuplicateEmail if the id or the email is already present."""
        ...

    async def find_profile(
        self, profile_id: str, include_deleted: bool = False
    ) -> Optional[Profile]:
        ...

    async def update_profile(
        self,
        profile_id: str,
        name: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> Optional[Profile]:
        """Change only the fields given. None if no live profile has this id."""
        ...

    async def soft_delete_profile(self, profile_id: str) -> bool:
        """Mark a live profile deleted. False if there was none."""
        ...

    async def insert_address(
        self,
        profile_id: str,
        street: str,
        city: str,
        state: str,
        postal_code: str,
        country: str,
        is_default: bool = False,
    ) -> Address:
        ...

    async def list_addresses(self, profile_id: str) -> list[Address]:
        """Addresses in creation order."""
        ...
