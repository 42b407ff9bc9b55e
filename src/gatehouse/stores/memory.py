"""In-memory store adapters.

Learn: Same contract as the SQL adapters, backed by dicts. An asyncio.Lock
makes check-then-insert atomic, which is what the unique index does for
the SQL adapter — so concurrent registrations behave the same in tests.
"""

import asyncio
from typing import Optional

from gatehouse.db.models import Account, Address, Profile, new_id, utcnow
from gatehouse.errors import DuplicateEmail


class InMemoryCredentialStore:
    def __init__(self):
        self.accounts: dict[str, Account] = {}
        self._lock = asyncio.Lock()

    # ── write operations ─────────────────────────────────────

    async def insert(self, email: str, password_hash: str, name: str) -> Account:
        async with self._lock:
            if any(a.email == email for a in self.accounts.values()):
                raise DuplicateEmail()
            account = Account(
                id=new_id(),
                email=email,
                password_hash=password_hash,
                name=name,
                created_at=utcnow(),
                last_login_at=None,
            )
            self.accounts[account.id] = account
            return account

    async def touch_last_login(self, account_id: str) -> None:
        account = self.accounts.get(account_id)
        if account:
            account.last_login_at = utcnow()

    # ── read operations ──────────────────────────────────────

    async def find_by_email(self, email: str) -> Optional[Account]:
        for account in self.accounts.values():
            if account.email == email:
                return account
        return None

    async def find_by_id(self, account_id: str) -> Optional[Account]:
        return self.accounts.get(account_id)


class InMemoryProfileStore:
    def __init__(self):
        self.profiles: dict[str, Profile] = {}
        self.addresses: dict[str, list[Address]] = {}
        self._lock = asyncio.Lock()

    # ── profiles ─────────────────────────────────────────────

    async def insert_profile(
        self, profile_id: str, email: str, name: str, phone: Optional[str] = None
    ) -> Profile:
        async with self._lock:
            if profile_id in self.profiles or any(
                p.email == email for p in self.profiles.values()
            ):
                raise DuplicateEmail()
            now = utcnow()
            profile = Profile(
                id=profile_id,
                email=email,
                name=name,
                phone=phone,
                created_at=now,
                updated_at=now,
                deleted_at=None,
            )
            self.profiles[profile_id] = profile
            return profile

    async def find_profile(
        self, profile_id: str, include_deleted: bool = False
    ) -> Optional[Profile]:
        profile = self.profiles.get(profile_id)
        if profile is None or (profile.is_deleted and not include_deleted):
            return None
        return profile

    async def update_profile(
        self,
        profile_id: str,
        name: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> Optional[Profile]:
        profile = await self.find_profile(profile_id)
        if profile is None:
            return None
        if name is not None:
            profile.name = name
        if phone is not None:
            profile.phone = phone
        profile.updated_at = utcnow()
        return profile

    async def soft_delete_profile(self, profile_id: str) -> bool:
        profile = await self.find_profile(profile_id)
        if profile is None:
            return False
        profile.deleted_at = utcnow()
        return True

    # ── addresses ────────────────────────────────────────────

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
        address = Address(
            id=new_id(),
            profile_id=profile_id,
            street=street,
            city=city,
            state=state,
            postal_code=postal_code,
            country=country,
            is_default=is_default,
            created_at=utcnow(),
        )
        self.addresses.setdefault(profile_id, []).append(address)
        return address

    async def list_addresses(self, profile_id: str) -> list[Address]:
        return list(self.addresses.get(profile_id, []))
