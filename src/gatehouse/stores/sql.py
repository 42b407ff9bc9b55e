"""SQLAlchemy store adapters.

Learn: Each call opens its own short-lived AsyncSession from the service's
session factory and commits before returning, so returned objects are
detached snapshots (expire_on_commit=False keeps their attributes loaded).
Relationship attributes are never touched on returned objects; addresses
are always fetched with their own query.

Driver-level failures (connection refused, timeouts) surface as
DependencyUnavailable; the original exception is logged, not returned.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import structlog
from sqlalchemy import select, update
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from gatehouse.db.models import Account, Address, Profile, utcnow
from gatehouse.errors import DependencyUnavailable, DuplicateEmail

logger = structlog.get_logger()


@asynccontextmanager
async def _session(
    factory: async_sessionmaker[AsyncSession], store: str
) -> AsyncIterator[AsyncSession]:
    try:
        async with factory() as session:
            yield session
    except IntegrityError:
        raise
    except (DBAPIError, OSError) as e:
        logger.error("store.unavailable", store=store, error_type=type(e).__name__)
        raise DependencyUnavailable(store) from e


async def _commit_unique(db: AsyncSession) -> None:
    """Commit an insert guarded by a unique key; a clash is DuplicateEmail."""
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise DuplicateEmail()


class SqlCredentialStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def insert(self, email: str, password_hash: str, name: str) -> Account:
        async with _session(self.session_factory, "credential-store") as db:
            account = Account(email=email, password_hash=password_hash, name=name)
            db.add(account)
            await _commit_unique(db)
            return account

    async def find_by_email(self, email: str) -> Optional[Account]:
        async with _session(self.session_factory, "credential-store") as db:
            result = await db.execute(select(Account).where(Account.email == email))
            return result.scalars().first()

    async def find_by_id(self, account_id: str) -> Optional[Account]:
        async with _session(self.session_factory, "credential-store") as db:
            return await db.get(Account, account_id)

    async def touch_last_login(self, account_id: str) -> None:
        async with _session(self.session_factory, "credential-store") as db:
            await db.execute(
                update(Account)
                .where(Account.id == account_id)
                .values(last_login_at=utcnow())
            )
            await db.commit()


class SqlProfileStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    # ─── Profiles ───────────────────────────────────────

    async def insert_profile(
        self, profile_id: str, email: str, name: str, phone: Optional[str] = None
    ) -> Profile:
        async with _session(self.session_factory, "profile-store") as db:
            profile = Profile(id=profile_id, email=email, name=name, phone=phone)
            db.add(profile)
            await _commit_unique(db)
            return profile

    async def find_profile(
        self, profile_id: str, include_deleted: bool = False
    ) -> Optional[Profile]:
        async with _session(self.session_factory, "profile-store") as db:
            q = select(Profile).where(Profile.id == profile_id)
            if not include_deleted:
                q = q.where(Profile.deleted_at.is_(None))
            result = await db.execute(q)
            return result.scalars().first()

    async def update_profile(
        self,
        profile_id: str,
        name: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> Optional[Profile]:
        async with _session(self.session_factory, "profile-store") as db:
            result = await db.execute(
                select(Profile).where(
                    Profile.id == profile_id, Profile.deleted_at.is_(None)
                )
            )
            profile = result.scalars().first()
            if profile is None:
                return None
            if name is not None:
                profile.name = name
            if phone is not None:
                profile.phone = phone
            profile.updated_at = utcnow()
            await db.commit()
            return profile

    async def soft_delete_profile(self, profile_id: str) -> bool:
        async with _session(self.session_factory, "profile-store") as db:
            result = await db.execute(
                update(Profile)
                .where(Profile.id == profile_id, Profile.deleted_at.is_(None))
                .values(deleted_at=utcnow())
            )
            await db.commit()
            return result.rowcount > 0

    # ─── Addresses ──────────────────────────────────────

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
        async with _session(self.session_factory, "profile-store") as db:
            address = Address(
                profile_id=profile_id,
                street=street,
                city=city,
                state=state,
                postal_code=postal_code,
                country=country,
                is_default=is_default,
            )
            db.add(address)
            await db.commit()
            return address

    async def list_addresses(self, profile_id: str) -> list[Address]:
        async with _session(self.session_factory, "profile-store") as db:
            result = await db.execute(
                select(Address)
                .where(Address.profile_id == profile_id)
                .order_by(Address.created_at, Address.id)
            )
            return list(result.scalars().all())
