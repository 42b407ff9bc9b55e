"""SQLAlchemy ORM models — one declarative base per service database.

Learn: The auth service and the user service own independent databases.
Accounts live under AuthBase; profiles and addresses under ProfileBase.
A profile's id equals its account's id, but nothing at the database level
ties the two together — there is no cross-database foreign key.

Ids are UUID4 strings in VARCHAR columns, so ids travel between services
as plain strings.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class AuthBase(DeclarativeBase):
    """Base class for the auth service's tables."""
    pass


class ProfileBase(DeclarativeBase):
    """Base class for the user service's tables."""
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


# ══════════════════════════════════════════════════════════════
# Auth service: credentials
# ══════════════════════════════════════════════════════════════


class Account(AuthBase):
    """Login credentials for one identity.

    Learn: password_hash is a bcrypt string; the plaintext is never stored.
    The unique constraint on email is what makes two concurrent
    registrations for the same address resolve to exactly one winner.
    """

    __tablename__ = "accounts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    last_login_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    def __repr__(self) -> str:
        # Keep the hash out of reprs (and therefore out of logs).
        return f"<Account id={self.id} email={self.email}>"


# ══════════════════════════════════════════════════════════════
# User service: profiles and addresses
# ══════════════════════════════════════════════════════════════


class Profile(ProfileBase):
    """Business-facing user record. Soft-deleted via deleted_at."""

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    addresses: Mapped[list["Address"]] = relationship(
        back_populates="profile",
        cascade="all, delete-orphan",
        order_by="Address.created_at",
    )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


class Address(ProfileBase):
    """A shipping/billing address.

    Learn: is_default is a plain flag — several addresses of one profile
    may carry it at the same time.
    """

    __tablename__ = "addresses"
    __table_args__ = (Index("idx_addresses_profile_id", "profile_id"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    profile_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    street: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    state: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    postal_code: Mapped[str] = mapped_column(String(20), nullable=False)
    country: Mapped[str] = mapped_column(String(100), nullable=False)
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )

    profile: Mapped["Profile"] = relationship(back_populates="addresses")
