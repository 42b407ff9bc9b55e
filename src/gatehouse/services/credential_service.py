"""Credential service — registration, login, and token verification.

Learn: Service layer separates business logic from HTTP routing.
The auth service's routes call this; this calls the credential store,
the password hasher, and the token codec, all injected at construction.

bcrypt is deliberately slow (~100ms at 12 rounds), so hashing runs in a
worker thread instead of blocking the event loop for every other request.
"""

import asyncio
from dataclasses import dataclass

import structlog

from gatehouse.auth.jwt import TokenCodec
from gatehouse.auth.password import PasswordHasher
from gatehouse.db.models import Account
from gatehouse.errors import DuplicateEmail, InvalidCredentials, NotFound, ValidationError
from gatehouse.stores.base import CredentialStore

logger = structlog.get_logger()


@dataclass(frozen=True)
class LoginResult:
    token: str
    account_id: str
    name: str


class CredentialService:
    """Business logic for accounts and session tokens."""

    def __init__(
        self,
        store: CredentialStore,
        hasher: PasswordHasher,
        codec: TokenCodec,
    ):
        self.store = store
        self.hasher = hasher
        self.codec = codec

    async def register(self, email: str, password: str, name: str) -> str:
        """Create an account and return its id.

        Raises ValidationError if any field is blank, DuplicateEmail if the
        email is taken. The store's insert is the atomic uniqueness check;
        the lookup first only avoids paying for a hash on obvious duplicates.
        """
        email = (email or "").strip()
        name = (name or "").strip()
        if not email or not password or not name:
            raise ValidationError("Email, name and password are required")

        if await self.store.find_by_email(email):
            raise DuplicateEmail()

        password_hash = await asyncio.to_thread(self.hasher.hash, password)
        account = await self.store.insert(
            email=email, password_hash=password_hash, name=name
        )
        logger.info("auth.registered", account_id=account.id)
        return account.id

    async def login(self, email: str, password: str) -> LoginResult:
        """Check credentials and mint a session token.

        Unknown email and wrong password raise the same InvalidCredentials,
        and both pay for one bcrypt verification.
        """
        account = await self.store.find_by_email((email or "").strip())
        if account is None:
            await asyncio.to_thread(self.hasher.verify_dummy, password or "")
            logger.info("auth.login_failed")
            raise InvalidCredentials()

        ok = await asyncio.to_thread(
            self.hasher.verify, password or "", account.password_hash
        )
        if not ok:
            logger.info("auth.login_failed")
            raise InvalidCredentials()

        await self.store.touch_last_login(account.id)
        token = self.codec.sign(account.id)
        logger.info("auth.logged_in", account_id=account.id)
        return LoginResult(token=token, account_id=account.id, name=account.name)

    def verify_token(self, token: str) -> str:
        """Return the account id a valid token is bound to.

        Raises InvalidToken for expired, forged, or malformed tokens.
        """
        return self.codec.verify(token).subject_id

    async def get_account(self, account_id: str) -> Account:
        account = await self.store.find_by_id(account_id)
        if account is None:
            raise NotFound("Account not found")
        return account
