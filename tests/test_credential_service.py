"""Credential service: register, login, verify_token.

Learn: Tests the service directly against the in-memory store — no HTTP.
"""

import asyncio

import pytest

from gatehouse.auth.jwt import TokenCodec
from gatehouse.auth.password import PasswordHasher
from gatehouse.errors import (
    DuplicateEmail,
    InvalidCredentials,
    InvalidToken,
    NotFound,
    ValidationError,
)
from gatehouse.services.credential_service import CredentialService
from gatehouse.stores.memory import InMemoryCredentialStore
from tests.helpers import TEST_SECRET


class CountingHasher(PasswordHasher):
    """Counts full bcrypt verifications, real or dummy."""

    def __init__(self, rounds: int = 4):
        self.verifications = 0
        super().__init__(rounds=rounds)

    def verify(self, password: str, password_hash: str) -> bool:
        self.verifications += 1
        return super().verify(password, password_hash)


@pytest.fixture
def store():
    return InMemoryCredentialStore()


@pytest.fixture
def hasher():
    return CountingHasher()


@pytest.fixture
def svc(store, hasher):
    return CredentialService(store=store, hasher=hasher, codec=TokenCodec(TEST_SECRET))


# ═══════════════════════════════════════════════════════════
# Registration
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_register_then_login_then_verify(svc):
    account_id = await svc.register("alice@example.com", "Secr3t!", "Alice")
    result = await svc.login("alice@example.com", "Secr3t!")
    assert result.account_id == account_id
    assert result.name == "Alice"
    assert svc.verify_token(result.token) == account_id


@pytest.mark.asyncio
async def test_register_stores_hash_not_plaintext(svc, store):
    account_id = await svc.register("alice@example.com", "Secr3t!", "Alice")
    account = store.accounts[account_id]
    assert account.password_hash != "Secr3t!"
    assert account.password_hash.startswith("$2b$")


@pytest.mark.asyncio
async def test_register_generates_unique_ids(svc):
    a = await svc.register("a@example.com", "pw-a", "A")
    b = await svc.register("b@example.com", "pw-b", "B")
    assert a != b


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "email,password,name",
    [
        ("", "pw", "Name"),
        ("x@example.com", "", "Name"),
        ("x@example.com", "pw", ""),
        ("   ", "pw", "Name"),
        ("x@example.com", "pw", "   "),
    ],
)
async def test_register_requires_all_fields(svc, store, email, password, name):
    with pytest.raises(ValidationError):
        await svc.register(email, password, name)
    assert store.accounts == {}


@pytest.mark.asyncio
async def test_register_duplicate_email_leaves_account_unchanged(svc, store):
    account_id = await svc.register("alice@example.com", "Secr3t!", "Alice")
    original_hash = store.accounts[account_id].password_hash

    with pytest.raises(DuplicateEmail):
        await svc.register("alice@example.com", "other-password", "Impostor")

    assert len(store.accounts) == 1
    account = store.accounts[account_id]
    assert account.name == "Alice"
    assert account.password_hash == original_hash
    # Original password still works
    await svc.login("alice@example.com", "Secr3t!")


@pytest.mark.asyncio
async def test_email_is_case_sensitive(svc):
    a = await svc.register("Alice@example.com", "pw", "Alice")
    b = await svc.register("alice@example.com", "pw", "alice")
    assert a != b


@pytest.mark.asyncio
async def test_concurrent_double_registration(svc, store):
    """Two simultaneous registrations for one email: exactly one wins."""
    results = await asyncio.gather(
        svc.register("race@example.com", "pw-1", "First"),
        svc.register("race@example.com", "pw-2", "Second"),
        return_exceptions=True,
    )
    successes = [r for r in results if isinstance(r, str)]
    failures = [r for r in results if isinstance(r, DuplicateEmail)]
    assert len(successes) == 1
    assert len(failures) == 1
    assert len(store.accounts) == 1


# ═══════════════════════════════════════════════════════════
# Login
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_login_wrong_password_and_unknown_email_indistinguishable(svc):
    await svc.register("alice@example.com", "Secr3t!", "Alice")

    with pytest.raises(InvalidCredentials) as wrong_pw:
        await svc.login("alice@example.com", "wrong")
    with pytest.raises(InvalidCredentials) as unknown:
        await svc.login("nobody@example.com", "Secr3t!")

    assert type(wrong_pw.value) is type(unknown.value)
    assert wrong_pw.value.message == unknown.value.message


@pytest.mark.asyncio
async def test_login_unknown_email_still_pays_for_bcrypt(svc, hasher):
    """Same work on both failure paths: one full bcrypt verification each."""
    await svc.register("alice@example.com", "Secr3t!", "Alice")

    hasher.verifications = 0
    with pytest.raises(InvalidCredentials):
        await svc.login("nobody@example.com", "whatever")
    assert hasher.verifications == 1

    hasher.verifications = 0
    with pytest.raises(InvalidCredentials):
        await svc.login("alice@example.com", "whatever")
    assert hasher.verifications == 1


@pytest.mark.asyncio
async def test_login_records_last_login(svc, store):
    account_id = await svc.register("alice@example.com", "Secr3t!", "Alice")
    assert store.accounts[account_id].last_login_at is None

    await svc.login("alice@example.com", "Secr3t!")
    assert store.accounts[account_id].last_login_at is not None


@pytest.mark.asyncio
async def test_failed_login_does_not_record_last_login(svc, store):
    account_id = await svc.register("alice@example.com", "Secr3t!", "Alice")
    with pytest.raises(InvalidCredentials):
        await svc.login("alice@example.com", "nope")
    assert store.accounts[account_id].last_login_at is None


# ═══════════════════════════════════════════════════════════
# Tokens and accounts
# ═══════════════════════════════════════════════════════════


def test_verify_token_rejects_foreign_token(svc):
    foreign = TokenCodec("a-completely-different-secret-value").sign("someone")
    with pytest.raises(InvalidToken):
        svc.verify_token(foreign)


@pytest.mark.asyncio
async def test_get_account(svc):
    account_id = await svc.register("alice@example.com", "Secr3t!", "Alice")
    account = await svc.get_account(account_id)
    assert account.email == "alice@example.com"

    with pytest.raises(NotFound):
        await svc.get_account("missing-id")
