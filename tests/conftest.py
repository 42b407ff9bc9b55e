"""Test fixtures — all three services wired together in one process.

Learn: Each test gets fresh in-memory stores and fresh apps. The gateway's
service clients talk to the auth and user apps through httpx's
ASGITransport, so a request to the gateway really does cross both
internal HTTP APIs — without sockets, databases, or a running server.

bcrypt runs at its minimum cost (4 rounds) to keep the suite fast.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from gatehouse.app import create_auth_app, create_gateway_app, create_user_app
from gatehouse.config import Settings
from gatehouse.stores.memory import InMemoryCredentialStore, InMemoryProfileStore
from tests.helpers import ALICE, TEST_SECRET, register_and_login


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        jwt_secret=TEST_SECRET,
        bcrypt_rounds=4,
        environment="test",
        auth_service_url="http://auth",
        user_service_url="http://users",
        redis_url="",
    )


@pytest.fixture()
def credential_store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()


@pytest.fixture()
def profile_store() -> InMemoryProfileStore:
    return InMemoryProfileStore()


@pytest.fixture()
def auth_app(settings, credential_store):
    return create_auth_app(settings, store=credential_store)


@pytest.fixture()
def user_app(settings, profile_store):
    return create_user_app(settings, store=profile_store)


def build_gateway(settings, auth_transport, user_transport):
    return create_gateway_app(
        settings, auth_transport=auth_transport, user_transport=user_transport
    )


@pytest_asyncio.fixture()
async def gateway_client(settings, auth_app, user_app):
    """HTTP client for the gateway, backed by the real auth and user apps."""
    app = build_gateway(
        settings, ASGITransport(app=auth_app), ASGITransport(app=user_app)
    )
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    await app.state.auth_client.aclose()
    await app.state.user_client.aclose()


@pytest_asyncio.fixture()
async def auth_client(auth_app):
    """HTTP client for the auth service's internal API."""
    async with AsyncClient(transport=ASGITransport(app=auth_app), base_url="http://auth") as ac:
        yield ac


@pytest_asyncio.fixture()
async def user_client(user_app):
    """HTTP client for the user service's internal API."""
    async with AsyncClient(transport=ASGITransport(app=user_app), base_url="http://users") as ac:
        yield ac


@pytest_asyncio.fixture()
async def alice(gateway_client) -> tuple[str, str]:
    return await register_and_login(gateway_client, ALICE)

