"""Shared test data and helpers."""

import httpx
from httpx import AsyncClient

TEST_SECRET = "test-signing-secret-0123456789abcdef"

ALICE = {"email": "alice@example.com", "password": "Secr3t!", "name": "Alice"}
BOB = {"email": "bob@example.com", "password": "hunter22", "name": "Bob"}


async def register_and_login(client: AsyncClient, user: dict) -> tuple[str, str]:
    """Register through the gateway, log in, return (user_id, token)."""
    r = await client.post("/api/v1/auth/register", json=user)
    assert r.status_code == 201, r.text
    r = await client.post(
        "/api/v1/auth/login",
        json={"email": user["email"], "password": user["password"]},
    )
    assert r.status_code == 200, r.text
    body = r.json()
    return body["user_id"], body["token"]


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def failing_transport(exc: Exception) -> httpx.MockTransport:
    """A transport whose every request fails with exc (e.g. ConnectError)."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise exc

    return httpx.MockTransport(handler)


def status_transport(status_code: int) -> httpx.MockTransport:
    """A transport that answers every request with a bare status code."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, text="upstream exploded")

    return httpx.MockTransport(handler)
