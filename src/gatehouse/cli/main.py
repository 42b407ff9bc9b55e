"""Gatehouse CLI — run the services and talk to the gateway.

Usage:
    gatehouse serve gateway                      # Run the public gateway (uvicorn)
    gatehouse serve auth                         # Run the auth service
    gatehouse init-db auth                       # Create the auth service tables
    gatehouse register alice@example.com Alice   # Register (prompts for password)
    gatehouse login alice@example.com            # Print a session token
    gatehouse whoami --token <token> <user_id>   # Fetch your profile
"""

from __future__ import annotations

import asyncio
import json
import os
import sys
from typing import Optional

import click
import httpx

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:8080"

SERVICES = {
    "gateway": ("gatehouse.app:create_gateway_app", "port"),
    "auth": ("gatehouse.app:create_auth_app", "auth_port"),
    "users": ("gatehouse.app:create_user_app", "user_port"),
}


def _api_url() -> str:
    return os.environ.get("GATEHOUSE_API_URL", DEFAULT_API_URL).rstrip("/")


def _client(token: Optional[str] = None) -> httpx.AsyncClient:
    """Build an async HTTP client pointed at the gateway."""
    headers = {"Authorization": f"Bearer {token}"} if token else None
    return httpx.AsyncClient(base_url=_api_url(), timeout=30.0, headers=headers)


def _pretty_json(data: dict | list) -> str:
    return json.dumps(data, indent=2, default=str)


def _fail(resp: httpx.Response) -> None:
    try:
        detail = resp.json().get("detail", resp.text)
    except ValueError:
        detail = resp.text
    click.secho(f"Error ({resp.status_code}): {detail}", fg="red", err=True)
    sys.exit(1)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version="0.1.0", prog_name="gatehouse")
def main():
    """Gatehouse — account, session and profile services."""


# ---------------------------------------------------------------------------
# Server commands
# ---------------------------------------------------------------------------


@main.command()
@click.argument("service", type=click.Choice(sorted(SERVICES)))
@click.option("--reload", is_flag=True, help="Auto-reload on code changes")
def serve(service: str, reload: bool):
    """Run one of the services with uvicorn.

    Only the named service's app is built (uvicorn calls its factory).
    """
    import uvicorn

    from gatehouse.config import settings

    app_path, port_field = SERVICES[service]
    uvicorn.run(
        app_path,
        factory=True,
        host=settings.host,
        port=getattr(settings, port_field),
        reload=reload,
    )


@main.command("init-db")
@click.argument("service", type=click.Choice(["auth", "users"]))
def init_db(service: str):
    """Create the tables for a service's database."""
    asyncio.run(_init_db_impl(service))
    click.secho(f"{service} schema ready", fg="green")


async def _init_db_impl(service: str):
    from gatehouse.config import settings
    from gatehouse.db.engine import build_engine, create_schema
    from gatehouse.db.models import AuthBase, ProfileBase

    if service == "auth":
        url, base = settings.auth_database_url, AuthBase
    else:
        url, base = settings.user_database_url, ProfileBase

    engine = build_engine(url, settings)
    try:
        await create_schema(engine, base)
    finally:
        await engine.dispose()


# ---------------------------------------------------------------------------
# Client commands
# ---------------------------------------------------------------------------


@main.command()
@click.argument("email")
@click.argument("name")
@click.password_option()
def register(email: str, name: str, password: str):
    """Register a new account through the gateway."""
    asyncio.run(_register_impl(email, name, password))


async def _register_impl(email: str, name: str, password: str):
    async with _client() as c:
        r = await c.post(
            "/api/v1/auth/register",
            json={"email": email, "name": name, "password": password},
        )
    if r.status_code != 201:
        _fail(r)
    click.secho(f"Registered {email} → {r.json()['user_id']}", fg="green")


@main.command()
@click.argument("email")
@click.option("--password", prompt=True, hide_input=True)
def login(email: str, password: str):
    """Log in and print the session token."""
    asyncio.run(_login_impl(email, password))


async def _login_impl(email: str, password: str):
    async with _client() as c:
        r = await c.post(
            "/api/v1/auth/login", json={"email": email, "password": password}
        )
    if r.status_code != 200:
        _fail(r)
    body = r.json()
    click.echo(f"user_id: {body['user_id']}")
    click.echo(f"token:   {body['token']}")


@main.command()
@click.argument("user_id")
@click.option(
    "--token",
    envvar="GATEHOUSE_TOKEN",
    required=True,
    help="Session token (or set GATEHOUSE_TOKEN)",
)
def whoami(user_id: str, token: str):
    """Show the profile and addresses for USER_ID."""
    asyncio.run(_whoami_impl(user_id, token))


async def _whoami_impl(user_id: str, token: str):
    async with _client(token) as c:
        r = await c.get(f"/api/v1/users/{user_id}")
        if r.status_code != 200:
            _fail(r)
        profile = r.json()
        r = await c.get(f"/api/v1/users/{user_id}/addresses")
        if r.status_code != 200:
            _fail(r)
        profile["addresses"] = r.json()
    click.echo(_pretty_json(profile))


if __name__ == "__main__":
    main()
