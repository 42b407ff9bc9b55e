"""CLI commands against a gateway served in-process.

Learn: The CLI builds its HTTP client through _client(); the tests patch
it to route through ASGITransport into a full gateway, so commands run
end to end without a server.
"""

import httpx
import pytest
from click.testing import CliRunner
from httpx import ASGITransport

from gatehouse.cli import main as cli
from tests.helpers import ALICE


@pytest.fixture()
def runner(monkeypatch, settings, auth_app, user_app):
    from gatehouse.app import create_gateway_app

    gateway = create_gateway_app(
        settings,
        auth_transport=ASGITransport(app=auth_app),
        user_transport=ASGITransport(app=user_app),
    )

    def client(token=None):
        headers = {"Authorization": f"Bearer {token}"} if token else None
        return httpx.AsyncClient(
            transport=ASGITransport(app=gateway),
            base_url="http://test",
            headers=headers,
        )

    monkeypatch.setattr(cli, "_client", client)
    return CliRunner()


def test_register_login_whoami(runner):
    result = runner.invoke(
        cli.main,
        ["register", ALICE["email"], ALICE["name"], "--password", ALICE["password"]],
    )
    assert result.exit_code == 0, result.output
    assert "Registered alice@example.com" in result.output

    result = runner.invoke(
        cli.main, ["login", ALICE["email"], "--password", ALICE["password"]]
    )
    assert result.exit_code == 0, result.output
    lines = dict(
        line.split(":", 1) for line in result.output.strip().splitlines()
    )
    user_id = lines["user_id"].strip()
    token = lines["token"].strip()

    result = runner.invoke(cli.main, ["whoami", user_id, "--token", token])
    assert result.exit_code == 0, result.output
    assert '"email": "alice@example.com"' in result.output
    assert '"addresses": []' in result.output


def test_login_failure_exits_nonzero(runner):
    result = runner.invoke(
        cli.main, ["login", "nobody@example.com", "--password", "x"]
    )
    assert result.exit_code == 1
    assert "Invalid email or password" in result.output


@pytest.mark.parametrize(
    "service,target,port",
    [
        ("gateway", "gatehouse.app:create_gateway_app", 8080),
        ("auth", "gatehouse.app:create_auth_app", 8001),
        ("users", "gatehouse.app:create_user_app", 8002),
    ],
)
def test_serve_builds_only_the_named_service(monkeypatch, service, target, port):
    import uvicorn

    calls = []
    monkeypatch.setattr(uvicorn, "run", lambda app, **kw: calls.append((app, kw)))

    result = CliRunner().invoke(cli.main, ["serve", service])
    assert result.exit_code == 0, result.output
    ((app, kwargs),) = calls
    assert app == target
    assert kwargs["factory"] is True
    assert kwargs["port"] == port
