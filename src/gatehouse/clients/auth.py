from dataclasses import dataclass

from gatehouse.clients.base import ServiceClient
from gatehouse.errors import InvalidToken


@dataclass(frozen=True)
class SessionToken:
    token: str
    user_id: str
    name: str


class AuthServiceClient(ServiceClient):
    """Client for the auth service's internal API."""

    service_name = "auth-service"

    async def register(self, email: str, password: str, name: str) -> str:
        data = await self._request(
            "POST",
            "/api/v1/accounts",
            json={"email": email, "password": password, "name": name},
        )
        return data["user_id"]

    async def login(self, email: str, password: str) -> SessionToken:
        data = await self._request(
            "POST", "/api/v1/sessions", json={"email": email, "password": password}
        )
        return SessionToken(
            token=data["token"], user_id=data["user_id"], name=data["name"]
        )

    async def verify_token(self, token: str) -> str:
        """Resolve a token to an account id.

        A verdict of "invalid" raises InvalidToken; failing to get a
        verdict at all raises DependencyUnavailable.
        """
        data = await self._request(
            "POST", "/api/v1/tokens/verify", json={"token": token}
        )
        if not data.get("valid"):
            raise InvalidToken()
        return data["user_id"]

    async def get_account(self, account_id: str) -> dict:
        return await self._request("GET", f"/api/v1/accounts/{account_id}")
