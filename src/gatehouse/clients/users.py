from typing import Optional

from gatehouse.clients.base import ServiceClient


class UserServiceClient(ServiceClient):
    """Client for the user service's internal API. Returns JSON dicts."""

    service_name = "user-service"

    async def create_profile(
        self, user_id: str, email: str, name: str, phone: Optional[str] = None
    ) -> dict:
        """Idempotent: an existing profile for user_id is returned as-is."""
        return await self._request(
            "POST",
            "/api/v1/profiles",
            json={"id": user_id, "email": email, "name": name, "phone": phone},
        )

    async def get_profile(self, user_id: str) -> dict:
        return await self._request("GET", f"/api/v1/profiles/{user_id}")

    async def update_profile(
        self, user_id: str, name: Optional[str] = None, phone: Optional[str] = None
    ) -> dict:
        return await self._request(
            "PATCH",
            f"/api/v1/profiles/{user_id}",
            json={"name": name, "phone": phone},
        )

    async def delete_profile(self, user_id: str) -> None:
        await self._request("DELETE", f"/api/v1/profiles/{user_id}")

    async def add_address(self, user_id: str, address: dict) -> dict:
        return await self._request(
            "POST", f"/api/v1/profiles/{user_id}/addresses", json=address
        )

    async def list_addresses(self, user_id: str) -> list[dict]:
        return await self._request("GET", f"/api/v1/profiles/{user_id}/addresses")
