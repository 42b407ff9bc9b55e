"""Typed async HTTP clients the gateway uses to reach the internal services."""

from gatehouse.clients.auth import AuthServiceClient
from gatehouse.clients.users import UserServiceClient

__all__ = ["AuthServiceClient", "UserServiceClient"]
