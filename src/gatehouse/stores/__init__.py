"""Persistence ports and their adapters.

Services depend on the Protocols in gatehouse.stores.base, never on a
concrete database. Two adapters implement them:

- gatehouse.stores.sql → SQLAlchemy asyncio (PostgreSQL in production)
- gatehouse.stores.memory → in-process dicts, for tests and local runs
"""

from gatehouse.stores.base import CredentialStore, ProfileStore
from gatehouse.stores.memory import InMemoryCredentialStore, InMemoryProfileStore
from gatehouse.stores.sql import SqlCredentialStore, SqlProfileStore

__all__ = [
    "CredentialStore",
    "InMemoryCredentialStore",
    "InMemoryProfileStore",
    "ProfileStore",
    "SqlCredentialStore",
    "SqlProfileStore",
]
