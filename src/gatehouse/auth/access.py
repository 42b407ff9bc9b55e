"""Self-access authorization.

No roles, no admin override: a caller may only act on the resource whose
owner id equals its own verified id.
"""

from gatehouse.errors import Forbidden


def authorize_self_access(identity_id: str, resource_owner_id: str) -> None:
    """Raise Forbidden unless the caller owns the resource."""
    if not identity_id or identity_id != resource_owner_id:
        raise Forbidden()
