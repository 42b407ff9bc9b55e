"""Registration across two stores — credentials first, then the profile.

Learn: There is no distributed transaction here. The gateway:
1. asks the auth service to create the account (commit #1)
2. only then asks the user service to create the matching profile (commit #2)

If step 2 fails the account still exists with no profile. Registration is
reported as failed (a session without a profile is useless), nothing is
rolled back, and the orphan is logged by account id. Because the profile
call is idempotent, the gap can be closed later: ensure_profile() — used by
the profile read path — recreates it from the account record.
"""

import structlog

from gatehouse.clients.auth import AuthServiceClient
from gatehouse.clients.users import UserServiceClient
from gatehouse.errors import GatehouseError, IdentityMirrorError, NotFound

logger = structlog.get_logger()


class RegistrationCoordinator:
    def __init__(self, auth: AuthServiceClient, users: UserServiceClient):
        self.auth = auth
        self.users = users

    async def register(self, email: str, password: str, name: str) -> str:
        """Create the account and its profile; return the account id.

        Errors from the credential half (ValidationError, DuplicateEmail,
        DependencyUnavailable) propagate unchanged. Any failure of the
        profile half raises IdentityMirrorError.
        """
        account_id = await self.auth.register(email, password, name)

        try:
            await self.users.create_profile(account_id, email.strip(), name.strip())
        except GatehouseError as e:
            logger.error(
                "registration.mirror_failed",
                account_id=account_id,
                error=e.code,
            )
            raise IdentityMirrorError(account_id) from e

        logger.info("registration.completed", account_id=account_id)
        return account_id

    async def ensure_profile(self, user_id: str) -> dict:
        """Return the profile for user_id, creating it from the account if missing.

        Raises NotFound if there is no account either, or if the profile
        was soft-deleted.
        """
        try:
            return await self.users.get_profile(user_id)
        except NotFound:
            pass

        account = await self.auth.get_account(user_id)
        profile = await self.users.create_profile(
            user_id, account["email"], account["name"]
        )
        logger.warning("registration.profile_reconciled", account_id=user_id)
        return profile
