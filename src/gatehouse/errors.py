"""Error taxonomy shared by all three services.

Services raise these to express business rule violations. The API layer maps
them to a structured JSON body and status code (see gatehouse.api.errors),
and the service clients map that body back to the same exception class, so
an error raised in the auth or user service reaches the gateway's caller
unchanged.
"""

from typing import Optional


class GatehouseError(Exception):
    """Base class for all domain errors."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def code(self) -> str:
        return type(self).__name__

    def to_dict(self) -> dict:
        return {"error": self.code, "detail": self.message}


class ValidationError(GatehouseError):
    """Input violates a validation rule. Caller's fault."""

    status_code = 400
    default_message = "Invalid request"


class DuplicateEmail(GatehouseError):
    """An account or profile already uses this email."""

    status_code = 409
    default_message = "Email already registered"


class AuthenticationError(GatehouseError):
    """Base for 401 failures. Messages are deliberately generic."""

    status_code = 401
    default_message = "Authentication required"


class InvalidCredentials(AuthenticationError):
    """Unknown email or wrong password — the two are indistinguishable."""

    default_message = "Invalid email or password"


class InvalidToken(AuthenticationError):
    """Token is expired, forged, or malformed."""

    default_message = "Invalid or expired token"


class MissingAuth(AuthenticationError):
    default_message = "Authorization header required"


class MalformedAuth(AuthenticationError):
    default_message = "Authorization header must be 'Bearer <token>'"


class Forbidden(GatehouseError):
    """Authenticated, but not entitled to the resource."""

    status_code = 403
    default_message = "Forbidden: cannot access other users' data"


class NotFound(GatehouseError):
    status_code = 404
    default_message = "Not found"


class DependencyUnavailable(GatehouseError):
    """A store or downstream service could not be reached.

    The message is safe to return to clients; `service` is for logs.
    """

    status_code = 500
    default_message = "A required service is unavailable"

    def __init__(self, service: str, message: Optional[str] = None):
        super().__init__(message)
        self.service = service


class IdentityMirrorError(GatehouseError):
    """The account was created but its profile could not be.

    No rollback happens; `account_id` identifies the orphaned account.
    """

    status_code = 500
    default_message = "Registration failed: profile could not be created"

    def __init__(self, account_id: str, message: Optional[str] = None):
        super().__init__(message)
        self.account_id = account_id


# Remote error code → exception class, used by the service clients.
ERRORS_BY_CODE: dict[str, type[GatehouseError]] = {
    cls.__name__: cls
    for cls in (
        ValidationError,
        DuplicateEmail,
        InvalidCredentials,
        InvalidToken,
        MissingAuth,
        MalformedAuth,
        Forbidden,
        NotFound,
    )
}
