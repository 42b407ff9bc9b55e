"""Request ID middleware — unique ID per request for tracing.

Learn: Every request gets a UUID, either from the incoming X-Request-ID
header or auto-generated. The ID is bound to structlog's contextvars so it
appears in every log entry for the request, returned in the response
header, and forwarded by the gateway's service clients so one ID follows
a request through all three services.

The binding is scoped to the request: whatever was bound before (e.g. by
an outer app calling this one in-process) is restored on the way out.
"""

import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Generate and propagate a unique request ID."""

    def __init__(self, app, service: str = "gatehouse"):
        super().__init__(app)
        self.service = service

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        with structlog.contextvars.bound_contextvars(
            request_id=request_id, service=self.service
        ):
            response: Response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


def current_request_id() -> str | None:
    return structlog.contextvars.get_contextvars().get("request_id")
