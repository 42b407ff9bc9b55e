"""Shared request/response handling for internal service clients.

Learn: The internal services answer errors with {"error": <code>,
"detail": <message>}. A client turns a known code back into the same
exception class, so ValidationError, NotFound, etc. cross the service
boundary unchanged. Anything else — connect errors, timeouts, 5xx,
unparseable bodies — becomes DependencyUnavailable, which the gateway
reports as a 500 rather than an auth or validation failure.

Every call is bounded by the client's httpx timeout. Cancelling the
awaiting task (client disconnect) abandons the in-flight request.
"""

from typing import Any, Optional

import httpx
import structlog

from gatehouse.errors import ERRORS_BY_CODE, DependencyUnavailable
from gatehouse.middleware.request_id import current_request_id

logger = structlog.get_logger()


async def _forward_request_id(request: httpx.Request) -> None:
    request_id = current_request_id()
    if request_id:
        request.headers["X-Request-ID"] = request_id


class ServiceClient:
    service_name = "service"

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.http = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
            event_hooks={"request": [_forward_request_id]},
        )

    async def aclose(self) -> None:
        await self.http.aclose()

    async def _request(
        self, method: str, path: str, *, json: Optional[dict] = None
    ) -> Any:
        try:
            resp = await self.http.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.warning(
                "client.unreachable",
                service=self.service_name,
                path=path,
                error_type=type(e).__name__,
            )
            raise DependencyUnavailable(self.service_name) from e

        if resp.is_success:
            return resp.json() if resp.content else None
        raise self._error_from(resp)

    def _error_from(self, resp: httpx.Response) -> Exception:
        try:
            body = resp.json()
        except ValueError:
            body = {}
        code = body.get("error") if isinstance(body, dict) else None
        error_cls = ERRORS_BY_CODE.get(code or "")
        if error_cls is not None and resp.status_code < 500:
            return error_cls(body.get("detail"))

        logger.warning(
            "client.error_response",
            service=self.service_name,
            status=resp.status_code,
            error=code,
        )
        return DependencyUnavailable(self.service_name)
