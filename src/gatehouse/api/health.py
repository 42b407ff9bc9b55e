"""Health check endpoints.

Learn: The auth and user services check their own database; the gateway
checks that both services answer. Failures degrade the status rather
than failing the request, so the endpoint stays useful while debugging.
"""

import httpx
from fastapi import APIRouter, Request
from sqlalchemy import text

from gatehouse import __version__

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """Check server health and dependency connectivity."""
    checks = {"server": "ok", "version": __version__}
    state = request.app.state

    engine = getattr(state, "engine", None)
    if engine is not None:
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            checks["database"] = "ok"
        except Exception as e:
            checks["database"] = f"error: {type(e).__name__}"

    for name in ("auth_client", "user_client"):
        client = getattr(state, name, None)
        if client is None:
            continue
        try:
            resp = await client.http.get("/health")
            resp.raise_for_status()
            checks[client.service_name] = "ok"
        except httpx.HTTPError as e:
            checks[client.service_name] = f"error: {type(e).__name__}"

    status = "healthy" if all(
        v == "ok" for k, v in checks.items() if k != "version"
    ) else "degraded"

    return {"status": status, **checks}
