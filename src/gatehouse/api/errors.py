"""Exception handlers — every failure leaves as a structured JSON body.

Learn: Domain errors map to {"error": <code>, "detail": <message>} with the
status code the error class declares. 401s carry WWW-Authenticate: Bearer.
Request bodies FastAPI can't parse or validate are reported as
ValidationError (400), and routing errors (unknown path, wrong method)
keep their status but get the same body shape. Anything unexpected is
logged with its traceback and answered with a generic 500; stack traces
and connection details never reach the client.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from gatehouse.errors import (
    AuthenticationError,
    DependencyUnavailable,
    GatehouseError,
    IdentityMirrorError,
    ValidationError,
)

logger = structlog.get_logger()

HTTP_ERROR_CODES = {
    404: "NotFound",
    405: "MethodNotAllowed",
}


async def handle_domain_error(request: Request, exc: GatehouseError) -> JSONResponse:
    headers = None
    if isinstance(exc, AuthenticationError):
        headers = {"WWW-Authenticate": "Bearer"}
    if isinstance(exc, (DependencyUnavailable, IdentityMirrorError)):
        logger.error(
            "request.dependency_failed",
            path=request.url.path,
            error=exc.code,
            service=getattr(exc, "service", None),
            account_id=getattr(exc, "account_id", None),
        )
    return JSONResponse(
        status_code=exc.status_code, content=exc.to_dict(), headers=headers
    )


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return ValidationError.default_message
    first = errors[0]
    if first.get("type") == "json_invalid":
        return "Request body must be valid JSON"
    loc = [p for p in first.get("loc", ()) if p not in ("body", "query", "path")]
    field = ".".join(str(p) for p in loc)
    message = first.get("msg", "invalid value")
    return f"{field}: {message}" if field else message


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    error = ValidationError(_describe_validation_error(exc))
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def handle_http_error(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": HTTP_ERROR_CODES.get(exc.status_code, "HTTPError"),
            "detail": exc.detail,
        },
        headers=getattr(exc, "headers", None),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("request.unhandled_error", path=request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": "InternalError", "detail": "Internal server error"},
    )


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GatehouseError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
