"""Exception to HTTP response mapping."""

import structlog
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = structlog.get_logger()


def _error(status_code: int, error: str, message: str, request_id: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "message": message, "request_id": request_id},
    )


def _describe_validation(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        field = ".".join(str(loc) for loc in err.get("loc", ()) if loc not in ("body", "query"))
        parts.append(f"{field}: {err.get('msg')}" if field else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    request_id = getattr(request.state, "request_id", "unknown")
    message = _describe_validation(exc)
    logger.warning("invalid_request", request_id=request_id, path=request.url.path, error=message)
    return _error(400, "bad_request", message, request_id)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    request_id = getattr(request.state, "request_id", "unknown")

    if isinstance(exc, ValueError):
        logger.warning("bad_request", request_id=request_id, error=str(exc))
        return _error(400, "bad_request", str(exc), request_id)

    if isinstance(exc, PermissionError):
        logger.warning("forbidden", request_id=request_id, error=str(exc))
        return _error(403, "forbidden", str(exc), request_id)

    if isinstance(exc, LookupError):
        message = exc.args[0] if exc.args else "Not found"
        logger.warning("not_found", request_id=request_id, error=message)
        return _error(404, "not_found", str(message), request_id)

    logger.exception("unhandled_exception", request_id=request_id, error=str(exc))
    return _error(500, "internal_server_error", "An unexpected error occurred", request_id)
