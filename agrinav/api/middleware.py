"""API middleware: localhost restriction and JSON error envelopes."""

from __future__ import annotations

from typing import Callable

from aiohttp import web

from ..core.logging_utils import get_module_logger
from ..nav_core.errors import LineError, LineNotFoundError

logger = get_module_logger("APIMiddleware")

LOCALHOST_IPS = {"127.0.0.1", "::1", "::ffff:127.0.0.1"}


def error_response(code: str, message: str, status: int) -> web.Response:
    return web.json_response(
        {"error": {"code": code, "message": message}, "status": status},
        status=status,
    )


@web.middleware
async def localhost_only_middleware(request: web.Request, handler: Callable) -> web.StreamResponse:
    """Reject requests from any peer other than the local host."""
    peername = request.transport.get_extra_info("peername") if request.transport else None
    if peername and peername[0] not in LOCALHOST_IPS:
        logger.warning("Rejected request from non-localhost IP: %s", peername[0])
        return error_response("ACCESS_DENIED", "API access is restricted to localhost only", 403)
    return await handler(request)


@web.middleware
async def error_handling_middleware(request: web.Request, handler: Callable) -> web.StreamResponse:
    """Format every failure as ``{"error": {"code", "message"}, "status"}``."""
    try:
        return await handler(request)
    except web.HTTPException as exc:
        code = exc.reason.upper().replace(" ", "_") if exc.reason else "HTTP_ERROR"
        return error_response(code, exc.text or str(exc), exc.status)
    except LineNotFoundError as exc:
        return error_response("LINE_NOT_FOUND", str(exc), 404)
    except LineError as exc:
        return error_response("INVALID_LINE", str(exc), 400)
    except Exception as exc:
        logger.exception("Unhandled error in %s %s", request.method, request.path)
        return error_response("INTERNAL_ERROR", str(exc) or type(exc).__name__, 500)


__all__ = [
    "error_handling_middleware",
    "error_response",
    "localhost_only_middleware",
]
