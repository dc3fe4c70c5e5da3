"""REST routes over a running GuidanceSystem."""

from __future__ import annotations

from typing import Any, Dict

from aiohttp import web

from ..nav_core.guidance_system import GuidanceSystem
from ..nav_core.models import VehiclePosition
from .middleware import error_response

SYSTEM_KEY = web.AppKey("system", GuidanceSystem)


def setup_routes(app: web.Application) -> None:
    app.router.add_get("/api/v1/status", status_handler)
    app.router.add_get("/api/v1/guidance", guidance_handler)
    app.router.add_get("/api/v1/coverage", coverage_handler)
    app.router.add_post("/api/v1/coverage/clear", clear_coverage_handler)
    app.router.add_get("/api/v1/lines", list_lines_handler)
    app.router.add_post("/api/v1/lines", create_line_handler)
    app.router.add_post("/api/v1/lines/deactivate", deactivate_line_handler)
    app.router.add_post("/api/v1/lines/{line_id}/activate", activate_line_handler)
    app.router.add_delete("/api/v1/lines/{line_id}", delete_line_handler)


def _position_from_body(raw: Any) -> VehiclePosition:
    if not isinstance(raw, dict):
        raise ValueError("point must be an object with latitude/longitude")
    latitude = float(raw["latitude"])
    longitude = float(raw["longitude"])
    if not -90.0 <= latitude <= 90.0 or not -180.0 <= longitude <= 180.0:
        raise ValueError("latitude/longitude out of range")
    altitude = raw.get("altitude")
    return VehiclePosition(
        latitude=latitude,
        longitude=longitude,
        altitude=float(altitude) if altitude is not None else None,
    )


async def status_handler(request: web.Request) -> web.Response:
    """GET /api/v1/status - connectivity, fix and guidance snapshot."""
    return web.json_response(request.app[SYSTEM_KEY].snapshot())


async def guidance_handler(request: web.Request) -> web.Response:
    """GET /api/v1/guidance - latest guidance, or available=false."""
    guidance = request.app[SYSTEM_KEY].guidance
    if guidance is None:
        return web.json_response({"available": False})
    return web.json_response({"available": True, **guidance.to_dict()})


async def coverage_handler(request: web.Request) -> web.Response:
    """GET /api/v1/coverage - coverage statistics."""
    return web.json_response(request.app[SYSTEM_KEY].coverage.stats().to_dict())


async def clear_coverage_handler(request: web.Request) -> web.Response:
    """POST /api/v1/coverage/clear - drop the recorded path."""
    request.app[SYSTEM_KEY].clear_path()
    return web.json_response({"success": True})


async def list_lines_handler(request: web.Request) -> web.Response:
    """GET /api/v1/lines"""
    registry = request.app[SYSTEM_KEY].lines
    return web.json_response({
        "lines": [line.to_dict() for line in registry.lines],
        "active_line_id": registry.active_id,
    })


async def create_line_handler(request: web.Request) -> web.Response:
    """POST /api/v1/lines - body: {"name", "point_a": {...}, "point_b": {...}}."""
    try:
        body: Dict[str, Any] = await request.json()
    except ValueError:
        return error_response("INVALID_BODY", "Request body must be valid JSON", 400)
    if not isinstance(body, dict):
        return error_response("INVALID_BODY", "Request body must be a JSON object", 400)

    try:
        point_a = _position_from_body(body.get("point_a"))
        point_b = _position_from_body(body.get("point_b"))
    except (KeyError, TypeError, ValueError) as exc:
        return error_response("INVALID_POINT", f"Invalid point: {exc}", 400)

    line = request.app[SYSTEM_KEY].lines.create(point_a, point_b, str(body.get("name", "")))
    return web.json_response(line.to_dict(), status=201)


async def activate_line_handler(request: web.Request) -> web.Response:
    """POST /api/v1/lines/{line_id}/activate"""
    system = request.app[SYSTEM_KEY]
    line = system.lines.activate(request.match_info["line_id"])
    system.refresh_guidance()
    return web.json_response({"success": True, "active_line_id": line.id})


async def deactivate_line_handler(request: web.Request) -> web.Response:
    """POST /api/v1/lines/deactivate"""
    system = request.app[SYSTEM_KEY]
    system.lines.deactivate()
    system.refresh_guidance()
    return web.json_response({"success": True, "active_line_id": None})


async def delete_line_handler(request: web.Request) -> web.Response:
    """DELETE /api/v1/lines/{line_id}"""
    system = request.app[SYSTEM_KEY]
    system.lines.delete(request.match_info["line_id"])
    system.refresh_guidance()
    return web.json_response({"success": True})


__all__ = ["SYSTEM_KEY", "setup_routes"]
