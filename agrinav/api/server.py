"""aiohttp server exposing the guidance state over REST."""

from __future__ import annotations

from typing import Optional

from aiohttp import web

from ..core.logging_utils import get_module_logger
from ..nav_core.guidance_system import GuidanceSystem
from .middleware import error_handling_middleware, localhost_only_middleware
from .routes import SYSTEM_KEY, setup_routes

logger = get_module_logger("APIServer")


def create_app(system: GuidanceSystem, *, localhost_only: bool = True) -> web.Application:
    middlewares = [error_handling_middleware]
    if localhost_only:
        middlewares.insert(0, localhost_only_middleware)

    app = web.Application(middlewares=middlewares)
    app[SYSTEM_KEY] = system
    setup_routes(app)
    return app


class APIServer:
    """Runs the REST API on the current event loop alongside the session."""

    def __init__(
        self,
        system: GuidanceSystem,
        host: str = "127.0.0.1",
        port: int = 8090,
        localhost_only: bool = True,
    ):
        self.system = system
        self.host = host
        self.port = port
        self.localhost_only = localhost_only

        self._runner: Optional[web.AppRunner] = None
        self._site: Optional[web.TCPSite] = None

    @property
    def is_running(self) -> bool:
        return self._runner is not None

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}"

    async def start(self) -> None:
        if self._runner is not None:
            logger.warning("API server already running")
            return

        app = create_app(self.system, localhost_only=self.localhost_only)
        self._runner = web.AppRunner(app)
        await self._runner.setup()
        self._site = web.TCPSite(self._runner, self.host, self.port)
        await self._site.start()
        logger.info("API server started on %s", self.url)

    async def stop(self) -> None:
        if self._runner is None:
            return
        if self._site is not None:
            await self._site.stop()
            self._site = None
        await self._runner.cleanup()
        self._runner = None
        logger.info("API server stopped")


__all__ = ["APIServer", "create_app"]
