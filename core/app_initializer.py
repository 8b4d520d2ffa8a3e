"""Application initialization orchestrator."""

from __future__ import annotations

import asyncio
import os
from typing import Optional

from aiohttp import web as aiohttp_web
from aiohttp_wsgi import WSGIHandler

from config import Config, load_config
from core.logger import get_logger
from services.async_runner import set_main_loop
from services.promotion import PromotionServices, create_promotion_services
from utils.performance import PerformanceMonitor

logger = get_logger(__name__)


class ApplicationInitializer:
    """Orchestrates application initialization and lifecycle."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config or load_config()
        self.services: Optional[PromotionServices] = None
        self.web_runner: Optional[aiohttp_web.AppRunner] = None
        self.monitor = PerformanceMonitor()

    async def initialize(self) -> None:
        """Initialize all application components."""
        set_main_loop(asyncio.get_running_loop())

        await self._init_services()
        await self._init_web_server()
        self._announce_locations()

    async def run(self) -> None:
        """Serve until cancelled."""
        try:
            await asyncio.Event().wait()
        finally:
            await self.cleanup()

    async def cleanup(self) -> None:
        """Cleanup resources."""
        if self.web_runner:
            await self.web_runner.cleanup()
            self.web_runner = None
        if self.services:
            await self.services.close()
            self.services = None
        logger.info("Server stopped")

    async def _init_services(self) -> None:
        """Open the store and build the promotion services."""
        self.services = await create_promotion_services(self.config)
        self.monitor.record_db_pool(self.services.store.pool.size)
        logger.info(
            f"✅ Database initialized at {self.config.database_path} "
            f"({len(self.services.catalog)} locations)"
        )

    async def _init_web_server(self) -> None:
        """Serve the Flask app from this loop through aiohttp."""
        from web import create_app

        flask_app = create_app(self.config, self.services)

        wsgi_handler = WSGIHandler(flask_app)
        aio_app = aiohttp_web.Application()
        aio_app.router.add_route("*", "/{path_info:.*}", wsgi_handler)

        self.web_runner = aiohttp_web.AppRunner(aio_app)
        await self.web_runner.setup()

        # Bind to PORT env var if present (Render/Heroku)
        effective_port = int(os.getenv("PORT", str(self.config.web_port)))
        effective_host = "0.0.0.0" if os.getenv("PORT") else self.config.web_host

        site = aiohttp_web.TCPSite(self.web_runner, effective_host, effective_port)
        await site.start()

        logger.info(f"🚀 Web server started on http://{effective_host}:{effective_port}")

    def _announce_locations(self) -> None:
        """Log the page URL of every location, the targets of the printed QR codes."""
        logger.info("📍 Location links for QR codes:")
        for location_id, url in self.services.catalog.location_urls(self.config.public_base_url).items():
            location = self.services.catalog.get(location_id)
            logger.info(f"{location.name}: {url}")
