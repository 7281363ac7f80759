# monitor/inventory/main.py
"""
Inventory API application factory.

Endpoints are loaded from YAML (``settings.endpoints_config_paths``) and
registered explicitly on ``app.state``; each one gets its own inventory
client and credentials.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from monitor.inventory.api.dependencies import register_error_handlers
from monitor.inventory.api.routes import router as inventory_router
from monitor.inventory.core.clients.loader import load_and_register_endpoints
from monitor.inventory.core.clients.registry import EndpointsRegistry
from monitor.inventory.core.config import Settings, settings as default_settings
from monitor.inventory.core.logging import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Inventory API ready, endpoints: %s", app.state.endpoints_registry.list())
    yield


def create_app(
    registry: EndpointsRegistry | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.log_level, json_format=settings.log_json)

    if registry is None:
        registry = EndpointsRegistry()
        try:
            load_and_register_endpoints(
                patterns=settings.endpoints_config_paths,
                registry=registry,
                default=settings.default_endpoint(),
            )
        except Exception:
            logger.exception("Failed to load inventory endpoints")
            raise

    app = FastAPI(
        title="Inventory snapshots",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Explicit wiring
    app.state.endpoints_registry = registry
    register_error_handlers(app)

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    app.include_router(inventory_router, prefix="/endpoints")
    return app
