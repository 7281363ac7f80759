# monitor/inventory/api/dependencies.py
"""
FastAPI dependencies and error mapping for the inventory routes.
"""
from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from monitor.inventory.core.clients.registry import EndpointsRegistry
from monitor.inventory.core.errors import (
    InventoryError,
    MalformedPathError,
    MissingArgumentError,
    NotFound,
    PathDerivationError,
    TransportError,
)
from monitor.inventory.core.inventory import InventoryClient

logger = logging.getLogger(__name__)

ERROR_STATUS: list[tuple[type[InventoryError], int]] = [
    (MalformedPathError, 400),
    (PathDerivationError, 400),
    (MissingArgumentError, 400),
    (NotFound, 404),
    (TransportError, 502),
]


def get_registry(request: Request) -> EndpointsRegistry:
    return request.app.state.endpoints_registry


def get_inventory(
    name: str,
    registry: EndpointsRegistry = Depends(get_registry),
) -> InventoryClient:
    """Inventory client of the endpoint named in the URL, or 404."""
    if not registry.has(name):
        raise HTTPException(status_code=404, detail=f"Endpoint '{name}' not found")
    return registry.get(name)


def status_for(exc: InventoryError) -> int:
    for cls, status in ERROR_STATUS:
        if isinstance(exc, cls):
            return status
    return 500


async def _inventory_error_handler(request: Request, exc: InventoryError) -> JSONResponse:
    status = status_for(exc)
    if status >= 500:
        logger.warning("Inventory request %s failed: %s", request.url.path, exc)
    return JSONResponse(
        status_code=status,
        content={"error": type(exc).__name__, "detail": str(exc)},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(InventoryError, _inventory_error_handler)
