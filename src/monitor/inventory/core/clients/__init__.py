# monitor/inventory/core/clients/__init__.py
"""Endpoint registry and loading infrastructure."""

from monitor.inventory.core.clients.registry import EndpointsRegistry
from monitor.inventory.core.clients.loader import build_client, load_and_register_endpoints
from monitor.inventory.core.clients.config import (
    EndpointSpec,
    EndpointsConfig,
    load_endpoints_config,
)

__all__ = [
    "EndpointsRegistry",
    "build_client",
    "load_and_register_endpoints",
    "load_endpoints_config",
    "EndpointSpec",
    "EndpointsConfig",
]
