# monitor/inventory/core/clients/registry.py
"""
Endpoints registry – one inventory client per named endpoint.
"""
from __future__ import annotations

import logging

from monitor.inventory.core.inventory import InventoryClient

logger = logging.getLogger(__name__)


class EndpointsRegistry:
    def __init__(self) -> None:
        self._clients: dict[str, InventoryClient] = {}

    def register(self, name: str, client: InventoryClient) -> None:
        if name in self._clients:
            raise ValueError(f"Endpoint '{name}' already registered")
        self._clients[name] = client
        logger.info("Registered endpoint: %s (%s)", name, type(client.store).__name__)

    def get(self, name: str) -> InventoryClient:
        try:
            return self._clients[name]
        except KeyError:
            raise KeyError(f"Endpoint '{name}' not found. Available: {list(self._clients)}")

    def has(self, name: str) -> bool:
        return name in self._clients

    def list(self) -> list[str]:
        return list(self._clients.keys())

    def __len__(self) -> int:
        return len(self._clients)
