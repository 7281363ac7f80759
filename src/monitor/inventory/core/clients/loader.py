# monitor/inventory/core/clients/loader.py
"""
Endpoint loader – reads config/endpoints.yaml and registers live inventory clients.
"""
from __future__ import annotations

import logging
from typing import Iterable

from monitor.inventory.core.clients.config import EndpointSpec, load_endpoints_config
from monitor.inventory.core.clients.registry import EndpointsRegistry
from monitor.inventory.core.config import EndpointSettings
from monitor.inventory.core.inventory import InventoryClient
from monitor.inventory.core.loader import import_attr

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "default"


def build_client(spec: EndpointSpec) -> InventoryClient:
    store_cls = import_attr(spec.store_class)
    cfg = spec.settings
    store = store_cls(
        base_url=cfg.entrypoint,
        tenant=cfg.tenant,
        username=cfg.username,
        password=cfg.password,
        token=cfg.token,
        timeout=cfg.timeout,
        verify_ssl=cfg.verify_ssl,
    )
    return InventoryClient(store)


def load_and_register_endpoints(
    *,
    patterns: Iterable[str],
    registry: EndpointsRegistry,
    default: EndpointSettings | None = None,
) -> None:
    """Load endpoint definitions from YAML and register one client per endpoint.

    ``default`` is registered as the ``default`` endpoint unless the YAML
    already defines one with that name.
    """
    cfg = load_endpoints_config(patterns)
    for spec in cfg.endpoints:
        registry.register(spec.name, build_client(spec))

    if default is not None and not registry.has(DEFAULT_ENDPOINT):
        registry.register(DEFAULT_ENDPOINT, build_client(EndpointSpec(DEFAULT_ENDPOINT, default)))

    logger.info("Registered %d endpoint(s): %s", len(registry), registry.list())
