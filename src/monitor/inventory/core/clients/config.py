# monitor/inventory/core/clients/config.py
"""
Configuration models and loading for inventory endpoints.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from pydantic import ValidationError

from monitor.inventory.core.config import EndpointSettings
from monitor.inventory.core.loader import load_yaml_files, substitute_env_vars

logger = logging.getLogger(__name__)

DEFAULT_STORE = "monitor.inventory.core.store.metrics_api:MetricsStringStore"


@dataclass(frozen=True)
class EndpointSpec:
    """
    Specification of one inventory endpoint.

    Attributes:
        name: Unique identifier for this endpoint
        settings: Connection settings (entrypoint, tenant, credentials, options)
        store_class: Import path of the snapshot store, 'module:ClassName'
    """

    name: str
    settings: EndpointSettings
    store_class: str = DEFAULT_STORE


@dataclass(frozen=True)
class EndpointsConfig:
    endpoints: list[EndpointSpec] = field(default_factory=list)


def _build_spec(name: str, raw: dict[str, Any]) -> EndpointSpec:
    if "entrypoint" not in raw:
        raise ValueError(f"Endpoint '{name}' missing required 'entrypoint' field")

    try:
        raw = substitute_env_vars(raw)
    except ValueError as exc:
        raise ValueError(f"Endpoint '{name}' config error: {exc}") from exc

    merged = {
        **(raw.get("options") or {}),
        **(raw.get("credentials") or {}),
        "entrypoint": raw["entrypoint"],
        "tenant": raw.get("tenant"),
    }
    try:
        endpoint = EndpointSettings.model_validate(merged)
    except ValidationError as exc:
        raise ValueError(f"Endpoint '{name}' config error: {exc}") from exc

    return EndpointSpec(
        name=name,
        settings=endpoint,
        store_class=raw.get("store") or DEFAULT_STORE,
    )


def load_endpoints_config(patterns: Iterable[str]) -> EndpointsConfig:
    """
    Load endpoint specifications from YAML files.

    Expected YAML structure:
    ```yaml
    endpoints:
      production:
        entrypoint: "${INVENTORY_URL:-http://localhost:8080}"
        tenant: hawkular
        credentials:
          username: jdoe
          password: "${INVENTORY_PASSWORD}"
        options:
          timeout: 10.0
          verify_ssl: false
    ```

    Later files override earlier ones endpoint by endpoint.

    Raises:
        ValueError: If an endpoint is invalid or an env var is missing
    """
    endpoints_map: dict[str, dict[str, Any]] = {}
    for data in load_yaml_files(patterns):
        for name, spec in (data.get("endpoints") or {}).items():
            endpoints_map[name] = spec or {}

    specs = [_build_spec(name, raw) for name, raw in endpoints_map.items()]

    logger.info("Loaded %d endpoint specification(s): %s", len(specs), [s.name for s in specs])

    return EndpointsConfig(endpoints=specs)
