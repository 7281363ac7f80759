# monitor/inventory/api/routes.py
"""
Read-only inventory routes, one set per registered endpoint.

URL structure::

    /endpoints
    /endpoints/{name}/status
    /endpoints/{name}/feeds
    /endpoints/{name}/feeds/{feed_id}/resource-types
    /endpoints/{name}/feeds/{feed_id}/resources
    /endpoints/{name}/resource?path=...
    /endpoints/{name}/resource/children?path=...
    /endpoints/{name}/resource/metrics?path=...
    /endpoints/{name}/resource/config?path=...
    /endpoints/{name}/resource-type/resources?path=...
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Query

from monitor.inventory.api.dependencies import get_inventory, get_registry
from monitor.inventory.contracts.entity import Metric, Resource, ResourceType
from monitor.inventory.core.clients.registry import EndpointsRegistry
from monitor.inventory.core.errors import NotFound
from monitor.inventory.core.filtering import EntityFilter
from monitor.inventory.core.inventory import InventoryClient

logger = logging.getLogger(__name__)
router = APIRouter(tags=["inventory"])

PATH_HELP = "Canonical path, e.g. /f;feed1/r;server1"


@router.get("")
async def list_endpoints(registry: EndpointsRegistry = Depends(get_registry)) -> list[str]:
    return registry.list()


@router.get("/{name}/status")
async def endpoint_status(client: InventoryClient = Depends(get_inventory)) -> dict[str, Any]:
    version = await client.fetch_version()
    return {"version": ".".join(str(n) for n in version)}


@router.get("/{name}/feeds")
async def list_feeds(client: InventoryClient = Depends(get_inventory)) -> list[str]:
    return await client.list_feeds()


@router.get("/{name}/feeds/{feed_id}/resource-types", response_model=list[ResourceType])
async def list_resource_types(
    feed_id: str,
    client: InventoryClient = Depends(get_inventory),
) -> list[ResourceType]:
    return await client.list_resource_types(feed_id)


@router.get("/{name}/feeds/{feed_id}/resources", response_model=list[Resource])
async def list_resources_for_feed(
    feed_id: str,
    fetch_properties: bool = False,
    type_: str | None = Query(None, alias="type"),
    match: str | None = None,
    client: InventoryClient = Depends(get_inventory),
) -> list[Resource]:
    return await client.list_resources_for_feed(
        feed_id, fetch_properties, EntityFilter(type=type_, match=match)
    )


@router.get("/{name}/resource", response_model=Resource)
async def get_resource(
    path: str = Query(..., description=PATH_HELP),
    fetch_properties: bool = True,
    client: InventoryClient = Depends(get_inventory),
) -> Resource:
    resource = await client.get_resource(path, fetch_properties)
    if resource is None:
        raise NotFound(f"Resource '{path}' not found")
    return resource


@router.get("/{name}/resource/children", response_model=list[Resource])
async def list_child_resources(
    path: str = Query(..., description=PATH_HELP),
    recursive: bool = False,
    client: InventoryClient = Depends(get_inventory),
) -> list[Resource]:
    return await client.list_child_resources(path, recursive)


@router.get("/{name}/resource/metrics", response_model=list[Metric])
async def list_metrics_for_resource(
    path: str = Query(..., description=PATH_HELP),
    type_: str | None = Query(None, alias="type"),
    match: str | None = None,
    client: InventoryClient = Depends(get_inventory),
) -> list[Metric]:
    return await client.list_metrics_for_resource(path, EntityFilter(type=type_, match=match))


@router.get("/{name}/resource/config")
async def get_config_data(
    path: str = Query(..., description=PATH_HELP),
    client: InventoryClient = Depends(get_inventory),
) -> dict[str, Any]:
    config = await client.get_config_data_for_resource(path)
    if config is None:
        raise NotFound(f"Resource '{path}' not found")
    return {"value": config}


@router.get("/{name}/resource-type/resources", response_model=list[Resource])
async def list_resources_for_type(
    path: str = Query(..., description=PATH_HELP),
    fetch_properties: bool = False,
    client: InventoryClient = Depends(get_inventory),
) -> list[Resource]:
    return await client.list_resources_for_type(path, fetch_properties)
