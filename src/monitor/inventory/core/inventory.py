# monitor/inventory/core/inventory.py
"""
Inventory query operations.

``InventoryClient`` combines a ``SnapshotStore`` with path handling,
snapshot navigation, materialization and filtering. It holds no state
besides the store: every call fetches the latest snapshots again.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Callable, TypeVar

from pydantic import ValidationError

from monitor.inventory.contracts.entity import InventoryEntity, Metric, Resource, ResourceType
from monitor.inventory.contracts.snapshot import RawSnapshot, SnapshotShapeError
from monitor.inventory.contracts.store import SnapshotStore
from monitor.inventory.core.errors import (
    MalformedPathError,
    MissingFeedError,
    MissingResourceTypeError,
)
from monitor.inventory.core.filtering import EntityFilter, apply_filter
from monitor.inventory.core.materializer import (
    configuration_of,
    materialize,
    materialize_children,
    metric_refs,
    metric_type_keys,
    pair_metrics,
)
from monitor.inventory.core.navigator import locate
from monitor.inventory.core.paths import CanonicalPath, escape_id

logger = logging.getLogger(__name__)

PathLike = CanonicalPath | str
E = TypeVar("E", bound=InventoryEntity)

MODULE_TAG = ("module", "inventory")
FEED_TAG = "feed"
RESOURCE_TYPE_TAG_PREFIX = "rt."
VERSION_FIELD = "Implementation-Version"


def _snapshot(key: str, blob: Any) -> RawSnapshot | None:
    try:
        return RawSnapshot.from_json(blob)
    except SnapshotShapeError as exc:
        logger.warning("Skipping snapshot '%s': %s", key, exc)
        return None


def _build(factory: Callable[..., E], entity: dict[str, Any], *extra: Any) -> E | None:
    try:
        return factory(entity, *extra)
    except ValidationError as exc:
        logger.warning(
            "Skipping invalid entity at '%s': %s",
            entity.get("path"),
            "; ".join(err["msg"] for err in exc.errors()),
        )
        return None


def _inventory_tags(entity_type: str, feed_id: str) -> dict[str, str]:
    return {
        MODULE_TAG[0]: MODULE_TAG[1],
        "type": entity_type,
        FEED_TAG: escape_id(feed_id),
    }


class InventoryClient:
    """Read-only access to the inventory stored as snapshots."""

    def __init__(self, store: SnapshotStore) -> None:
        self._store = store

    @property
    def store(self) -> SnapshotStore:
        return self._store

    async def fetch_version(self) -> tuple[int, ...]:
        """Version of the remote service as a tuple of ints (e.g. ``(0, 21, 3)``)."""
        status = await self._store.fetch_version_and_status()
        return tuple(int(n) for n in re.findall(r"\d+", status.get(VERSION_FIELD) or ""))

    async def list_feeds(self) -> list[str]:
        values = await self._store.tag_values({MODULE_TAG[0]: MODULE_TAG[1], FEED_TAG: "*"})
        return list(values.get(FEED_TAG, []))

    async def list_resource_types(self, feed_id: str | None) -> list[ResourceType]:
        """Resource types reported by a feed. Empty when none are stored."""
        if not feed_id:
            raise MissingFeedError()

        blobs = await self._store.query_raw(_inventory_tags("rt", feed_id))
        feed_path = CanonicalPath.from_feed(feed_id)

        types: list[ResourceType] = []
        for key, blob in blobs.items():
            raw = _snapshot(key, blob)
            if raw is None:
                continue
            rt = _build(ResourceType.from_hash, materialize(raw, feed_path.resource_type))
            if rt is not None:
                types.append(rt)
        return types

    async def list_resources_for_feed(
        self,
        feed_id: str | None,
        fetch_properties: bool = False,
        filter_by: EntityFilter | None = None,
    ) -> list[Resource]:
        """Top-level resources of a feed."""
        if not feed_id:
            raise MissingFeedError()

        blobs = await self._store.query_raw(_inventory_tags("r", feed_id))
        feed_path = CanonicalPath.from_feed(feed_id)

        resources: list[Resource] = []
        for key, blob in blobs.items():
            raw = _snapshot(key, blob)
            if raw is None:
                continue
            entity = materialize(raw, feed_path.down, fetch_properties)
            resource = _build(Resource.from_hash, entity)
            if resource is not None:
                resources.append(resource)
        return apply_filter(resources, filter_by)

    async def list_resources_for_type(
        self,
        resource_type_path: PathLike,
        fetch_properties: bool = False,
    ) -> list[Resource]:
        """Resources of a given type, at any depth under the feed's root resources.

        The store tags each root snapshot with ``rt.<type id>``; the tag value
        lists the paths, relative to the root resource, of every resource of
        that type inside the snapshot (an empty entry is the root itself).
        """
        path = CanonicalPath.coerce(resource_type_path)
        feed_id = path.feed_id
        type_id = path.resource_type_id
        if not feed_id:
            raise MissingFeedError()
        if not type_id:
            raise MissingResourceTypeError()

        tags = _inventory_tags("r", feed_id)
        tags[f"{RESOURCE_TYPE_TAG_PREFIX}{escape_id(type_id)}"] = "*"
        found = await self._store.find_keys(tags)
        if not found:
            return []

        tag_name = f"{RESOURCE_TYPE_TAG_PREFIX}{type_id}"
        relative_by_key = {key: key_tags.get(tag_name, "") for key, key_tags in found.items()}
        blobs = await self._store.get_raw_batch(list(relative_by_key))

        feed_path = CanonicalPath.from_feed(feed_id)
        resources: list[Resource] = []
        for key, blob in blobs.items():
            root = _snapshot(key, blob)
            if root is None:
                continue
            root_path = feed_path.down(root.id)

            for relative in relative_by_key.get(key, "").split(","):
                if not relative:
                    target, target_path = root, root_path
                else:
                    try:
                        target_path = CanonicalPath.parse(f"{root_path}/{relative}")
                    except MalformedPathError as exc:
                        logger.warning("Ignoring relative path in '%s': %s", key, exc)
                        continue
                    target = locate(root, target_path.resource_ids[1:])
                    if target is None:
                        logger.debug("'%s' not present in snapshot '%s'", target_path, key)
                        continue

                entity = materialize(target, lambda _id, p=target_path: p, fetch_properties)
                resource = _build(Resource.from_hash, entity)
                if resource is not None:
                    resources.append(resource)
        return resources

    async def get_config_data_for_resource(
        self, resource_path: PathLike
    ) -> dict[str, Any] | None:
        """Configuration values of a resource.

        Returns ``None`` when the resource does not exist and an empty dict
        when it has no configuration.
        """
        path = CanonicalPath.coerce(resource_path)
        raw = await self._get_raw_entity(path)
        if raw is None:
            return None
        return configuration_of(raw) or {}

    async def list_child_resources(
        self,
        parent_path: PathLike,
        recursive: bool = False,
    ) -> list[Resource]:
        path = CanonicalPath.coerce(parent_path)
        if not path.feed_id:
            raise MissingFeedError()

        raw = await self._get_raw_entity(path)
        if raw is None:
            return []
        hashes = materialize_children(raw, path, recursive)
        children = (_build(Resource.from_hash, e) for e in hashes)
        return [c for c in children if c is not None]

    async def list_metrics_for_resource(
        self,
        resource_path: PathLike,
        filter_by: EntityFilter | None = None,
    ) -> list[Metric]:
        """Metrics of a resource, each paired with its metric type.

        Example::

            await client.list_metrics_for_resource(
                server, EntityFilter(type="GAUGE", match="Heap")
            )
        """
        path = CanonicalPath.coerce(resource_path)
        raw = await self._get_raw_entity(path)
        if raw is None or not raw.metrics:
            return []

        refs = metric_refs(raw)
        keys = metric_type_keys(refs)
        metric_types: dict[str, Any] = {}
        if keys:
            blobs = await self._store.get_raw_batch(keys)
            for key, blob in blobs.items():
                node = _snapshot(key, blob)
                if node is not None:
                    metric_types[key] = node.data.fields

        pairs = pair_metrics(refs, path, metric_types)
        built = (_build(Metric.from_hash, m, t) for m, t in pairs)
        metrics = [m for m in built if m is not None]
        return apply_filter(metrics, filter_by)

    async def get_resource(
        self,
        resource_path: PathLike,
        fetch_properties: bool = True,
    ) -> Resource | None:
        path = CanonicalPath.coerce(resource_path)
        raw = await self._get_raw_entity(path)
        if raw is None:
            return None
        return _build(Resource.from_hash, materialize(raw, lambda _id: path, fetch_properties))

    async def _get_raw_entity(self, path: CanonicalPath) -> RawSnapshot | None:
        key = path.to_snapshot_key()
        blob = await self._store.get_raw(key)
        if blob is None:
            logger.debug("No snapshot stored under '%s'", key)
            return None
        root = _snapshot(key, blob)
        if root is None:
            return None
        return locate(root, path.resource_ids[1:])
