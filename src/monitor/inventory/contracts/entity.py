# monitor/inventory/contracts/entity.py
"""
Typed inventory entities.

Entities are built from the hashes produced by the materializer: the
``data`` object of a snapshot node stamped with its canonical path.
"""
from __future__ import annotations

from typing import Any, ClassVar, Mapping

from pydantic import BaseModel, ConfigDict, Field, model_validator

from monitor.inventory.core.errors import MalformedPathError
from monitor.inventory.core.paths import (
    METRIC,
    RESOURCE,
    RESOURCE_TYPE,
    CanonicalPath,
    parse_reference,
)


class InventoryEntity(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: ClassVar[str]

    id: str = Field(min_length=1)
    path: str
    name: str | None = None
    properties: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _path_matches_kind(self) -> "InventoryEntity":
        terminal = CanonicalPath.parse(self.path).terminal_kind
        if terminal != self.kind:
            raise ValueError(
                f"path '{self.path}' ends in a {terminal}, expected a {self.kind}"
            )
        return self

    @property
    def canonical_path(self) -> CanonicalPath:
        return CanonicalPath.parse(self.path)

    @property
    def type_tags(self) -> frozenset[str]:
        """Tags an entity filter's ``type`` is matched against."""
        return frozenset({self.kind})


class ResourceType(InventoryEntity):
    kind: ClassVar[str] = RESOURCE_TYPE

    @classmethod
    def from_hash(cls, entity: Mapping[str, Any]) -> "ResourceType":
        return cls(
            id=entity["id"],
            path=entity["path"],
            name=entity.get("name"),
            properties=dict(entity.get("properties") or {}),
        )


class Resource(InventoryEntity):
    kind: ClassVar[str] = RESOURCE

    type_path: str | None = None
    type_id: str | None = None

    @classmethod
    def from_hash(cls, entity: Mapping[str, Any]) -> "Resource":
        type_path = entity.get("resourceTypePath")
        type_id = None
        if type_path:
            try:
                type_id = parse_reference(type_path).resource_type_id
            except MalformedPathError:
                type_id = None
        if type_id is None and isinstance(entity.get("type"), Mapping):
            type_id = entity["type"].get("id")

        return cls(
            id=entity["id"],
            path=entity["path"],
            name=entity.get("name"),
            properties=dict(entity.get("properties") or {}),
            type_path=type_path,
            type_id=type_id,
        )


class Metric(InventoryEntity):
    """A metric of a resource, paired with the data of its metric type.

    ``type`` is the metric type's data type (``GAUGE``, ``COUNTER``,
    ``AVAILABILITY``...).
    """

    kind: ClassVar[str] = METRIC

    type: str | None = None
    unit: str | None = None
    collection_interval: int | None = None
    metric_type_properties: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_hash(
        cls, entity: Mapping[str, Any], metric_type: Mapping[str, Any]
    ) -> "Metric":
        return cls(
            id=entity["id"],
            path=entity["path"],
            name=entity.get("name"),
            properties=dict(entity.get("properties") or {}),
            type=metric_type.get("type"),
            unit=metric_type.get("unit"),
            collection_interval=metric_type.get("collectionInterval"),
            metric_type_properties=dict(metric_type),
        )

    @property
    def type_tags(self) -> frozenset[str]:
        if self.type:
            return frozenset({self.kind, self.type})
        return frozenset({self.kind})
