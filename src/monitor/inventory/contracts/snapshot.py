# monitor/inventory/contracts/snapshot.py
"""
Read-only typed view over a decoded snapshot blob.

A stored blob has the shape::

    {
      "data": {"id": "...", "properties": {...}, ...},
      "children": {
        "resource":   [<same shape>, ...],
        "metric":     [<same shape>, ...],
        "dataEntity": [<same shape>, ...]
      }
    }

``children`` is optional; child kinds other than the three above are kept
under ``RawChildren.other``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

CHILD_RESOURCE = "resource"
CHILD_METRIC = "metric"
CHILD_DATA_ENTITY = "dataEntity"


class SnapshotShapeError(ValueError):
    """Raised when a decoded blob does not have the snapshot shape."""


@dataclass(frozen=True)
class RawData:
    """The ``data`` object of a snapshot node.

    Attributes:
        id: Entity id as stored (unescaped).
        properties: The ``properties`` object, empty when absent.
        value: The ``value`` member, used by data entities.
        fields: Every member of ``data`` as stored, including the above.
    """

    id: str
    properties: Mapping[str, Any] = field(default_factory=dict)
    value: Any = None
    fields: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_json(cls, obj: Any) -> "RawData":
        if not isinstance(obj, Mapping) or "id" not in obj:
            raise SnapshotShapeError("snapshot 'data' must be an object with an 'id'")
        if not isinstance(obj["id"], str):
            raise SnapshotShapeError(f"snapshot id must be a string, got {obj['id']!r}")
        props = obj.get("properties") or {}
        if not isinstance(props, Mapping):
            raise SnapshotShapeError(f"'properties' of '{obj['id']}' must be an object")
        return cls(
            id=obj["id"],
            properties=props,
            value=obj.get("value"),
            fields=obj,
        )


@dataclass(frozen=True)
class RawChildren:
    resource: tuple["RawSnapshot", ...] = ()
    metric: tuple["RawSnapshot", ...] = ()
    data_entity: tuple["RawSnapshot", ...] = ()
    other: Mapping[str, tuple["RawSnapshot", ...]] = field(default_factory=dict)

    @classmethod
    def from_json(cls, obj: Any) -> "RawChildren":
        if not isinstance(obj, Mapping):
            raise SnapshotShapeError("snapshot 'children' must be an object")

        def nodes(kind: str) -> tuple[RawSnapshot, ...]:
            items = obj.get(kind) or []
            if not isinstance(items, list):
                raise SnapshotShapeError(f"children '{kind}' must be a list")
            return tuple(RawSnapshot.from_json(item) for item in items)

        known = {CHILD_RESOURCE, CHILD_METRIC, CHILD_DATA_ENTITY}
        return cls(
            resource=nodes(CHILD_RESOURCE),
            metric=nodes(CHILD_METRIC),
            data_entity=nodes(CHILD_DATA_ENTITY),
            other={kind: nodes(kind) for kind in obj if kind not in known},
        )


@dataclass(frozen=True)
class RawSnapshot:
    data: RawData
    children: RawChildren | None = None

    @classmethod
    def from_json(cls, obj: Any) -> "RawSnapshot":
        """Build the typed view of a decoded blob.

        Raises:
            SnapshotShapeError: If ``data`` or ``children`` are malformed.
        """
        if not isinstance(obj, Mapping):
            raise SnapshotShapeError("snapshot must be a JSON object")
        children = obj.get("children")
        return cls(
            data=RawData.from_json(obj.get("data")),
            children=RawChildren.from_json(children) if children is not None else None,
        )

    @property
    def id(self) -> str:
        return self.data.id

    @property
    def child_resources(self) -> tuple["RawSnapshot", ...]:
        return self.children.resource if self.children else ()

    @property
    def metrics(self) -> tuple["RawSnapshot", ...]:
        return self.children.metric if self.children else ()

    @property
    def data_entities(self) -> tuple["RawSnapshot", ...]:
        return self.children.data_entity if self.children else ()
