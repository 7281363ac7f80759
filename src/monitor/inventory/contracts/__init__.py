"""Public contracts for the inventory client."""
from monitor.inventory.contracts.entity import InventoryEntity, Metric, Resource, ResourceType
from monitor.inventory.contracts.snapshot import (
    RawChildren,
    RawData,
    RawSnapshot,
    SnapshotShapeError,
)
from monitor.inventory.contracts.store import SnapshotStore

__all__ = [
    "InventoryEntity", "Metric", "Resource", "ResourceType",
    "RawChildren", "RawData", "RawSnapshot", "SnapshotShapeError",
    "SnapshotStore",
]
