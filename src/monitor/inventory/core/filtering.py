# monitor/inventory/core/filtering.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence, TypeVar

from monitor.inventory.contracts.entity import InventoryEntity

E = TypeVar("E", bound=InventoryEntity)


@dataclass(frozen=True)
class EntityFilter:
    """Selection over materialized entities.

    Attributes:
        type: Exact type tag an entity must carry (``resource``,
            ``resourceType``, ``metric`` or a metric data type such as
            ``GAUGE``).
        match: Case-sensitive substring of the entity id.
    """

    type: str | None = None
    match: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.type is None and self.match is None

    def accepts(self, entity: InventoryEntity) -> bool:
        if self.type is not None and self.type not in entity.type_tags:
            return False
        if self.match is not None and self.match not in entity.id:
            return False
        return True

    def apply(self, entities: Iterable[E]) -> list[E]:
        if self.is_empty:
            return list(entities)
        return [e for e in entities if self.accepts(e)]


def apply_filter(entities: Sequence[E], flt: EntityFilter | None) -> list[E]:
    if flt is None:
        return list(entities)
    return flt.apply(entities)
