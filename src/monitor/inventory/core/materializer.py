# monitor/inventory/core/materializer.py
"""
Conversion of snapshot nodes into entity hashes.

An entity hash is the node's ``data`` object stamped with a ``path``. With
``fetch_properties`` the value of the node's ``configuration`` data entity
is merged over its ``properties``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from monitor.inventory.contracts.snapshot import RawSnapshot
from monitor.inventory.core.errors import MalformedPathError, PathDerivationError
from monitor.inventory.core.paths import CanonicalPath, parse_reference

logger = logging.getLogger(__name__)

CONFIGURATION_ID = "configuration"
METRIC_TYPE_REFERENCE = "metricTypePath"

PathFor = Callable[[str], CanonicalPath]


def configuration_of(raw: RawSnapshot) -> dict[str, Any] | None:
    """Value of the ``configuration`` data entity, if the node has one."""
    for entity in raw.data_entities:
        if entity.id != CONFIGURATION_ID:
            continue
        value = entity.data.value
        if value is None:
            return None
        if not isinstance(value, Mapping):
            logger.warning(
                "Ignoring configuration of '%s': value is a %s, not an object",
                raw.id,
                type(value).__name__,
            )
            return None
        return dict(value)
    return None


def materialize(
    raw: RawSnapshot,
    path_for: PathFor,
    fetch_properties: bool = False,
) -> dict[str, Any]:
    entity = dict(raw.data.fields)
    entity["path"] = str(path_for(raw.id))

    if fetch_properties:
        config = configuration_of(raw)
        if config:
            entity["properties"] = {**(entity.get("properties") or {}), **config}

    return entity


def materialize_children(
    raw: RawSnapshot,
    parent_path: CanonicalPath,
    recursive: bool = False,
) -> list[dict[str, Any]]:
    """Hashes of the child resources of ``raw``.

    Properties are never fetched here. With ``recursive`` every descendant
    level is included, each parent directly followed by its descendants.
    """
    out: list[dict[str, Any]] = []
    for child in raw.child_resources:
        child_path = parent_path.down(child.id)
        out.append(materialize(child, lambda _id, p=child_path: p))
        if recursive:
            out.extend(materialize_children(child, child_path, recursive=True))
    return out


@dataclass(frozen=True)
class MetricRef:
    """A metric node and the snapshot key of its metric type (if resolvable)."""

    node: RawSnapshot
    type_key: str | None


def metric_refs(raw: RawSnapshot) -> list[MetricRef]:
    refs: list[MetricRef] = []
    for node in raw.metrics:
        reference = node.data.fields.get(METRIC_TYPE_REFERENCE)
        key = None
        if reference:
            try:
                key = parse_reference(reference).to_snapshot_key()
            except (MalformedPathError, PathDerivationError) as exc:
                logger.warning("Metric '%s' has an unusable type path: %s", node.id, exc)
        else:
            logger.warning("Metric '%s' declares no %s", node.id, METRIC_TYPE_REFERENCE)
        refs.append(MetricRef(node=node, type_key=key))
    return refs


def metric_type_keys(refs: list[MetricRef]) -> list[str]:
    """Distinct metric type keys, in first-seen order."""
    return list(dict.fromkeys(ref.type_key for ref in refs if ref.type_key))


def pair_metrics(
    refs: list[MetricRef],
    resource_path: CanonicalPath,
    metric_types: Mapping[str, Mapping[str, Any]],
) -> list[tuple[dict[str, Any], Mapping[str, Any]]]:
    """Pair each metric hash with its metric type data.

    Metrics whose type did not resolve are dropped.
    """
    pairs: list[tuple[dict[str, Any], Mapping[str, Any]]] = []
    for ref in refs:
        metric_type = metric_types.get(ref.type_key) if ref.type_key else None
        if metric_type is None:
            logger.warning(
                "Dropping metric '%s' of '%s': metric type %s not found",
                ref.node.id,
                resource_path,
                ref.type_key,
            )
            continue
        pairs.append((materialize(ref.node, resource_path.metric), metric_type))
    return pairs
