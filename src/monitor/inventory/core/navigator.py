# monitor/inventory/core/navigator.py
"""
Navigation inside a root snapshot.

One blob is stored per top-level resource; descendants are found by
walking ``children.resource`` one id at a time.
"""
from __future__ import annotations

import logging
from typing import Iterable

from monitor.inventory.contracts.snapshot import RawSnapshot

logger = logging.getLogger(__name__)


def find_child(node: RawSnapshot, child_id: str) -> RawSnapshot | None:
    # Duplicate ids under one parent: the first one in stored order wins.
    for child in node.child_resources:
        if child.id == child_id:
            return child
    return None


def locate(root: RawSnapshot, relative_ids: Iterable[str]) -> RawSnapshot | None:
    """Walk down from ``root`` following resource ids.

    Args:
        root: Decoded root snapshot.
        relative_ids: Resource ids below the root, outermost first.

    Returns:
        The node reached, ``root`` itself for an empty sequence, or ``None``
        as soon as one step has no matching child.
    """
    node = root
    for child_id in relative_ids:
        found = find_child(node, child_id)
        if found is None:
            logger.debug("No child '%s' under '%s'", child_id, node.id)
            return None
        node = found
    return node
