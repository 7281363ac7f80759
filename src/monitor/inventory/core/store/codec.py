# monitor/inventory/core/store/codec.py
"""
Snapshot blob encoding: JSON, gzip-compressed, base64-encoded, stored as
the value of a string datapoint.
"""
from __future__ import annotations

import base64
import gzip
import json
from typing import Any, Sequence

from monitor.inventory.core.errors import SnapshotDecodeError


def decode_blob(value: str) -> Any:
    try:
        return json.loads(gzip.decompress(base64.b64decode(value)))
    except (OSError, EOFError, ValueError) as exc:
        raise SnapshotDecodeError(f"Cannot decode snapshot blob: {exc}") from exc


def encode_blob(obj: Any) -> str:
    return base64.b64encode(gzip.compress(json.dumps(obj).encode("utf-8"))).decode("ascii")


def decode_datapoints(datapoints: Sequence[dict[str, Any]] | None) -> Any | None:
    """Decode the first (most recent) datapoint; ``None`` if there is nothing to decode."""
    if not datapoints:
        return None
    value = datapoints[0].get("value")
    if not value:
        return None
    return decode_blob(value)
