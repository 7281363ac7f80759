# monitor/inventory/core/paths.py
"""
Canonical paths for inventory entities.

A canonical path encodes the full ancestry of an entity as a sequence of
typed segments::

    /t;tenant/f;feed/r;server/r;datasource/m;Heap%2FUsed

Segment order is fixed: optional tenant, feed, a chain of resources and at
most one terminal segment (resource type, metric type, operation type,
metric or data entity). Ids are kept unescaped in memory and escaped only
when the path is rendered as text.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable
from urllib.parse import unquote

from monitor.inventory.core.errors import (
    MalformedPathError,
    PathDerivationError,
    RootPathError,
    TerminalPathError,
)

TENANT = "tenant"
FEED = "feed"
RESOURCE = "resource"
RESOURCE_TYPE = "resourceType"
METRIC_TYPE = "metricType"
OPERATION_TYPE = "operationType"
METRIC = "metric"
DATA_ENTITY = "dataEntity"

PREFIXES: dict[str, str] = {
    TENANT: "t",
    FEED: "f",
    RESOURCE: "r",
    RESOURCE_TYPE: "rt",
    METRIC_TYPE: "mt",
    OPERATION_TYPE: "ot",
    METRIC: "m",
    DATA_ENTITY: "d",
}
KINDS_BY_PREFIX: dict[str, str] = {prefix: kind for kind, prefix in PREFIXES.items()}

TERMINAL_KINDS = frozenset(
    {RESOURCE_TYPE, METRIC_TYPE, OPERATION_TYPE, METRIC, DATA_ENTITY}
)

SNAPSHOT_KEY_PREFIX = "inventory"
SNAPSHOT_KEY_SEPARATOR = "."

_RESERVED = frozenset("%;/,\\")


def escape_id(raw: str) -> str:
    """Percent-encode the characters that carry meaning in path text."""
    return "".join(f"%{ord(ch):02X}" if ch in _RESERVED else ch for ch in raw)


def unescape_id(text: str) -> str:
    return unquote(text)


@dataclass(frozen=True)
class Segment:
    kind: str
    id: str

    def __str__(self) -> str:
        return f"{PREFIXES[self.kind]};{escape_id(self.id)}"


def _render(segments: Iterable[Segment]) -> str:
    return "/" + "/".join(str(s) for s in segments)


def _check_order(segments: tuple[Segment, ...]) -> None:
    kinds = [s.kind for s in segments]
    for kind in kinds:
        if kind not in PREFIXES:
            raise MalformedPathError(repr(segments), f"unknown segment kind '{kind}'")

    text = _render(segments)

    if kinds and kinds[0] == TENANT:
        kinds = kinds[1:]
    if not kinds:
        raise MalformedPathError(text, "path has no segments below the tenant")

    pos = 0
    has_feed = kinds[0] == FEED
    if has_feed:
        pos += 1

    chain = 0
    while pos < len(kinds) and kinds[pos] == RESOURCE:
        chain += 1
        pos += 1

    if chain and not has_feed:
        raise MalformedPathError(text, "a resource chain requires a feed")

    tail = kinds[pos:]
    if not tail:
        return

    head = tail[0]
    if head in (RESOURCE_TYPE, METRIC_TYPE):
        if chain:
            raise MalformedPathError(text, f"'{head}' cannot follow a resource")
        if head == RESOURCE_TYPE and tail[1:] == [OPERATION_TYPE]:
            return
    elif head in (METRIC, DATA_ENTITY):
        if not chain:
            raise MalformedPathError(text, f"'{head}' requires a resource chain")
    else:
        raise MalformedPathError(text, f"unexpected '{head}' segment")

    if len(tail) > 1:
        raise MalformedPathError(text, f"nothing may follow '{head}'")


@dataclass(frozen=True)
class CanonicalPath:
    """Immutable, validated sequence of typed path segments."""

    segments: tuple[Segment, ...]

    def __post_init__(self) -> None:
        _check_order(self.segments)

    # -- text form -------------------------------------------------------

    @classmethod
    def parse(cls, text: str) -> "CanonicalPath":
        """Parse path text.

        Raises:
            MalformedPathError: On an unknown prefix, a token without ``;``,
                an empty token or a segment order violation.
        """
        if text is None or not str(text).strip():
            raise MalformedPathError(str(text), "path is empty")

        body = text[1:] if text.startswith("/") else text
        segments: list[Segment] = []
        for token in body.split("/"):
            prefix, sep, raw = token.partition(";")
            if not sep:
                raise MalformedPathError(
                    text, f"token '{token}' is missing the ';' separator"
                )
            kind = KINDS_BY_PREFIX.get(prefix)
            if kind is None:
                raise MalformedPathError(text, f"unknown prefix '{prefix}'")
            segments.append(Segment(kind, unescape_id(raw)))

        return cls(tuple(segments))

    @classmethod
    def coerce(cls, value: "CanonicalPath | str") -> "CanonicalPath":
        return value if isinstance(value, CanonicalPath) else cls.parse(value)

    def to_string(self) -> str:
        return _render(self.segments)

    __str__ = to_string

    # -- construction ----------------------------------------------------

    @classmethod
    def from_feed(cls, feed_id: str, tenant_id: str | None = None) -> "CanonicalPath":
        segments = (Segment(FEED, feed_id),)
        if tenant_id is not None:
            segments = (Segment(TENANT, tenant_id),) + segments
        return cls(segments)

    def down(self, child_id: str) -> "CanonicalPath":
        """Path of a child resource of this feed or resource."""
        if self.terminal_kind in TERMINAL_KINDS:
            raise TerminalPathError(
                f"Cannot derive a child of '{self}': it ends in a {self.terminal_kind}"
            )
        return CanonicalPath(self.segments + (Segment(RESOURCE, child_id),))

    def up(self) -> "CanonicalPath":
        rooted = [s for s in self.segments if s.kind != TENANT]
        if len(rooted) <= 1:
            raise RootPathError(f"Cannot go up from root path '{self}'")
        return CanonicalPath(self.segments[:-1])

    def resource_type(self, type_id: str) -> "CanonicalPath":
        return self._type_child(RESOURCE_TYPE, type_id)

    def metric_type(self, type_id: str) -> "CanonicalPath":
        return self._type_child(METRIC_TYPE, type_id)

    def metric(self, metric_id: str) -> "CanonicalPath":
        return self._resource_child(METRIC, metric_id)

    def data_entity(self, entity_id: str) -> "CanonicalPath":
        return self._resource_child(DATA_ENTITY, entity_id)

    def _type_child(self, kind: str, type_id: str) -> "CanonicalPath":
        if self.terminal_kind != FEED:
            raise PathDerivationError(f"A {kind} can only live under a feed, not '{self}'")
        return CanonicalPath(self.segments + (Segment(kind, type_id),))

    def _resource_child(self, kind: str, child_id: str) -> "CanonicalPath":
        if self.terminal_kind != RESOURCE:
            raise PathDerivationError(f"A {kind} can only live under a resource, not '{self}'")
        return CanonicalPath(self.segments + (Segment(kind, child_id),))

    # -- accessors -------------------------------------------------------

    def _first(self, kind: str) -> str | None:
        for s in self.segments:
            if s.kind == kind:
                return s.id
        return None

    @property
    def terminal_kind(self) -> str:
        return self.segments[-1].kind

    @property
    def tenant_id(self) -> str | None:
        return self._first(TENANT)

    @property
    def feed_id(self) -> str | None:
        return self._first(FEED)

    @property
    def resource_ids(self) -> tuple[str, ...]:
        return tuple(s.id for s in self.segments if s.kind == RESOURCE)

    @property
    def resource_type_id(self) -> str | None:
        return self._first(RESOURCE_TYPE)

    @property
    def metric_type_id(self) -> str | None:
        return self._first(METRIC_TYPE)

    @property
    def operation_type_id(self) -> str | None:
        return self._first(OPERATION_TYPE)

    @property
    def metric_id(self) -> str | None:
        return self._first(METRIC)

    @property
    def data_entity_id(self) -> str | None:
        return self._first(DATA_ENTITY)

    # -- remote addressing -----------------------------------------------

    def to_snapshot_key(self) -> str:
        """Key of the stored blob holding this entity.

        Resources share the blob of their root resource; everything below
        the root is reached by navigating inside that blob.
        """
        feed = escape_id(self.feed_id) if self.feed_id is not None else ""

        if self.metric_type_id is not None:
            kind, entity_id = "mt", self.metric_type_id
        elif self.resource_type_id is not None:
            kind, entity_id = "rt", self.resource_type_id
        elif self.resource_ids:
            kind, entity_id = "r", self.resource_ids[0]
        else:
            raise PathDerivationError(f"Path '{self}' does not address a stored snapshot")

        return SNAPSHOT_KEY_SEPARATOR.join(
            (SNAPSHOT_KEY_PREFIX, feed, kind, escape_id(entity_id))
        )


def parse_reference(text: str) -> CanonicalPath:
    """Parse a path stored inside a snapshot (``resourceTypePath``, ``metricTypePath``).

    Stored references are usually URL-encoded as a whole; plain path text
    is accepted as well.
    """
    if text.startswith("/"):
        return CanonicalPath.parse(text)
    return CanonicalPath.parse(unquote(text))
