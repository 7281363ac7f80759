# tests/core/test_paths.py
from __future__ import annotations

import pytest

from monitor.inventory.core.errors import (
    MalformedPathError,
    PathDerivationError,
    RootPathError,
    TerminalPathError,
)
from monitor.inventory.core.paths import (
    DATA_ENTITY,
    FEED,
    METRIC,
    RESOURCE,
    RESOURCE_TYPE,
    CanonicalPath,
    Segment,
    escape_id,
    parse_reference,
    unescape_id,
)

RESERVED_IDS = [
    "",
    "plain",
    "a;b",
    "a/b",
    "a,b",
    "a\\b",
    "100%",
    "%2F",
    "Local~/subsystem=datasources/data-source=ExampleDS",
    ";/,\\%",
    "ünïcode id",
]


class TestEscaping:
    @pytest.mark.parametrize("raw", RESERVED_IDS)
    def test_round_trip(self, raw):
        assert unescape_id(escape_id(raw)) == raw

    def test_reserved_characters_are_encoded(self):
        assert escape_id("a;b/c,d\\e%f") == "a%3Bb%2Fc%2Cd%5Ce%25f"

    def test_other_characters_untouched(self):
        assert escape_id("WildFly Server~x=y") == "WildFly Server~x=y"

    def test_escaped_id_contains_no_separators(self):
        escaped = escape_id(";/,\\")
        assert not set(escaped) & set(";/,\\")


class TestParse:
    def test_feed_and_resources(self):
        path = CanonicalPath.parse("/f;feed1/r;server1/r;ds1")

        assert path.feed_id == "feed1"
        assert path.resource_ids == ("server1", "ds1")
        assert path.terminal_kind == RESOURCE

    def test_leading_slash_optional(self):
        assert CanonicalPath.parse("f;feed1/r;x") == CanonicalPath.parse("/f;feed1/r;x")

    def test_tenant_is_kept(self):
        path = CanonicalPath.parse("/t;hawkular/f;feed1/r;server1")
        assert path.tenant_id == "hawkular"
        assert str(path) == "/t;hawkular/f;feed1/r;server1"

    def test_ids_are_unescaped(self):
        path = CanonicalPath.parse("/f;feed1/r;dep%2Fapp.war")
        assert path.resource_ids == ("dep/app.war",)

    def test_metric_and_data_entity(self):
        metric = CanonicalPath.parse("/f;feed1/r;server1/m;Heap Used")
        data = CanonicalPath.parse("/f;feed1/r;server1/d;configuration")

        assert metric.metric_id == "Heap Used"
        assert metric.terminal_kind == METRIC
        assert data.data_entity_id == "configuration"
        assert data.terminal_kind == DATA_ENTITY

    def test_feedless_resource_type(self):
        path = CanonicalPath.parse("/rt;WildFly Server")
        assert path.feed_id is None
        assert path.resource_type_id == "WildFly Server"

    def test_operation_type_under_resource_type(self):
        path = CanonicalPath.parse("/f;feed1/rt;Server/ot;Reload")
        assert path.operation_type_id == "Reload"

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "   ",
            "/x;feed1",
            "/f;feed1/r",
            "/f;feed1/",
            "/f;feed1//r;a",
            "/r;server1",
            "/f;feed1/r;a/rt;T",
            "/f;feed1/m;metric",
            "/f;feed1/d;configuration",
            "/f;feed1/r;a/m;x/r;b",
            "/f;feed1/r;a/m;x/d;y",
            "/f;feed1/mt;A/rt;B",
            "/f;feed1/ot;Reload",
            "/r;a/f;feed1",
            "/f;a/f;b",
            "/t;tenant",
        ],
    )
    def test_malformed(self, text):
        with pytest.raises(MalformedPathError):
            CanonicalPath.parse(text)

    def test_malformed_is_value_error(self):
        with pytest.raises(ValueError, match="unknown prefix"):
            CanonicalPath.parse("/zz;x")

    def test_direct_construction_is_validated(self):
        with pytest.raises(MalformedPathError):
            CanonicalPath((Segment(RESOURCE, "a"),))


class TestRoundTrip:
    @pytest.mark.parametrize(
        "path",
        [
            CanonicalPath.from_feed("feed1"),
            CanonicalPath.from_feed("feed;1", tenant_id="t/1").down("srv,1").down("ds\\1"),
            CanonicalPath.from_feed("feed1").down("server1").metric("Heap/Used"),
            CanonicalPath.from_feed("feed1").down("server1").data_entity("configuration"),
            CanonicalPath.from_feed("feed1").resource_type("WildFly Server"),
            CanonicalPath.from_feed("feed1").metric_type("100%"),
            CanonicalPath((Segment(RESOURCE_TYPE, "feedless"),)),
        ],
    )
    def test_parse_inverts_to_string(self, path):
        assert CanonicalPath.parse(path.to_string()) == path

    @pytest.mark.parametrize("raw", RESERVED_IDS)
    def test_reserved_ids_survive(self, raw):
        path = CanonicalPath.from_feed(raw).down(raw)
        assert CanonicalPath.parse(str(path)) == path


class TestDerivation:
    def test_from_feed(self):
        path = CanonicalPath.from_feed("feed1")
        assert path.segments == (Segment(FEED, "feed1"),)
        assert str(path) == "/f;feed1"

    def test_down_then_up(self):
        parent = CanonicalPath.parse("/f;feed1/r;server1")
        assert parent.down("ds1").up() == parent

    def test_down_from_feed(self):
        assert str(CanonicalPath.from_feed("feed1").down("server1")) == "/f;feed1/r;server1"

    def test_down_escapes_child(self):
        child = CanonicalPath.parse("/f;feed1/r;server1").down("dep/app.war")
        assert str(child) == "/f;feed1/r;server1/r;dep%2Fapp.war"

    @pytest.mark.parametrize(
        "text",
        [
            "/f;feed1/r;server1/m;Heap",
            "/f;feed1/r;server1/d;configuration",
            "/f;feed1/rt;Server",
            "/f;feed1/mt;Heap",
        ],
    )
    def test_down_on_terminal_fails(self, text):
        with pytest.raises(TerminalPathError):
            CanonicalPath.parse(text).down("child")

    def test_up_removes_last_segment(self):
        path = CanonicalPath.parse("/f;feed1/r;server1/m;Heap")
        assert str(path.up()) == "/f;feed1/r;server1"

    def test_up_on_feed_fails(self):
        with pytest.raises(RootPathError):
            CanonicalPath.from_feed("feed1").up()

    def test_up_on_tenant_and_feed_fails(self):
        with pytest.raises(RootPathError):
            CanonicalPath.from_feed("feed1", tenant_id="hawkular").up()

    def test_metric_requires_resource(self):
        with pytest.raises(PathDerivationError):
            CanonicalPath.from_feed("feed1").metric("Heap")

    def test_type_requires_feed(self):
        with pytest.raises(PathDerivationError):
            CanonicalPath.parse("/f;feed1/r;server1").resource_type("T")


class TestSnapshotKey:
    def test_resource_uses_root_of_chain(self):
        path = CanonicalPath.parse("/f;feed1/r;server1/r;ds1/r;pool")
        assert path.to_snapshot_key() == "inventory.feed1.r.server1"

    def test_metric_of_resource_shares_blob(self):
        path = CanonicalPath.parse("/f;feed1/r;server1/m;Heap")
        assert path.to_snapshot_key() == "inventory.feed1.r.server1"

    def test_types(self):
        assert CanonicalPath.parse("/f;feed1/rt;Server").to_snapshot_key() == "inventory.feed1.rt.Server"
        assert CanonicalPath.parse("/f;feed1/mt;Heap Used").to_snapshot_key() == "inventory.feed1.mt.Heap Used"

    def test_ids_are_escaped(self):
        path = CanonicalPath.from_feed("feed.1").down("a/b")
        assert path.to_snapshot_key() == "inventory.feed.1.r.a%2Fb"

    def test_deterministic(self):
        a = CanonicalPath.parse("/f;feed1/r;server1/r;ds1")
        b = CanonicalPath.from_feed("feed1").down("server1").down("ds1")
        assert a.to_snapshot_key() == b.to_snapshot_key()

    def test_feed_only_has_no_key(self):
        with pytest.raises(PathDerivationError):
            CanonicalPath.from_feed("feed1").to_snapshot_key()


class TestParseReference:
    def test_url_encoded(self):
        path = parse_reference("%2Ff%3Bfeed1%2Fmt%3BHeap%20Used")
        assert path.metric_type_id == "Heap Used"

    def test_plain(self):
        assert parse_reference("/f;feed1/rt;Server").resource_type_id == "Server"

    def test_encoded_escaped_id(self):
        # '/f;feed1/mt;a%2Fb' encoded once more as a whole
        path = parse_reference("%2Ff%3Bfeed1%2Fmt%3Ba%252Fb")
        assert path.metric_type_id == "a/b"
