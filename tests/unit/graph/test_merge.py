"""Unit tests for merging sources into canonical records."""

from mutualgraph.core.types import FriendRecord
from mutualgraph.graph.merge import merge_sources
from mutualgraph.parsing.source import ParsedSource


def source(filename, **records):
    return ParsedSource(filename=filename, records=dict(records))


class TestMergeSources:
    def test_union_of_mutuals(self):
        merged = merge_sources([
            source("a.json", x=FriendRecord(name="x", mutual_ids={"y"})),
            source("b.json", x=FriendRecord(name="x", mutual_ids={"z"})),
        ])
        assert merged["x"].mutual_ids == {"y", "z"}

    def test_first_genuine_name_wins(self):
        merged = merge_sources([
            source("a.json", x=FriendRecord(name="first")),
            source("b.json", x=FriendRecord(name="second")),
        ])
        assert merged["x"].name == "first"

    def test_placeholder_name_upgraded(self):
        merged = merge_sources([
            source("a.json", x=FriendRecord(name="x")),
            source("b.json", x=FriendRecord(name="")),
            source("c.json", x=FriendRecord(name="real")),
        ])
        assert merged["x"].name == "real"

    def test_missing_name_falls_back_to_id(self):
        merged = merge_sources([source("a.json", x=FriendRecord())])
        assert merged["x"].name == "x"

    def test_name_is_cleaned(self):
        merged = merge_sources([source("a.json", x=FriendRecord(name="alice#0#0"))])
        assert merged["x"].name == "alice"

    def test_first_avatar_wins(self):
        merged = merge_sources([
            source("a.json", x=FriendRecord()),
            source("b.json", x=FriendRecord(avatar_ref="https://img/1.png")),
            source("c.json", x=FriendRecord(avatar_ref="https://img/2.png")),
        ])
        assert merged["x"].avatar_url == "https://img/1.png"

    def test_avatar_hash_resolved(self):
        merged = merge_sources([source("a.json", x=FriendRecord(avatar_ref="abc"))])
        assert merged["x"].avatar_url == "https://cdn.discordapp.com/avatars/x/abc.png?size=128"

    def test_dangling_references_kept(self):
        merged = merge_sources([source("a.json", x=FriendRecord(mutual_ids={"ghost"}))])
        assert merged["x"].mutual_ids == {"ghost"}
        assert "ghost" not in merged

    def test_first_seen_order(self):
        merged = merge_sources([
            source("a.json", b=FriendRecord(), a=FriendRecord()),
            source("b.json", c=FriendRecord(), a=FriendRecord()),
        ])
        assert list(merged) == ["b", "a", "c"]

    def test_sources_not_mutated(self):
        record = FriendRecord(name="x", mutual_ids={"y"})
        merge_sources([
            source("a.json", x=record),
            source("b.json", x=FriendRecord(mutual_ids={"z"})),
        ])
        assert record.mutual_ids == {"y"}

    def test_empty(self):
        assert merge_sources([]) == {}

    def test_more_sources_never_shrink_mutuals(self):
        sources = [
            source("a.json", x=FriendRecord(mutual_ids={"y"}), y=FriendRecord()),
            source("b.json", x=FriendRecord(mutual_ids={"z"})),
            source("c.json", y=FriendRecord(mutual_ids={"x"}), x=FriendRecord()),
        ]
        for n in range(1, len(sources)):
            before = merge_sources(sources[:n])
            after = merge_sources(sources[:n + 1])
            for node_id, record in before.items():
                assert record.mutual_ids <= after[node_id].mutual_ids
