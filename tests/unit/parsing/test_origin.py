"""Unit tests for origin detection and augmentation."""

from unittest.mock import patch

import pytest

from mutualgraph.core.types import FriendRecord
from mutualgraph.parsing.origin import OriginAugmenter, augment_sources
from mutualgraph.parsing.source import ParsedSource

ORIGIN = "111111111111111111"
ALICE = "222222222222222222"
BOB = "333333333333333333"
CAROL = "444444444444444444"


def make_source(filename, records):
    return ParsedSource(
        filename=filename,
        records={k: FriendRecord(name=k[:3], mutual_ids=set(v)) for k, v in records.items()},
    )


class TestOriginAugmenter:
    @pytest.fixture
    def augmenter(self):
        return OriginAugmenter()

    def test_looks_like_identity(self, augmenter):
        assert augmenter.looks_like_identity(ORIGIN)
        assert augmenter.looks_like_identity("1" * 15)
        assert not augmenter.looks_like_identity("1" * 14)
        assert not augmenter.looks_like_identity("1" * 23)
        assert not augmenter.looks_like_identity("friends")

    def test_single_source_untouched(self, augmenter):
        source = make_source(f"{ORIGIN}.json", {ALICE: []})
        batch = augmenter.augment([source])

        assert batch.sources == [source]
        assert batch.roots == frozenset()
        assert not batch.is_multi_source

    def test_keyed_origin_connected_to_everyone(self, augmenter):
        mine = make_source(f"{ORIGIN}.json", {ORIGIN: [], ALICE: [BOB], BOB: []})
        other = make_source("other.json", {CAROL: []})

        batch = augmenter.augment([mine, other])

        assert batch.roots == frozenset({ORIGIN})
        assert batch.sources[0].records[ORIGIN].mutual_ids == {ALICE, BOB}
        assert batch.sources[1] is other

    def test_keyed_origin_keeps_existing_mutuals(self, augmenter):
        mine = make_source(f"{ORIGIN}.json", {ORIGIN: [CAROL], ALICE: []})
        other = make_source("other.json", {})

        batch = augmenter.augment([mine, other])
        assert batch.sources[0].records[ORIGIN].mutual_ids == {ALICE, CAROL}

    def test_synthesized_origin(self, augmenter):
        mine = make_source(f"{ORIGIN}.json", {ALICE: [], BOB: []})
        other = make_source("other.json", {CAROL: []})

        batch = augmenter.augment([mine, other])
        origin = batch.sources[0].records[ORIGIN]

        assert batch.roots == frozenset({ORIGIN})
        assert origin.name == ORIGIN
        assert origin.avatar_ref == ""
        assert origin.mutual_ids == {ALICE, BOB}

    def test_empty_source_not_synthesized(self, augmenter):
        empty = make_source(f"{ORIGIN}.json", {})
        other = make_source("other.json", {ALICE: []})

        batch = augmenter.augment([empty, other])
        assert batch.roots == frozenset()
        assert ORIGIN not in batch.sources[0].records

    def test_unrelated_filename_untouched(self, augmenter):
        a = make_source("friends.json", {ALICE: []})
        b = make_source("more.json", {BOB: []})

        batch = augmenter.augment([a, b])
        assert batch.roots == frozenset()
        assert batch.sources == [a, b]

    def test_inputs_not_mutated(self, augmenter):
        mine = make_source(f"{ORIGIN}.json", {ORIGIN: [], ALICE: []})
        other = make_source(f"{BOB}.json", {CAROL: []})

        augmenter.augment([mine, other])

        assert mine.records[ORIGIN].mutual_ids == set()
        assert BOB not in other.records

    def test_failure_leaves_source_unmodified(self, augmenter):
        a = make_source(f"{ORIGIN}.json", {ALICE: []})
        b = make_source(f"{BOB}.json", {CAROL: []})

        original = augmenter._augment_one

        def flaky(source):
            if source is a:
                raise RuntimeError("boom")
            return original(source)

        with patch.object(augmenter, "_augment_one", side_effect=flaky):
            batch = augmenter.augment([a, b])

        assert batch.sources[0] is a
        assert batch.roots == frozenset({BOB})

    def test_custom_pattern(self):
        batch = augment_sources(
            [make_source("me.json", {ALICE: []}), make_source("x.json", {})],
            identity_pattern=r"^me$",
        )
        assert batch.roots == frozenset({"me"})
