"""Unit tests for export parsing and record normalization."""

import json

import pytest

from mutualgraph.core.exceptions import MalformedSourceError
from mutualgraph.parsing.source import (
    ParsedSource,
    base_file_name,
    load_sources,
    normalize_record,
    parse_source,
    read_files,
)


class TestParseSource:
    def test_parses_records(self):
        text = json.dumps({
            "1": {"name": "alice#0", "avatarUrl": "abc", "mutual": ["2", "3"]},
            "2": {"name": "bob", "mutual": ["1"]},
        })
        source = parse_source("me.json", text)

        assert source.filename == "me.json"
        assert len(source) == 2
        assert source.identities() == ["1", "2"]
        assert source.records["1"].name == "alice#0"
        assert source.records["1"].avatar_ref == "abc"
        assert source.records["1"].mutual_ids == {"2", "3"}

    def test_accepts_bytes(self):
        source = parse_source("me.json", b'{"1": {"name": "a"}}')
        assert source.records["1"].name == "a"

    def test_invalid_json(self):
        with pytest.raises(MalformedSourceError) as exc:
            parse_source("bad.json", "{not json")
        assert exc.value.filename == "bad.json"
        assert exc.value.message.startswith("Invalid JSON")

    @pytest.mark.parametrize("text", ["[]", "42", '"x"', "null"])
    def test_root_must_be_object(self, text):
        with pytest.raises(MalformedSourceError) as exc:
            parse_source("list.json", text)
        assert exc.value.message == "Root must be an object keyed by user id."

    def test_empty_object_is_valid(self):
        assert len(parse_source("empty.json", "{}")) == 0


class TestNormalizeRecord:
    def test_missing_mutual_becomes_empty(self):
        assert normalize_record({"name": "a"}).mutual_ids == set()

    def test_non_list_mutual_becomes_empty(self):
        assert normalize_record({"mutual": "2"}).mutual_ids == set()
        assert normalize_record({"mutual": {"2": True}}).mutual_ids == set()

    def test_numeric_mutuals_coerced_to_strings(self):
        assert normalize_record({"mutual": [2, "3", None]}).mutual_ids == {"2", "3"}

    def test_avatar_url_wins_over_avatar(self):
        record = normalize_record({"avatarUrl": "https://x/a.png", "avatar": "hash"})
        assert record.avatar_ref == "https://x/a.png"

    def test_avatar_fallback(self):
        assert normalize_record({"avatar": "hash"}).avatar_ref == "hash"

    def test_non_string_fields(self):
        record = normalize_record({"name": 5, "avatar": 7})
        assert record.name == ""
        assert record.avatar_ref == ""

    def test_non_object_record(self):
        record = normalize_record("oops")
        assert record.name == ""
        assert record.mutual_ids == set()


class TestBaseFileName:
    @pytest.mark.parametrize("filename,expected", [
        ("123456789012345678.json", "123456789012345678"),
        ("/tmp/exports/me.json", "me"),
        ("archive.tar.gz", "archive.tar"),
        ("noext", "noext"),
        ("trailing.", "trailing."),
        (".hidden", ""),
    ])
    def test_base_file_name(self, filename, expected):
        assert base_file_name(filename) == expected

    def test_parsed_source_base_name(self):
        assert ParsedSource(filename="dir/abc.json").base_name == "abc"


class TestLoadSources:
    def test_all_or_nothing(self):
        files = [("ok.json", "{}"), ("bad.json", "[]"), ("never.json", "{}")]
        with pytest.raises(MalformedSourceError) as exc:
            load_sources(files)
        assert exc.value.filename == "bad.json"

    def test_preserves_order(self):
        sources = load_sources([("b.json", "{}"), ("a.json", "{}")])
        assert [s.filename for s in sources] == ["b.json", "a.json"]

    def test_read_files(self, tmp_path):
        f = tmp_path / "me.json"
        f.write_text('{"1": {}}')
        assert read_files([f]) == [(str(f), b'{"1": {}}')]
