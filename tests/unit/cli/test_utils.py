"""Unit tests for CLI utilities."""

import json

from mutualgraph.cli.utils import echo_error, load_session


class TestLoadSession:
    def test_loads_files(self, tmp_path):
        f = tmp_path / "me.json"
        f.write_text(json.dumps({"1": {"name": "a", "mutual": ["2"]}, "2": {"name": "b"}}))

        session = load_session([str(f)], show_progress=False)

        assert session is not None
        assert session.graph.edge_count == 1

    def test_malformed_file(self, tmp_path, capsys):
        f = tmp_path / "bad.json"
        f.write_text("[]")

        assert load_session([str(f)], show_progress=False) is None
        captured = capsys.readouterr()
        assert "Failed to load" in captured.err
        assert "Root must be an object" in captured.err

    def test_missing_file(self, tmp_path, capsys):
        assert load_session([str(tmp_path / "missing.json")], show_progress=False) is None
        assert "Could not read input" in capsys.readouterr().err

    def test_config_applied(self, tmp_path):
        f = tmp_path / "me.json"
        f.write_text("{}")
        config = tmp_path / "config.yaml"
        config.write_text("mutualgraph:\n  max_listed_mutuals: 3\n")

        session = load_session([str(f)], config_path=str(config), show_progress=False)
        assert session.settings.max_listed_mutuals == 3


def test_echo_error_goes_to_stderr(capsys):
    echo_error("boom")
    captured = capsys.readouterr()
    assert "boom" in captured.err
    assert captured.out == ""
