import json

import pytest
from pydantic import ValidationError
from typer.testing import CliRunner

from beam import __version__
from beam.cli.main import app

runner = CliRunner()


@pytest.fixture
def feed_file(tmp_path, full_bytes):
    path = tmp_path / "feed.json"
    path.write_bytes(full_bytes)
    return path


@pytest.fixture
def write_json(tmp_path):
    def _write(data, name="candidate.json"):
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


# ── validate ──────────────────────────────────────────────────

class TestValidateCommand:
    def test_valid(self, feed_file):
        result = runner.invoke(app, ["validate", str(feed_file)])
        assert result.exit_code == 0, result.output
        assert "valid" in result.output

    def test_json_output(self, feed_file):
        result = runner.invoke(app, ["validate", "--json", str(feed_file)])
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["valid"] is True
        assert payload["entries"] == 2
        assert payload["issues"] == []

    def test_invalid(self, write_json, minimal_feed):
        minimal_feed["items"].append(dict(minimal_feed["items"][0]))
        del minimal_feed["title"]
        result = runner.invoke(app, ["validate", "--json", str(write_json(minimal_feed))])
        assert result.exit_code == 1
        payload = json.loads(result.stdout)
        assert payload["valid"] is False
        assert {i["kind"] for i in payload["issues"]} == {"missing_field", "duplicate_entry_id"}
        assert {i["location"] for i in payload["issues"]} == {"title", "items[1].id"}

    def test_lenient(self, write_json, minimal_feed):
        minimal_feed["items"].append({"id": "broken"})
        path = write_json(minimal_feed)
        assert runner.invoke(app, ["validate", str(path)]).exit_code == 1
        result = runner.invoke(app, ["validate", "--lenient", "--json", str(path)])
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["usable"] is True
        assert payload["valid"] is False
        assert payload["entries"] == 1

    def test_lenient_from_settings(self, write_json, minimal_feed, monkeypatch):
        minimal_feed["items"].append({"id": "broken"})
        monkeypatch.setenv("BEAM_STRICT", "false")
        result = runner.invoke(app, ["validate", str(write_json(minimal_feed))])
        assert result.exit_code == 0

    def test_malformed(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{nope", encoding="utf-8")
        result = runner.invoke(app, ["validate", "--json", str(path)])
        assert result.exit_code == 1
        payload = json.loads(result.stdout)
        assert payload["issues"][0]["kind"] == "malformed_json"

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["validate", str(tmp_path / "nope.json")])
        assert result.exit_code == 2


# ── format ────────────────────────────────────────────────────

class TestFormatCommand:
    def test_stdout(self, feed_file, full_feed):
        result = runner.invoke(app, ["format", str(feed_file)])
        assert result.exit_code == 0
        assert json.loads(result.stdout) == full_feed

    def test_output_file_compact(self, feed_file, tmp_path, full_feed):
        out = tmp_path / "out" / "canonical.json"
        result = runner.invoke(app, ["format", str(feed_file), "-o", str(out), "--indent", "0"])
        assert result.exit_code == 0
        data = out.read_bytes()
        assert b"\n" not in data
        assert json.loads(data) == full_feed

    def test_lenient_drops_bad_entries(self, write_json, minimal_feed):
        minimal_feed["items"].append({"id": "broken"})
        result = runner.invoke(app, ["format", "--lenient", str(write_json(minimal_feed))])
        assert result.exit_code == 0
        assert [i["id"] for i in json.loads(result.stdout)["items"]] == ["test-post-1"]

    def test_invalid(self, write_json, minimal_feed):
        minimal_feed["version"] = "2.0"
        result = runner.invoke(app, ["format", str(write_json(minimal_feed))])
        assert result.exit_code == 1


# ── show / config / version ───────────────────────────────────

class TestOtherCommands:
    def test_show(self, feed_file):
        result = runner.invoke(app, ["show", str(feed_file)])
        assert result.exit_code == 0
        assert "Full Blog" in result.stdout
        assert "post-2" in result.stdout

    def test_show_invalid(self, write_json, minimal_feed):
        del minimal_feed["items"]
        assert runner.invoke(app, ["show", str(write_json(minimal_feed))]).exit_code == 1

    def test_config_show(self):
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        assert "json_indent" in result.stdout

    def test_config_set(self, tmp_path):
        result = runner.invoke(app, ["config", "--set", "strict=false", "--set", "json_indent=4"])
        assert result.exit_code == 0
        text = (tmp_path / "xdg" / "beam" / ".env").read_text(encoding="utf-8")
        assert "BEAM_STRICT=false" in text
        assert "BEAM_JSON_INDENT=4" in text

    def test_config_set_unknown_key(self):
        result = runner.invoke(app, ["config", "--set", "colour=blue"])
        assert result.exit_code != 0

    def test_bad_setting_reported(self, feed_file, monkeypatch):
        monkeypatch.setenv("BEAM_LOG_LEVEL", "loud")
        result = runner.invoke(app, ["validate", str(feed_file)])
        assert result.exit_code == 2
        assert "BEAM_LOG_LEVEL" in result.output
        assert not isinstance(result.exception, ValidationError)

    def test_bad_indent_reported(self, feed_file, monkeypatch):
        monkeypatch.setenv("BEAM_JSON_INDENT", "deep")
        result = runner.invoke(app, ["format", str(feed_file)])
        assert result.exit_code == 2
        assert "BEAM_JSON_INDENT" in result.output

    def test_config_set_works_with_bad_setting(self, tmp_path, monkeypatch):
        monkeypatch.setenv("BEAM_LOG_LEVEL", "loud")
        result = runner.invoke(app, ["config", "--set", "log_level=info"])
        assert result.exit_code == 0, result.output
        text = (tmp_path / "xdg" / "beam" / ".env").read_text(encoding="utf-8")
        assert "BEAM_LOG_LEVEL=info" in text
        assert runner.invoke(app, ["config"]).exit_code == 2

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout
