"""Tests for the jsonexpand CLI."""

import json
from pathlib import Path
from typing import Any

import pytest
import yaml
from typer.testing import CliRunner

from jsonexpand.cli import app

# Stderr output is combined into result.output by CliRunner.invoke()
runner = CliRunner()


def _write_settings(path: Path, transforms: list[dict[str, Any]], **extra: Any) -> Path:
    path.write_text(yaml.safe_dump({"transforms": transforms, **extra}))
    return path


@pytest.fixture
def settings_file(tmp_path: Path) -> Path:
    return _write_settings(
        tmp_path / "settings.yaml",
        [{"plugin": "json_expand", "options": {"source": "message", "target": "doc"}}],
    )


class TestCLIBasics:
    """Version, help and plugin listing."""

    def test_version_flag(self) -> None:
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert "jsonexpand version" in result.output

    def test_help_lists_commands(self) -> None:
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for command in ("run", "validate", "plugins"):
            assert command in result.output

    def test_plugins_lists_json_expand(self) -> None:
        result = runner.invoke(app, ["--no-dotenv", "plugins"])

        assert result.exit_code == 0
        assert "json_expand (1.0.0): Expand JSON text held in one event field." in result.output

    def test_missing_env_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["--env-file", str(tmp_path / "missing.env"), "plugins"])

        assert result.exit_code == 1
        assert ".env file not found" in result.output


class TestRunCommand:
    """End-to-end runs over JSON Lines files."""

    def test_run_merges_into_target(self, tmp_path: Path, settings_file: Path) -> None:
        input_file = tmp_path / "in.jsonl"
        input_file.write_text(
            "\n".join(
                [
                    json.dumps({"message": json.dumps({"a": 1})}),
                    json.dumps({"message": "not json"}),
                ]
            )
        )
        output_file = tmp_path / "out.jsonl"

        result = runner.invoke(
            app,
            ["--no-dotenv", "run", "-s", str(settings_file), "-i", str(input_file), "-o", str(output_file)],
        )

        assert result.exit_code == 0, result.output
        assert "events in: 2, events out: 2" in result.output
        lines = [json.loads(line) for line in output_file.read_text().splitlines()]
        assert lines[0] == {"message": '{"a": 1}', "doc": {"a": 1}}
        assert lines[1] == {"message": "not json", "doc": {}, "tags": ["_jsonparsefailure"]}

    def test_run_split_replaces_events(self, tmp_path: Path) -> None:
        settings = _write_settings(
            tmp_path / "settings.yaml",
            [{"plugin": "json_expand", "options": {"source": "message", "array_split": "records"}}],
        )
        input_file = tmp_path / "in.jsonl"
        payload = {"records": [{"@timestamp": "2020-01-01T00:00:00Z", "n": 1}, {}, {"n": 2}]}
        input_file.write_text(json.dumps({"message": json.dumps(payload)}) + "\n")
        output_file = tmp_path / "out.jsonl"

        result = runner.invoke(
            app,
            ["--no-dotenv", "run", "-s", str(settings), "-i", str(input_file), "-o", str(output_file)],
        )

        assert result.exit_code == 0, result.output
        assert "events in: 1, events out: 2" in result.output
        lines = [json.loads(line) for line in output_file.read_text().splitlines()]
        assert lines == [{"@timestamp": "2020-01-01T00:00:00.000Z", "n": 1}, {"n": 2}]

    def test_run_reads_stdin_and_writes_stdout(self, settings_file: Path) -> None:
        event = json.dumps({"message": json.dumps({"x": True})})

        result = runner.invoke(app, ["--no-dotenv", "run", "-s", str(settings_file)], input=event + "\n")

        assert result.exit_code == 0
        assert '{"message": "{\\"x\\": true}", "doc": {"x": true}}' in result.output

    def test_run_bad_input_line(self, tmp_path: Path, settings_file: Path) -> None:
        input_file = tmp_path / "in.jsonl"
        input_file.write_text('{"message": "{}"}\n[]\n')

        result = runner.invoke(
            app,
            ["--no-dotenv", "run", "-s", str(settings_file), "-i", str(input_file), "-o", str(tmp_path / "out.jsonl")],
        )

        assert result.exit_code == 1
        assert "Error reading events: line 2" in result.output

    def test_run_missing_settings(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["--no-dotenv", "run", "-s", str(tmp_path / "nope.yaml")])

        assert result.exit_code == 1
        assert "Settings file not found" in result.output

    def test_run_unknown_plugin(self, tmp_path: Path) -> None:
        settings = _write_settings(tmp_path / "settings.yaml", [{"plugin": "csv", "options": {}}])

        result = runner.invoke(app, ["--no-dotenv", "run", "-s", str(settings)], input="")

        assert result.exit_code == 1
        assert "Unknown transform plugin: 'csv'" in result.output


class TestValidateCommand:
    """Configuration checks without running."""

    def test_valid_settings(self, settings_file: Path) -> None:
        result = runner.invoke(app, ["--no-dotenv", "validate", "-s", str(settings_file)])

        assert result.exit_code == 0
        assert "Configuration valid." in result.output
        assert "1. json_expand" in result.output

    def test_show_prints_resolved_settings(self, settings_file: Path) -> None:
        result = runner.invoke(app, ["--no-dotenv", "validate", "-s", str(settings_file), "--show"])

        assert result.exit_code == 0
        resolved = yaml.safe_load(result.output.split("1. json_expand", 1)[1])
        assert resolved["transforms"][0]["options"] == {"source": "message", "target": "doc"}
        assert resolved["logging"] == {"level": "INFO", "json_output": False}

    def test_missing_source_option(self, tmp_path: Path) -> None:
        settings = _write_settings(tmp_path / "settings.yaml", [{"plugin": "json_expand", "options": {"target": "doc"}}])

        result = runner.invoke(app, ["--no-dotenv", "validate", "-s", str(settings)])

        assert result.exit_code == 1
        assert "Error instantiating plugins" in result.output
        assert "source" in result.output

    def test_empty_transform_list(self, tmp_path: Path) -> None:
        settings = _write_settings(tmp_path / "settings.yaml", [])

        result = runner.invoke(app, ["--no-dotenv", "validate", "-s", str(settings)])

        assert result.exit_code == 1
        assert "Configuration errors:" in result.output
        assert "At least one transform is required" in result.output

    def test_yaml_syntax_error(self, tmp_path: Path) -> None:
        settings = tmp_path / "settings.yaml"
        settings.write_text("transforms: [\n  - plugin: json_expand\n")

        result = runner.invoke(app, ["--no-dotenv", "validate", "-s", str(settings)])

        assert result.exit_code == 1
        assert "YAML syntax error" in result.output
