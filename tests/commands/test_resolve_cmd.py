"""Tests for the resolve command."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from eggctl.cli import cli
from tests.conftest import WriteJson


def _args(docs: dict[str, Path], *extra: str) -> list[str]:
    return ["resolve", "--egg", str(docs["egg"]), "--package", str(docs["package"]), *extra]


class TestResolveCommand:
    def test_human_output(self, cli_runner: CliRunner, docs: dict[str, Path]) -> None:
        result = cli_runner.invoke(cli, _args(docs, "--vars", str(docs["vars"])))
        assert result.exit_code == 0, result.output
        assert "BUILD_NUMBER" in result.stdout
        assert "config_options" in result.stdout
        assert "3 variables" in result.stdout

    def test_json_output(self, cli_runner: CliRunner, docs: dict[str, Path]) -> None:
        result = cli_runner.invoke(
            cli, ["--json", *_args(docs, "--saved", str(docs["saved"]))]
        )
        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["ok"] is True
        assert payload["data"]["environment"]["SERVER_JARFILE"] == "paper.jar"
        assert payload["meta"]["origins"]["SERVER_JARFILE"] == "saved_service_fields"

    def test_warnings_go_to_stderr(
        self, cli_runner: CliRunner, docs: dict[str, Path], write_json: WriteJson
    ) -> None:
        bad = write_json("bad.json", {"server_jarfile": "server.zip"})
        result = cli_runner.invoke(cli, _args(docs, "--vars", str(bad)))
        assert result.exit_code == 0
        assert "WARNING: server_jarfile has an invalid format" in result.stderr
        assert "WARNING" not in result.stdout

    def test_quiet_hides_warnings(
        self, cli_runner: CliRunner, docs: dict[str, Path], write_json: WriteJson
    ) -> None:
        bad = write_json("bad.json", {"server_jarfile": "server.zip"})
        result = cli_runner.invoke(cli, ["-q", *_args(docs, "--vars", str(bad))])
        assert result.exit_code == 0
        assert result.stdout.strip() == "OK: resolve"
        assert result.stderr == ""

    def test_missing_file_fails(self, cli_runner: CliRunner, docs: dict[str, Path]) -> None:
        result = cli_runner.invoke(
            cli, ["--json", "resolve", "--egg", "nope.json", "--package", str(docs["package"])]
        )
        assert result.exit_code == 1
        payload = json.loads(result.stderr)
        assert payload["ok"] is False
        assert payload["error"]["code"] == "INVALID_INPUT"

    def test_quiet(self, cli_runner: CliRunner, docs: dict[str, Path]) -> None:
        result = cli_runner.invoke(cli, ["-q", *_args(docs)])
        assert result.exit_code == 0
        assert result.stdout.strip() == "OK: resolve"

    def test_egg_required(self, cli_runner: CliRunner, docs: dict[str, Path]) -> None:
        result = cli_runner.invoke(cli, ["resolve", "--package", str(docs["package"])])
        assert result.exit_code == 2
        assert "--egg" in result.output

    def test_precedence_from_config(
        self, cli_runner: CliRunner, docs: dict[str, Path], tmp_path: Path
    ) -> None:
        (tmp_path / "eggctl.toml").write_text('[resolution]\nprecedence = ["package_meta"]\n')
        result = cli_runner.invoke(cli, ["--json", *_args(docs, "--vars", str(docs["vars"]))])
        assert result.exit_code == 0, result.output
        environment = json.loads(result.stdout)["data"]["environment"]
        assert environment["BUILD_NUMBER"] == "latest"
        assert environment["MINECRAFT_VERSION"] == "latest"
