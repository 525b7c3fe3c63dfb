"""Tests for the ``terrakube config`` command group."""

from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from terrakube_cli.app import create_app
from terrakube_cli.config import load_global_config, save_global_config
from terrakube_cli.models import GlobalConfig


class TestConfigShow:
    def test_defaults_as_json(self, isolated_config: Path, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(create_app(), ["--quiet", "config", "show"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == {
            "api_url": None,
            "token": None,
            "output": "json",
            "hide_nulls": False,
        }

    def test_token_is_masked(self, isolated_config: Path, cli_runner: CliRunner) -> None:
        save_global_config(GlobalConfig(token="secret"))
        result = cli_runner.invoke(create_app(), ["--quiet", "config", "show"])
        assert result.exit_code == 0, result.output
        assert "secret" not in result.output
        assert json.loads(result.stdout)["token"] == "****"

    def test_yaml_output(self, isolated_config: Path, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(create_app(), ["--quiet", "-o", "yaml", "config", "show"])
        assert result.exit_code == 0, result.output
        assert "output: json" in result.stdout


class TestConfigSet:
    def test_set_string(self, isolated_config: Path, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(create_app(), ["config", "set", "api_url", "http://terrakube.test"])
        assert result.exit_code == 0, result.output
        assert load_global_config().api_url == "http://terrakube.test"

    def test_set_bool(self, isolated_config: Path, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(create_app(), ["config", "set", "hide_nulls", "yes"])
        assert result.exit_code == 0, result.output
        assert load_global_config().hide_nulls is True

    def test_unknown_key(self, isolated_config: Path, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(create_app(), ["config", "set", "colour", "red"])
        assert result.exit_code == 2

    def test_invalid_output(self, isolated_config: Path, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(create_app(), ["config", "set", "output", "xml"])
        assert result.exit_code == 2
        assert load_global_config().output == "json"

    def test_explicit_config_path(self, isolated_config: Path, tmp_path: Path, cli_runner: CliRunner) -> None:
        path = tmp_path / "alt.json"
        save_global_config(GlobalConfig(), path)
        result = cli_runner.invoke(
            create_app(), ["--config", str(path), "config", "set", "output", "table"]
        )
        assert result.exit_code == 0, result.output
        assert load_global_config(path).output == "table"
        assert load_global_config().output == "json"


class TestConfigReset:
    def test_reset_with_yes(self, isolated_config: Path, cli_runner: CliRunner) -> None:
        save_global_config(GlobalConfig(api_url="http://terrakube.test"))
        result = cli_runner.invoke(create_app(), ["config", "reset", "--yes"])
        assert result.exit_code == 0, result.output
        assert load_global_config() == GlobalConfig()

    def test_reset_declined(self, isolated_config: Path, cli_runner: CliRunner) -> None:
        save_global_config(GlobalConfig(api_url="http://terrakube.test"))
        result = cli_runner.invoke(create_app(), ["config", "reset"], input="n\n")
        assert result.exit_code == 0
        assert load_global_config().api_url == "http://terrakube.test"

    def test_reset_repairs_broken_file(self, isolated_config: Path, cli_runner: CliRunner) -> None:
        isolated_config.mkdir(parents=True, exist_ok=True)
        (isolated_config / "config.json").write_text("{broken")
        result = cli_runner.invoke(create_app(), ["config", "reset", "-y"])
        assert result.exit_code == 0, result.output
        assert load_global_config() == GlobalConfig()
