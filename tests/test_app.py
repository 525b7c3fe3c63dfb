"""Tests for the application factory and the ``main`` entry point."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from typer.testing import CliRunner

from terrakube_cli import __version__
from terrakube_cli.app import create_app, main


class TestCreateApp:
    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(create_app(), ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_resources(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(create_app(), ["--help"])
        assert result.exit_code == 0
        for name in ("organization", "workspace", "variable", "config"):
            assert name in result.output

    def test_missing_api_url(self, isolated_config: Path, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(create_app(), ["organization", "list"])
        assert result.exception is not None
        assert "API URL is not configured" in str(result.exception)


class TestMain:
    def _run(self, monkeypatch: pytest.MonkeyPatch, *args: str) -> int:
        monkeypatch.setattr("terrakube_cli.app._setup_signal_handlers", lambda: None)
        monkeypatch.setattr(sys, "argv", ["terrakube", "--no-color", *args])
        with pytest.raises(SystemExit) as exc_info:
            main()
        return exc_info.value.code

    def test_error_printed_once_with_exit_code(
        self,
        isolated_config: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setenv("TERRAKUBE_API_URL", "http://terrakube.test")

        code = self._run(monkeypatch, "workspace", "list")

        captured = capsys.readouterr()
        assert code == 2
        message = "either --organization-id or --organization-name is required"
        assert captured.err.count(message) == 1
        assert captured.err.startswith("Error: ")
        assert captured.out == ""

    def test_config_error_exit_code(
        self,
        isolated_config: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = self._run(monkeypatch, "organization", "list")

        assert code == 1
        assert "API URL is not configured" in capsys.readouterr().err

    def test_unexpected_error_writes_crash_log(
        self,
        isolated_config: Path,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        def broken(runtime=None):
            raise RuntimeError("boom")

        monkeypatch.setattr("terrakube_cli.app.create_app", broken)
        monkeypatch.setenv("NO_COLOR", "1")

        code = self._run(monkeypatch, "organization", "list")

        assert code == 1
        logs = list((tmp_path / "data" / "terrakube" / "logs").glob("crash-*.log"))
        assert len(logs) == 1
        assert "RuntimeError: boom" in logs[0].read_text()
        assert str(logs[0]) in capsys.readouterr().err

    def test_success_exits_zero(
        self,
        isolated_config: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = self._run(monkeypatch, "config", "reset", "--yes")
        assert code == 0
