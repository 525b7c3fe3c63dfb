"""Shared test fixtures for terrakube-cli.

Provides an isolated config environment, a recording HTTP transport that
answers JSON:API requests from canned routes, and a CLI runner. These
fixtures are automatically discovered by pytest and available to all test
modules without explicit imports.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import httpx
import pytest
from typer.testing import CliRunner

from terrakube_cli.output import reset_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stderr at creation time.
    When Typer's CliRunner redirects that stream during a test and the test
    finishes, the cached reference becomes stale ("I/O operation on closed
    file"). Resetting forces a fresh manager to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Isolated configuration
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point every config location at *tmp_path* and clear TERRAKUBE_* variables.

    Returns:
        The isolated config directory (``<tmp>/config/terrakube``).
    """
    monkeypatch.setattr("terrakube_cli.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for name in (
        "TERRAKUBE_API_URL",
        "TERRAKUBE_TOKEN",
        "TERRAKUBE_OUTPUT",
        "TERRAKUBE_WORKSPACE_ID",
        "NO_COLOR",
    ):
        monkeypatch.delenv(name, raising=False)
    work_dir = tmp_path / "work"
    work_dir.mkdir()
    monkeypatch.chdir(work_dir)
    return tmp_path / "config" / "terrakube"


@pytest.fixture
def cli_runner() -> CliRunner:
    """Typer CLI test runner."""
    return CliRunner()


# ---------------------------------------------------------------------------
# Recording transport
# ---------------------------------------------------------------------------


@dataclass
class RecordedRequest:
    """One request seen by :class:`RecordingTransport`."""

    method: str
    path: str
    params: dict[str, str]
    headers: dict[str, str]
    body: Optional[Any]


@dataclass
class _Route:
    method: str
    path: str
    status: int
    payload: Optional[Any]


@dataclass
class RecordingTransport:
    """Canned JSON:API server built on :class:`httpx.MockTransport`.

    Routes match on method and the exact path below ``/api/v1/``. Requests
    without a route get a JSON:API 404. Every request is recorded in order.
    """

    requests: list[RecordedRequest] = field(default_factory=list)
    routes: list[_Route] = field(default_factory=list)

    def on(
        self,
        method: str,
        path: str,
        status: int = 200,
        payload: Optional[Any] = None,
    ) -> RecordingTransport:
        self.routes.append(_Route(method.upper(), path, status, payload))
        return self

    def _handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        prefix = "/api/v1/"
        if path.startswith(prefix):
            path = path[len(prefix):]
        body = json.loads(request.content) if request.content else None
        self.requests.append(
            RecordedRequest(
                method=request.method,
                path=path,
                params=dict(request.url.params),
                headers=dict(request.headers),
                body=body,
            )
        )
        for route in self.routes:
            if route.method == request.method and route.path == path:
                if route.payload is None:
                    return httpx.Response(route.status)
                return httpx.Response(route.status, json=route.payload)
        return httpx.Response(
            404, json={"errors": [{"detail": f"no route for {request.method} {path}"}]}
        )

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)


@pytest.fixture
def recorder() -> RecordingTransport:
    """A fresh :class:`RecordingTransport` without routes."""
    return RecordingTransport()

