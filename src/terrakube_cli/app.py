"""Typer application factory and CLI entry point for terrakube-cli.

This module wires together the top-level Typer application: the root
callback holding the global options, the ``config`` sub-command group, and
one command group per API resource from
:mod:`terrakube_cli.commands.resources`.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It is the only place that prints errors: a
:class:`~terrakube_cli.exceptions.TerrakubeError` is printed once and the
process exits with its ``exit_code``. Any other exception is written to a
crash log under the data directory.

See Also:
    :mod:`terrakube_cli.config`: Configuration resolution.
    :mod:`terrakube_cli.output`: Diagnostics initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import httpx
import typer

from terrakube_cli import __version__
from terrakube_cli.exit_codes import EXIT_GENERIC_FAILURE
from terrakube_cli.models import GlobalConfig
from terrakube_cli.resource import Runtime


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"terrakube {__version__}")
        raise typer.Exit()


def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    config: Optional[str] = typer.Option(
        None, "--config", help="Config file (default: ~/.config/terrakube/config.json)."
    ),
    api_url: Optional[str] = typer.Option(
        None, "--api-url", help="Terrakube API URL."
    ),
    token: Optional[str] = typer.Option(
        None, "--token", help="API bearer token."
    ),
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Output format: json, yaml, table, tsv, none."
    ),
    hide_nulls: bool = typer.Option(
        False, "--hide-nulls", help="Omit null attributes from json/yaml output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Command-line client for the Terrakube API.

    Initialises the global :class:`~terrakube_cli.output.OutputManager`
    and stores the configuration flags in the Typer context. Configuration
    files are only read when a command first needs them (see
    :func:`current_config`).

    Args:
        ctx: Typer invocation context.
        version: If ``True``, print the version string and exit.
        config: Alternative user config file.
        api_url: API URL override (highest precedence).
        token: Token override (highest precedence).
        output: Output format override (highest precedence).
        hide_nulls: Drop null attributes from json/yaml output.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential diagnostic output.
        verbose: Enable debug-level diagnostic output.
    """
    from terrakube_cli.output import OutputManager, set_output

    set_output(OutputManager(no_color=no_color, quiet=quiet, verbose=verbose))

    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config
    ctx.obj["api_url"] = api_url
    ctx.obj["token"] = token
    ctx.obj["output"] = output
    ctx.obj["hide_nulls"] = hide_nulls


def current_config(ctx: typer.Context) -> GlobalConfig:
    """Return the effective configuration of the command running in *ctx*.

    Resolved on first use from the root context's flags via
    :func:`~terrakube_cli.config.resolve_config` and cached in ``ctx.obj``.
    """
    from terrakube_cli.config import resolve_config

    root = ctx.find_root()
    obj = root.ensure_object(dict)
    if "config" not in obj:
        resolved = resolve_config(
            cli_config=obj.get("config_path"),
            cli_api_url=obj.get("api_url"),
            cli_token=obj.get("token"),
            cli_output=obj.get("output"),
        )
        if obj.get("hide_nulls"):
            resolved = resolved.model_copy(update={"hide_nulls": True})
        obj["config"] = resolved
    return obj["config"]


def default_runtime(transport: Optional[httpx.BaseTransport] = None) -> Runtime:
    """Build the :class:`~terrakube_cli.resource.Runtime` used by resource commands.

    Args:
        transport: Optional httpx transport for every client created.
    """
    from terrakube_cli.client import SyncClient

    return Runtime(
        new_client=lambda ctx: SyncClient(current_config(ctx), transport=transport),
        get_output=lambda ctx: current_config(ctx).output,
        get_hide_nulls=lambda ctx: current_config(ctx).hide_nulls,
    )


def create_app(runtime: Optional[Runtime] = None) -> typer.Typer:
    """Build the root Typer application.

    Args:
        runtime: Collaborators for resource commands. Defaults to
            :func:`default_runtime`.

    Returns:
        The configured :class:`typer.Typer` application.
    """
    from terrakube_cli.commands.config import config_app
    from terrakube_cli.commands.resources import register_resources

    app = typer.Typer(
        name="terrakube",
        help="Command-line client for the Terrakube API.",
        no_args_is_help=True,
        add_completion=True,
        rich_markup_mode="rich",
    )
    app.callback()(main_callback)
    app.add_typer(config_app, name="config", help="Configuration management.")
    register_resources(app, runtime or default_runtime())
    return app


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path.

    Args:
        exc: The unhandled exception to log.

    Returns:
        Absolute path to the written crash log file.
    """
    from terrakube_cli.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    )
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``terrakube`` console script.

    Unhandled :class:`~terrakube_cli.exceptions.TerrakubeError` instances
    are printed once and cause an exit with the error's ``exit_code``. All
    other exceptions produce a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app = create_app()
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from terrakube_cli.exceptions import TerrakubeError
        from terrakube_cli.output import error

        if isinstance(exc, TerrakubeError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
