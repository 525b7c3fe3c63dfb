"""Config commands -- view and modify the user configuration.

Provides the ``terrakube config`` sub-command group for reading, updating,
and resetting the configuration file
(:class:`~terrakube_cli.models.GlobalConfig`). The file lives in the
terrakube config directory unless ``--config`` points elsewhere.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer

from terrakube_cli.output import error, info, success


config_app = typer.Typer(no_args_is_help=True)


def _config_path(ctx: typer.Context) -> Optional[Path]:
    root = ctx.find_root()
    value = root.obj.get("config_path") if root.obj else None
    return Path(value).expanduser() if value else None


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Show the stored configuration.

    The token is masked. The output honours ``--output``.

    Example::

        terrakube config show
        terrakube -o yaml config show
    """
    from terrakube_cli.config import get_config_dir, load_global_config
    from terrakube_cli.renderer import render

    path = _config_path(ctx)
    config = load_global_config(path)
    if config.token:
        config = config.model_copy(update={"token": "****"})

    info(f"Config file: {path or get_config_dir() / 'config.json'}")
    obj = ctx.find_root().obj or {}
    render(sys.stdout, config, obj.get("output") or "json")


@config_app.command("set")
def config_set(
    ctx: typer.Context,
    key: str = typer.Argument(help="Config key (api_url, token, output, hide_nulls)."),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    Boolean keys accept ``true``/``false``, ``1``/``0`` and ``yes``/``no``.
    The updated config is validated against
    :class:`~terrakube_cli.models.GlobalConfig` before saving.

    Raises:
        typer.Exit: With code 2 for an unknown key or an invalid value.

    Example::

        terrakube config set api_url https://terrakube.example.com
        terrakube config set output table
    """
    from terrakube_cli.config import load_global_config, save_global_config
    from terrakube_cli.models import GlobalConfig
    from terrakube_cli.renderer import OutputFormat

    path = _config_path(ctx)
    data = load_global_config(path).model_dump(mode="json")

    if key not in data:
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    coerced: object = value
    if isinstance(data[key], bool):
        coerced = value.lower() in ("true", "1", "yes")
    elif key == "output" and value not in {f.value for f in OutputFormat}:
        error(f"Unsupported output format: {value}")
        raise typer.Exit(code=2)

    data[key] = coerced
    try:
        new_config = GlobalConfig.model_validate(data)
    except ValueError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_global_config(new_config, path)
    shown = "****" if key == "token" else coerced
    success(f"Set {key} = {shown}")


@config_app.command("reset")
def config_reset(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
) -> None:
    """Reset configuration to defaults.

    Example::

        terrakube config reset --yes
    """
    from terrakube_cli.config import save_global_config
    from terrakube_cli.models import GlobalConfig

    if not yes:
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(GlobalConfig(), _config_path(ctx))
    success("Configuration reset to defaults.")
