"""Where terrakube keeps its settings and how the effective settings are chosen.

Files:

* ``config.json`` in the config directory holds the user's
  :class:`~terrakube_cli.models.GlobalConfig` (API URL, token, output
  defaults). ``--config`` points at another file.
* ``terrakube.json`` in the working directory pins settings for one project,
  typically the ``api_url`` of the instance a repository deploys to.
* Crash logs go to the data directory.

Linux and the BSDs follow the XDG base directory layout
(``$XDG_CONFIG_HOME/terrakube``, ``$XDG_DATA_HOME/terrakube``); other
platforms use ``~/.terrakube``. The config file may contain a token, so it
is written atomically with mode ``0600``.

:func:`resolve_config` merges everything into the configuration a command
runs with.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from terrakube_cli.exceptions import ConfigError
from terrakube_cli.models import GlobalConfig

_APP_NAME = "terrakube"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "terrakube.json"

ENV_API_URL = "TERRAKUBE_API_URL"
ENV_TOKEN = "TERRAKUBE_TOKEN"
ENV_OUTPUT = "TERRAKUBE_OUTPUT"

_ENV_KEYS = {
    "api_url": ENV_API_URL,
    "token": ENV_TOKEN,
    "output": ENV_OUTPUT,
}


# --- Directories ---


def _is_xdg_platform() -> bool:
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _app_dir(xdg_var: str, xdg_default: Path, fallback: Path) -> Path:
    """Return (and create) an application directory.

    Args:
        xdg_var: XDG variable consulted on XDG platforms.
        xdg_default: Base used when *xdg_var* is unset or empty.
        fallback: Directory used on non-XDG platforms.
    """
    if _is_xdg_platform():
        path = Path(os.environ.get(xdg_var) or xdg_default) / _APP_NAME
    else:
        path = fallback
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """Directory holding ``config.json`` (``~/.config/terrakube`` by default)."""
    home = Path.home()
    return _app_dir("XDG_CONFIG_HOME", home / ".config", home / f".{_APP_NAME}")


def get_data_dir() -> Path:
    """Directory holding crash logs (``~/.local/share/terrakube`` by default)."""
    home = Path.home()
    return _app_dir(
        "XDG_DATA_HOME",
        home / ".local" / "share",
        home / f".{_APP_NAME}" / "data",
    )


# --- File helpers ---


def _atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data* in one rename, mode ``0600``.

    The temp file lives next to *path* so ``os.replace`` stays on one
    filesystem. It is removed again if anything fails.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    handle = tempfile.NamedTemporaryFile(
        mode="w",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
        encoding="utf-8",
    )
    try:
        with handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.chmod(handle.name, 0o600)
        os.replace(handle.name, path)
    except BaseException:
        try:
            os.unlink(handle.name)
        except OSError:
            pass
        raise


def _read_json_file(path: Path, label: str) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except ValueError as exc:
        raise ConfigError(f"Invalid {label} at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid {label} at {path}: expected a JSON object")
    return data


# --- User config ---


def load_global_config(path: Optional[Path] = None) -> GlobalConfig:
    """Load the user configuration.

    Args:
        path: File given with ``--config``. When omitted, ``config.json`` in
            :func:`get_config_dir` is used and a missing file means defaults.

    Raises:
        ConfigError: If an explicit *path* does not exist, or the file is
            not valid JSON or does not validate as a
            :class:`~terrakube_cli.models.GlobalConfig`.
    """
    if path is None:
        path = get_config_dir() / _CONFIG_FILENAME
        if not path.is_file():
            return GlobalConfig()
    elif not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    data = _read_json_file(path, "config")
    try:
        return GlobalConfig.model_validate(data)
    except ValueError as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig, path: Optional[Path] = None) -> None:
    """Write *config* to *path* (default: the user config file)."""
    target = path or get_config_dir() / _CONFIG_FILENAME
    _atomic_write(target, json.dumps(config.model_dump(mode="json"), indent=2) + "\n")


def load_project_config() -> Optional[dict[str, Any]]:
    """Return ``./terrakube.json`` as a dict, or ``None`` when there is none.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    return _read_json_file(path, "project config")


# --- Effective configuration ---


def resolve_config(
    cli_config: Optional[str] = None,
    cli_api_url: Optional[str] = None,
    cli_token: Optional[str] = None,
    cli_output: Optional[str] = None,
) -> GlobalConfig:
    """Merge every configuration source, highest precedence first:

    1. ``--api-url``, ``--token``, ``--output``
    2. ``TERRAKUBE_API_URL``, ``TERRAKUBE_TOKEN``, ``TERRAKUBE_OUTPUT``
       (empty values are ignored)
    3. ``./terrakube.json``
    4. the user config file (or ``--config``)
    5. model defaults

    Raises:
        ConfigError: If a config file is unreadable or the merged result is
            invalid.
    """
    base_path = Path(cli_config).expanduser() if cli_config else None
    data = load_global_config(base_path).model_dump()

    project = load_project_config() or {}
    data.update({key: project[key] for key in GlobalConfig.model_fields if key in project})

    for key, env_var in _ENV_KEYS.items():
        value = os.environ.get(env_var)
        if value:
            data[key] = value

    flags = {"api_url": cli_api_url, "token": cli_token, "output": cli_output}
    data.update({key: value for key, value in flags.items() if value is not None})

    try:
        return GlobalConfig.model_validate(data)
    except ValueError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
