"""Map resource definitions to Typer CLI options.

This module converts :class:`~terrakube_cli.resource.types.FieldDef` and
:class:`~terrakube_cli.resource.types.ParentScope` entries into descriptor
dictionaries that :func:`~terrakube_cli.resource.registrar._build_command_function`
uses to construct dynamically generated function signatures.

**Mapping rules:**

* **Parent scopes** contribute ``--<scope>-id`` and, when configured,
  ``--<scope>-name``. Both are optional at the CLI level; the parent
  resolver reports which one is missing.
* **String fields** become ``--flag`` options defaulting to ``""``.
* **Bool fields** become ``--flag/--no-flag`` pairs so that ``update`` can
  set ``false`` explicitly.
* **Int fields** become ``--flag`` options defaulting to ``0``.
* **Required fields** use ``...`` (Typer's "required" sentinel) on
  ``create`` only.
* **Flag names** are sanitised to valid Python identifiers via
  :func:`sanitize_param_name`. Two flags mapping to the same identifier are
  a definition error.
"""

from __future__ import annotations

import keyword
import re
from typing import Any, Iterable

import typer

from terrakube_cli.exceptions import DefinitionError
from terrakube_cli.resource.types import FieldDef, FieldType, ParentScope


# ---------------------------------------------------------------------------
# Name sanitisation
# ---------------------------------------------------------------------------

# Matches any character that is not alphanumeric or underscore.
_INVALID_IDENT_RE = re.compile(r"[^a-zA-Z0-9_]")


def sanitize_param_name(name: str) -> str:
    """Convert a flag name to a valid Python identifier.

    Applies the following transformations in order:

    1. CamelCase boundaries are split with underscores (``tagId`` becomes
       ``tag_id``).
    2. The string is lowercased.
    3. Hyphens and dots are replaced with underscores.
    4. Any remaining non-alphanumeric/non-underscore characters are replaced.
    5. Consecutive and leading/trailing underscores are collapsed.
    6. An empty result defaults to ``"param"``.
    7. A leading digit gets an underscore prefix.
    8. Python keywords get a trailing underscore per PEP 8 convention.

    Args:
        name: The raw flag name (e.g., ``"organization-id"``).

    Returns:
        A valid Python identifier (e.g., ``"organization_id"``).

    Example::

        >>> sanitize_param_name("organization-id")
        'organization_id'
        >>> sanitize_param_name("global")
        'global_'
    """
    result = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", name)
    result = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", result)
    result = result.lower()
    result = result.replace("-", "_").replace(".", "_")
    result = _INVALID_IDENT_RE.sub("_", result)
    result = re.sub(r"_+", "_", result).strip("_")
    if not result:
        result = "param"
    if result[0].isdigit():
        result = f"_{result}"
    if keyword.iskeyword(result):
        result = f"{result}_"
    return result


# ---------------------------------------------------------------------------
# Descriptors
# ---------------------------------------------------------------------------


def _descriptor(flag: str, py_type: type, default: Any) -> dict[str, Any]:
    return {
        "name": sanitize_param_name(flag),
        "flag": flag,
        "type": py_type,
        "default": default,
    }


def _decls(flag: str, short: str | None = None) -> list[str]:
    decls = [f"--{flag}"]
    if short:
        decls.append(f"-{short}")
    return decls


def build_parent_options(scopes: Iterable[ParentScope]) -> list[dict[str, Any]]:
    """Build the ``--<scope>-id`` / ``--<scope>-name`` descriptors for *scopes*.

    Args:
        scopes: Parent scopes in resolution order.

    Returns:
        Descriptor dicts with keys ``name``, ``flag``, ``type`` and
        ``default`` (a :func:`typer.Option`).
    """
    descriptors: list[dict[str, Any]] = []
    for scope in scopes:
        descriptors.append(_descriptor(
            scope.id_flag,
            str,
            typer.Option(
                "",
                *_decls(scope.id_flag),
                envvar=scope.envvar,
                show_default=False,
                help=f"{scope.name} ID",
            ),
        ))
        if scope.name_flag:
            descriptors.append(_descriptor(
                scope.name_flag,
                str,
                typer.Option(
                    "",
                    *_decls(scope.name_flag),
                    show_default=False,
                    help=f"{scope.name} name",
                ),
            ))
    return descriptors


def build_field_options(
    fields: Iterable[FieldDef],
    enforce_required: bool,
) -> list[dict[str, Any]]:
    """Build one descriptor per field flag.

    Args:
        fields: Field definitions in declaration order.
        enforce_required: Mark ``required`` fields as mandatory. ``True``
            for ``create``, ``False`` for ``update``.

    Returns:
        Descriptor dicts in the same shape as :func:`build_parent_options`.
    """
    descriptors: list[dict[str, Any]] = []
    for field in fields:
        required = enforce_required and field.required
        help_text = f"{field.help}  [REQUIRED]" if required else field.help

        if field.type == FieldType.BOOL:
            decls = [f"--{field.flag}/--no-{field.flag}"]
            if field.short:
                decls.append(f"-{field.short}")
            default = typer.Option(... if required else False, *decls, help=help_text)
            py_type: type = bool
        elif field.type == FieldType.INT:
            default = typer.Option(
                ... if required else 0,
                *_decls(field.flag, field.short),
                help=help_text,
            )
            py_type = int
        else:
            default = typer.Option(
                ... if required else "",
                *_decls(field.flag, field.short),
                show_default=False,
                help=help_text,
            )
            py_type = str

        descriptors.append(_descriptor(field.flag, py_type, default))
    return descriptors


def build_id_option(resource_name: str) -> dict[str, Any]:
    """Build the required ``--id`` descriptor used by get, update and delete."""
    return _descriptor(
        "id",
        str,
        typer.Option(..., "--id", help=f"{resource_name} ID"),
    )


def build_filter_option() -> dict[str, Any]:
    """Build the ``--filter`` descriptor used by list."""
    return _descriptor(
        "filter",
        str,
        typer.Option("", "--filter", show_default=False, help="RSQL filter expression"),
    )


def check_unique(descriptors: list[dict[str, Any]], command: str) -> None:
    """Raise :class:`DefinitionError` when two flags share a Python name.

    Args:
        descriptors: All descriptors of one command.
        command: Command path used in the error message.
    """
    seen: dict[str, str] = {}
    for desc in descriptors:
        previous = seen.get(desc["name"])
        if previous is not None:
            raise DefinitionError(
                f"{command}: flags --{previous} and --{desc['flag']} collide"
            )
        seen[desc["name"]] = desc["flag"]
