"""Build the Typer command group for a resource :class:`Config`.

:func:`register` adds ``<name> list|get|create|update|delete`` to a root
application, skipping every verb whose callback is ``None``. Aliases are
registered as hidden groups sharing the same sub-application.

**Command flow**

* ``list``: resolve parents, build :class:`ListOptions` from ``--filter``,
  call ``Config.list``, render.
* ``get``: resolve parents, read ``--id``, call ``Config.get``, render.
* ``create``: resolve parents, bind every field flag onto a fresh model,
  call ``Config.create``, render.
* ``update``: resolve parents, stamp ``--id`` onto a fresh model, bind the
  changed field flags, call ``Config.update``, render.
* ``delete``: resolve parents, read ``--id``, call ``Config.delete``, print
  ``"<name> deleted"``.

Handlers never print errors themselves. Everything they raise reaches
:func:`terrakube_cli.app.main`, which prints it once.

Each command is a generated function whose signature lists the command's
options, because Typer builds the CLI from ``inspect.signature``. The
function takes the Typer context as its first parameter and passes it to the
shared handler.
"""

from __future__ import annotations

import sys
from typing import Any, Callable

import typer

from terrakube_cli.exceptions import DefinitionError
from terrakube_cli.output import debug
from terrakube_cli.renderer import render
from terrakube_cli.resource.binder import (
    FlagSource,
    populate_changed_fields,
    populate_fields,
    set_struct_field,
    validate_fields,
)
from terrakube_cli.resource.params import (
    build_field_options,
    build_filter_option,
    build_id_option,
    build_parent_options,
    check_unique,
)
from terrakube_cli.resource.resolve import resolve_parents
from terrakube_cli.resource.types import Config, ListOptions

Handler = Callable[[typer.Context], None]

VERBS = ("list", "get", "create", "update", "delete")


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


def register(root: typer.Typer, cfg: Config[Any]) -> typer.Typer:
    """Add the command group described by *cfg* to *root*.

    Args:
        root: Application receiving the ``<name>`` group.
        cfg: Resource description.

    Returns:
        The generated sub-application.

    Raises:
        DefinitionError: If a field definition does not fit ``cfg.model``,
            a parent scope has a name flag but no resolver, or two flags of
            one command collide.
    """
    _validate_config(cfg)

    short_help = f"manage {cfg.name} resources"
    sub_app = typer.Typer(
        name=cfg.name,
        help=short_help,
        no_args_is_help=True,
    )

    for verb in VERBS:
        if getattr(cfg, verb) is None:
            continue
        descriptors = _descriptors_for(cfg, verb)
        check_unique(descriptors, f"{cfg.name} {verb}")
        fn = _build_command_function(cfg.name, verb, descriptors, _make_handler(cfg, verb))
        sub_app.command(name=verb, help=_HELP[verb].format(name=cfg.name))(fn)

    root.add_typer(sub_app, name=cfg.name, help=short_help)
    for alias in cfg.aliases:
        root.add_typer(sub_app, name=alias, help=short_help, hidden=True)
    return sub_app


_HELP = {
    "list": "List {name} resources.",
    "get": "Show one {name}.",
    "create": "Create a {name}.",
    "update": "Update a {name}; only the flags given are changed.",
    "delete": "Delete a {name}.",
}


def _validate_config(cfg: Config[Any]) -> None:
    validate_fields(cfg.model, cfg.fields)
    for scope in cfg.parents:
        if scope.name_flag and scope.resolver is None:
            raise DefinitionError(
                f"{cfg.name}: parent scope {scope.name!r} has --{scope.name_flag} "
                "but no resolver"
            )


def _descriptors_for(cfg: Config[Any], verb: str) -> list[dict[str, Any]]:
    descriptors = build_parent_options(cfg.parents)
    if verb == "list":
        descriptors.append(build_filter_option())
    if verb in ("get", "update", "delete"):
        descriptors.append(build_id_option(cfg.name))
    if verb in ("create", "update"):
        descriptors.extend(build_field_options(cfg.fields, enforce_required=verb == "create"))
    return descriptors


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def _make_handler(cfg: Config[Any], verb: str) -> Handler:
    """Return the handler running *verb* for *cfg*."""

    def handler(ctx: typer.Context) -> None:
        flags = FlagSource.from_context(ctx)
        runtime = cfg.runtime
        debug(f"Running {cfg.name} {verb}")

        with runtime.new_client(ctx) as client:
            parent_ids = resolve_parents(client, flags, cfg.parents)

            if verb == "delete":
                cfg.delete(client, parent_ids, flags.get("id") or "")
                typer.echo(f"{cfg.name} deleted")
                return

            if verb == "list":
                filter_expr = flags.get("filter") or ""
                opts = ListOptions(filter=filter_expr) if filter_expr else None
                result = cfg.list(client, parent_ids, opts)
            elif verb == "get":
                result = cfg.get(client, parent_ids, flags.get("id") or "")
            elif verb == "create":
                resource = cfg.model()
                populate_fields(flags, cfg.fields, resource)
                result = cfg.create(client, parent_ids, resource)
            else:
                resource = cfg.model()
                set_struct_field(resource, "id", flags.get("id") or "")
                populate_changed_fields(flags, cfg.fields, resource)
                result = cfg.update(client, parent_ids, resource)

        render(
            sys.stdout,
            result,
            runtime.get_output(ctx),
            hide_nulls=runtime.get_hide_nulls(ctx),
        )

    return handler


# ---------------------------------------------------------------------------
# Dynamic command function builder
# ---------------------------------------------------------------------------


def _build_command_function(
    resource_name: str,
    verb: str,
    descriptors: list[dict[str, Any]],
    handler: Handler,
) -> Callable[..., Any]:
    """Generate a Typer-compatible function for one subcommand.

    The function source is built as a string, compiled, and executed into a
    namespace holding the option descriptors as default sentinels, so that
    :mod:`inspect` (which Typer relies on) reads the intended signature.

    Args:
        resource_name: Resource name, used for the function name.
        verb: Subcommand name.
        descriptors: Option descriptors from :mod:`~terrakube_cli.resource.params`.
        handler: Called with the Typer context when the command runs.

    Returns:
        A callable suitable for registration via :meth:`typer.Typer.command`.
    """
    func_name = f"_cmd_{resource_name.replace('-', '_')}_{verb}"

    namespace: dict[str, Any] = {}
    sig_parts: list[str] = ["ctx: _typer_context"]
    for idx, desc in enumerate(descriptors):
        sentinel = f"_default_opt_{idx}"
        ann = f"_ann_opt_{idx}"
        namespace[sentinel] = desc["default"]
        namespace[ann] = desc["type"]
        sig_parts.append(f"{desc['name']}: {ann} = {sentinel}")

    source = (
        f"def {func_name}({', '.join(sig_parts)}):\n"
        "    return _handler(ctx)\n"
    )

    namespace["_handler"] = handler
    namespace["_typer_context"] = typer.Context

    code = compile(source, f"<terrakube:{resource_name} {verb}>", "exec")
    exec(code, namespace)  # noqa: S102 -- controlled code generation
    fn = namespace[func_name]
    fn.__doc__ = _HELP[verb].format(name=resource_name)
    return fn
