"""Generic resource-command engine.

Turns a declarative :class:`Config` into ``list|get|create|update|delete``
subcommands:

* :mod:`~terrakube_cli.resource.resolve` -- parent-scope resolution by ID
  or by name.
* :mod:`~terrakube_cli.resource.binder` -- flag values onto model fields.
* :mod:`~terrakube_cli.resource.params` -- definitions to Typer options.
* :mod:`~terrakube_cli.resource.registrar` -- command generation.

Rendering lives in :mod:`terrakube_cli.renderer`.
"""

from terrakube_cli.resource.binder import (
    FlagSource,
    populate_changed_fields,
    populate_fields,
    set_struct_field,
    validate_fields,
)
from terrakube_cli.resource.registrar import register
from terrakube_cli.resource.resolve import (
    is_uuid,
    name_resolver,
    pick_single,
    resolve_id_or_name,
    resolve_parents,
)
from terrakube_cli.resource.types import (
    Config,
    FieldDef,
    FieldType,
    ListOptions,
    ParentScope,
    Resolver,
    Runtime,
)

__all__ = [
    "Config",
    "FieldDef",
    "FieldType",
    "FlagSource",
    "ListOptions",
    "ParentScope",
    "Resolver",
    "Runtime",
    "is_uuid",
    "name_resolver",
    "pick_single",
    "populate_changed_fields",
    "populate_fields",
    "register",
    "resolve_id_or_name",
    "resolve_parents",
    "set_struct_field",
    "validate_fields",
]
