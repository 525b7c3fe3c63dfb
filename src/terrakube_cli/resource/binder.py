"""Bind CLI flag values onto resource models.

Two modes are provided:

* :func:`populate_fields` writes every field flag (``create``).
* :func:`populate_changed_fields` writes only flags the user set explicitly
  (``update``), leaving every other model field untouched so that the
  update carries only what the user changed.

Write rules per field annotation:

=================  =========================================================
``Optional[str]``  ``""`` leaves the field ``None``; other values are set.
``str``            Always set, including ``""``.
``bool``/``int``   Always set, whether ``Optional`` or not.
=================  =========================================================

A field definition naming a missing model field, or a field whose annotation
does not match the flag type, raises
:class:`~terrakube_cli.exceptions.DefinitionError` before anything is written.
"""

from __future__ import annotations

import types
from typing import Any, Iterable, Mapping, Optional, Union, get_args, get_origin

import typer
from pydantic import BaseModel

from terrakube_cli.exceptions import DefinitionError
from terrakube_cli.resource.params import sanitize_param_name
from terrakube_cli.resource.types import FieldDef, FieldType

_KIND_TYPES: dict[FieldType, type] = {
    FieldType.STRING: str,
    FieldType.BOOL: bool,
    FieldType.INT: int,
}

_ZERO_VALUES: dict[FieldType, Any] = {
    FieldType.STRING: "",
    FieldType.BOOL: False,
    FieldType.INT: 0,
}

# ParameterSource names. typer may vendor its own click, so the enum members
# are not comparable across installations.
_UNSET_SOURCES = frozenset({"DEFAULT", "DEFAULT_MAP"})


def _is_explicit(source: Any) -> bool:
    return source is not None and source.name not in _UNSET_SOURCES


class FlagSource:
    """Read-only view over the flag values of one command invocation.

    Keys may be given either as flag names (``organization-id``) or as the
    Python parameter names Typer uses (``organization_id``).

    Args:
        values: Flag values keyed by flag or parameter name.
        explicit: Names of the flags the user set explicitly.
    """

    def __init__(self, values: Mapping[str, Any], explicit: Iterable[str] = ()) -> None:
        self._values = {sanitize_param_name(k): v for k, v in values.items()}
        self._explicit = frozenset(sanitize_param_name(k) for k in explicit)

    @classmethod
    def from_context(cls, ctx: typer.Context) -> FlagSource:
        """Build a source from the context of the running command.

        A parameter counts as explicitly set when click did not take its
        value from the declared default. Values coming from an environment
        variable count as set.
        """
        explicit = [name for name in ctx.params if _is_explicit(ctx.get_parameter_source(name))]
        return cls(ctx.params, explicit)

    def get(self, flag: str, default: Any = None) -> Any:
        return self._values.get(sanitize_param_name(flag), default)

    def changed(self, flag: str) -> bool:
        return sanitize_param_name(flag) in self._explicit


# ---------------------------------------------------------------------------
# Definition checks
# ---------------------------------------------------------------------------


def _unwrap_optional(annotation: Any) -> tuple[Any, bool]:
    """Return ``(inner_type, is_optional)`` for ``Optional[X]`` / ``X | None``."""
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [a for a in get_args(annotation) if a is not type(None)]
        if len(args) == 1 and len(args) < len(get_args(annotation)):
            return args[0], True
    return annotation, False


def _check_field(model: type[BaseModel], field: FieldDef) -> bool:
    """Validate *field* against *model* and return whether the target is optional."""
    info = model.model_fields.get(field.struct_field)
    if info is None:
        raise DefinitionError(
            f"{model.__name__} has no field {field.struct_field!r} (flag --{field.flag})"
        )
    inner, optional = _unwrap_optional(info.annotation)
    expected = _KIND_TYPES[field.type]
    if inner is not expected:
        raise DefinitionError(
            f"{model.__name__}.{field.struct_field} cannot hold a "
            f"{field.type.value} flag (--{field.flag})"
        )
    return optional


def validate_fields(model: type[BaseModel], fields: Iterable[FieldDef]) -> None:
    """Check every field definition against *model*.

    Raises:
        DefinitionError: On the first unknown or mistyped field.
    """
    for field in fields:
        _check_field(model, field)


# ---------------------------------------------------------------------------
# Population
# ---------------------------------------------------------------------------


def _write_field(target: BaseModel, field: FieldDef, value: Any) -> None:
    optional = _check_field(type(target), field)
    if value is None:
        value = _ZERO_VALUES[field.type]
    if field.type == FieldType.STRING and optional and value == "":
        return
    setattr(target, field.struct_field, value)


def populate_fields(flags: FlagSource, fields: Iterable[FieldDef], target: BaseModel) -> None:
    """Write every field flag onto *target* (full mode, used by ``create``).

    Args:
        flags: Flag values of the current invocation.
        fields: Field definitions of the resource.
        target: Model instance to populate in place.

    Raises:
        DefinitionError: If a field definition does not fit the model.
    """
    fields = list(fields)
    validate_fields(type(target), fields)
    for field in fields:
        _write_field(target, field, flags.get(field.flag))


def populate_changed_fields(
    flags: FlagSource,
    fields: Iterable[FieldDef],
    target: BaseModel,
) -> None:
    """Write only the explicitly set field flags onto *target* (used by ``update``).

    Args:
        flags: Flag values of the current invocation.
        fields: Field definitions of the resource.
        target: Model instance to populate in place.

    Raises:
        DefinitionError: If a field definition does not fit the model.
    """
    fields = list(fields)
    validate_fields(type(target), fields)
    for field in fields:
        if flags.changed(field.flag):
            _write_field(target, field, flags.get(field.flag))


def set_struct_field(target: BaseModel, name: str, value: Optional[Any]) -> None:
    """Force *value* into the field *name* of *target*, bypassing the field table.

    Used to stamp the ID onto the update target. Unknown field names are
    ignored.
    """
    if name in type(target).model_fields:
        setattr(target, name, value)
