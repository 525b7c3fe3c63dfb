"""Declarative types describing a resource command group.

A :class:`Config` is built once per resource at import time and never
mutated. It names the resource, the chain of :class:`ParentScope` objects
whose IDs must be known before the resource can be addressed, the
:class:`FieldDef` table mapping CLI flags onto model fields, and the CRUD
callbacks. Omitting a callback omits the matching subcommand.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)


class FieldType(str, Enum):
    """Kind of value a field flag carries."""

    STRING = "string"
    BOOL = "bool"
    INT = "int"


@dataclass(frozen=True)
class FieldDef:
    """Maps one CLI flag onto one attribute of the resource model.

    Attributes:
        struct_field: Name of the model field written by the flag. The field
            must be annotated with the primitive matching :attr:`type`, or
            ``Optional`` of it.
        flag: Long flag name without the leading dashes.
        type: Value kind of the flag.
        short: Optional single-letter short flag.
        required: Whether ``create`` requires the flag.
        description: Help text. Defaults to the flag name.
    """

    struct_field: str
    flag: str
    type: FieldType = FieldType.STRING
    short: Optional[str] = None
    required: bool = False
    description: str = ""

    @property
    def help(self) -> str:
        return self.description or self.flag


Resolver = Callable[[Any, "list[str]", str], str]
"""``(client, resolved_ids, name) -> id``. ``resolved_ids`` holds only the
IDs of the scopes declared before the one being resolved."""


@dataclass(frozen=True)
class ParentScope:
    """An ancestor resource whose ID is part of the request path.

    Attributes:
        name: Human-readable scope name (``organization``).
        id_flag: Flag carrying the ID (``organization-id``).
        name_flag: Optional flag carrying a name to resolve.
        resolver: Turns a name into an ID. Required when ``name_flag`` is set.
        uuid_names: Treat UUID-shaped values of the name flag as IDs and skip
            the resolver call.
        envvar: Environment variable that feeds the ID flag.
    """

    name: str
    id_flag: str
    name_flag: Optional[str] = None
    resolver: Optional[Resolver] = None
    uuid_names: bool = False
    envvar: Optional[str] = None


@dataclass(frozen=True)
class ListOptions:
    """Options for a list call. ``filter`` is an RSQL expression passed through verbatim."""

    filter: str = ""


def _no_hide_nulls(ctx: Any) -> bool:
    return False


@dataclass(frozen=True)
class Runtime:
    """Process-level collaborators, evaluated once per command invocation.

    Each callable receives the Typer context of the running command, which
    carries the root options in ``ctx.find_root().obj``.

    Attributes:
        new_client: Returns a fresh API client usable as a context manager.
        get_output: Returns the active output format name.
        get_hide_nulls: Returns whether null attributes are dropped from
            json/yaml output.
    """

    new_client: Callable[[Any], Any]
    get_output: Callable[[Any], str]
    get_hide_nulls: Callable[[Any], bool] = _no_hide_nulls


ListFunc = Callable[[Any, "list[str]", Optional[ListOptions]], "list[Any]"]
GetFunc = Callable[[Any, "list[str]", str], Any]
WriteFunc = Callable[[Any, "list[str]", Any], Any]
DeleteFunc = Callable[[Any, "list[str]", str], None]


@dataclass(frozen=True)
class Config(Generic[T]):
    """Declarative description of a resource command group.

    Every callback receives the client returned by
    :attr:`Runtime.new_client` and the parent IDs in scope order.
    """

    name: str
    model: type[T]
    runtime: Runtime
    aliases: tuple[str, ...] = ()
    parents: tuple[ParentScope, ...] = ()
    fields: tuple[FieldDef, ...] = ()
    list: Optional[ListFunc] = None
    get: Optional[GetFunc] = None
    create: Optional[WriteFunc] = None
    update: Optional[WriteFunc] = None
    delete: Optional[DeleteFunc] = None
