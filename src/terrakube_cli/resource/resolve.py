"""Resolve the parent-scope chain of a resource command into IDs.

For each :class:`~terrakube_cli.resource.types.ParentScope`, in declared
order:

1. A non-empty ID flag is used verbatim.
2. Without a name flag, a missing ID is a usage error.
3. With a name flag that is also empty, the error names both flags.
4. Otherwise the scope's resolver turns the name into an ID. It receives a
   copy of the IDs resolved for the earlier scopes only.

Scopes with ``uuid_names`` set accept a UUID in the name flag and use it
as the ID without calling the resolver, which saves one list call per
scope. Resolution is strictly sequential and never retried.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Optional, Sequence

from terrakube_cli.exceptions import DefinitionError, MissingFlagError, ResolutionError
from terrakube_cli.output import debug
from terrakube_cli.resource.binder import FlagSource
from terrakube_cli.resource.types import ListOptions, ParentScope, Resolver

_UUID_RE = re.compile(
    r"^(?:[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}|[0-9a-f]{32})$",
    re.IGNORECASE,
)


def is_uuid(value: str) -> bool:
    """Return ``True`` if *value* is a UUID: all four hyphens (8-4-4-4-12) or none."""
    return bool(_UUID_RE.match(value))


def _call_resolver(
    client: Any,
    scope: ParentScope,
    name: str,
    resolved_ids: Sequence[str],
) -> str:
    if scope.resolver is None:
        raise DefinitionError(
            f"parent scope {scope.name!r} has --{scope.name_flag} but no resolver"
        )
    debug(f"Resolving {scope.name} name {name!r}")
    resolved = scope.resolver(client, list(resolved_ids), name)
    debug(f"Resolved {scope.name} {name!r} -> {resolved}")
    return resolved


def resolve_id_or_name(
    client: Any,
    scope: ParentScope,
    value: str,
    resolved_ids: Sequence[str],
) -> str:
    """Return *value* itself when it is a UUID, else resolve it as a name.

    Args:
        client: API client handed to the resolver.
        scope: The scope being resolved.
        value: Content of the scope's name flag.
        resolved_ids: IDs of the earlier scopes.

    Returns:
        The ID for *scope*.
    """
    if is_uuid(value):
        debug(f"Using {scope.name} {value} as ID")
        return value
    return _call_resolver(client, scope, value, resolved_ids)


def resolve_parents(
    client: Any,
    flags: FlagSource,
    scopes: Sequence[ParentScope],
) -> list[str]:
    """Resolve every parent scope into an ID.

    Args:
        client: API client handed to the resolvers.
        flags: Flag values of the current invocation.
        scopes: Parent scopes in resolution order.

    Returns:
        One ID per scope, in scope order.

    Raises:
        MissingFlagError: If neither the ID nor the name flag is set.
        DefinitionError: If a name must be resolved but the scope has no
            resolver.
        ResolutionError: Propagated from resolvers when a name does not
            match exactly one resource.
    """
    ids: list[str] = []
    for scope in scopes:
        scope_id = flags.get(scope.id_flag) or ""
        if scope_id:
            ids.append(scope_id)
            continue

        if not scope.name_flag:
            raise MissingFlagError(f"--{scope.id_flag} is required")

        name = flags.get(scope.name_flag) or ""
        if not name:
            raise MissingFlagError(
                f"either --{scope.id_flag} or --{scope.name_flag} is required"
            )

        if scope.uuid_names:
            ids.append(resolve_id_or_name(client, scope, name, ids))
        else:
            ids.append(_call_resolver(client, scope, name, ids))
    return ids


# ---------------------------------------------------------------------------
# Name resolvers
# ---------------------------------------------------------------------------


def pick_single(items: Sequence[Any], name: str, kind: str, id_flag: str) -> str:
    """Return the ID of the only item in *items*.

    Raises:
        ResolutionError: If *items* is empty or holds more than one element.
    """
    if not items:
        raise ResolutionError(f"no {kind} found with name {name!r}")
    if len(items) > 1:
        raise ResolutionError(
            f"multiple {kind}s match name {name!r}, use --{id_flag}"
        )
    return items[0].id


def name_resolver(
    list_func: Callable[[Any, list[str], Optional[ListOptions]], Sequence[Any]],
    kind: str,
    id_flag: str,
) -> Resolver:
    """Build a resolver that looks a name up with a ``name==<value>`` filter.

    Args:
        list_func: List callback with the same signature as
            :attr:`~terrakube_cli.resource.types.Config.list`.
        kind: Resource kind used in error messages.
        id_flag: Flag suggested when the name is ambiguous.

    Returns:
        A :data:`~terrakube_cli.resource.types.Resolver`.
    """

    def resolver(client: Any, resolved_ids: list[str], name: str) -> str:
        items = list_func(client, resolved_ids, ListOptions(filter=f"name=={name}"))
        return pick_single(items, name, kind, id_flag)

    return resolver
