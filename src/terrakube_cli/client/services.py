"""Typed CRUD services, one per API resource.

A :class:`ResourceService` binds a resource model to its collection path
template. Templates use positional placeholders filled with the parent IDs
in scope order, e.g. ``organization/{0}/workspace/{1}/variable``. IDs are
inserted verbatim; an empty ID produces an empty path segment. A template
may skip a parent: schedules are addressed by workspace alone.
"""

from __future__ import annotations

from typing import Generic, Optional, Sequence, TypeVar

from terrakube_cli.client.jsonapi import decode_document, encode
from terrakube_cli.client.sync_client import SyncClient
from terrakube_cli.exceptions import ServerError
from terrakube_cli.models import (
    Agent,
    Collection,
    CollectionItem,
    CollectionReference,
    Module,
    ModuleVersion,
    Organization,
    OrganizationVariable,
    Provider,
    ProviderVersion,
    Resource,
    Ssh,
    Tag,
    Team,
    Template,
    Variable,
    Vcs,
    Webhook,
    Workspace,
    WorkspaceAccess,
    WorkspaceSchedule,
    WorkspaceTag,
)
from terrakube_cli.resource.types import ListOptions

T = TypeVar("T", bound=Resource)

RESOURCE_PATHS: dict[type[Resource], str] = {
    Organization: "organization",
    Workspace: "organization/{0}/workspace",
    Module: "organization/{0}/module",
    ModuleVersion: "organization/{0}/module/{1}/version",
    Team: "organization/{0}/team",
    Variable: "organization/{0}/workspace/{1}/variable",
    OrganizationVariable: "organization/{0}/globalvar",
    Tag: "organization/{0}/tag",
    WorkspaceTag: "organization/{0}/workspace/{1}/workspaceTag",
    Template: "organization/{0}/template",
    Collection: "organization/{0}/collection",
    CollectionItem: "organization/{0}/collection/{1}/item",
    CollectionReference: "organization/{0}/collection/{1}/reference",
    Agent: "organization/{0}/agent",
    Ssh: "organization/{0}/ssh",
    Provider: "organization/{0}/provider",
    ProviderVersion: "organization/{0}/provider/{1}/version",
    Vcs: "organization/{0}/vcs",
    WorkspaceAccess: "organization/{0}/workspace/{1}/access",
    WorkspaceSchedule: "workspace/{1}/schedule",
    Webhook: "organization/{0}/workspace/{1}/webhook",
}


class ResourceService(Generic[T]):
    """CRUD operations for one resource type.

    Args:
        client: An entered :class:`SyncClient`.
        model: The resource model class.
        path: Collection path template.
    """

    def __init__(self, client: SyncClient, model: type[T], path: str) -> None:
        self._client = client
        self._model = model
        self._path = path

    def collection_path(self, parent_ids: Sequence[str]) -> str:
        return self._path.format(*parent_ids)

    def item_path(self, parent_ids: Sequence[str], resource_id: str) -> str:
        return f"{self.collection_path(parent_ids)}/{resource_id}"

    def _one(self, payload: object) -> T:
        result = decode_document(self._model, payload)
        if isinstance(result, list):
            raise ServerError(f"expected a single {self._model.resource_type}, got a list")
        return result

    def list(self, parent_ids: Sequence[str], opts: Optional[ListOptions] = None) -> list[T]:
        """List resources, optionally narrowed by an RSQL filter.

        The filter is sent as ``filter[<type>]=<expression>``.
        """
        params = None
        if opts is not None and opts.filter:
            params = {f"filter[{self._model.resource_type}]": opts.filter}
        response = self._client.get(self.collection_path(parent_ids), params=params)
        result = decode_document(self._model, response.json())
        return result if isinstance(result, list) else [result]

    def get(self, parent_ids: Sequence[str], resource_id: str) -> T:
        response = self._client.get(self.item_path(parent_ids, resource_id))
        return self._one(response.json())

    def create(self, parent_ids: Sequence[str], resource: T) -> T:
        response = self._client.post(
            self.collection_path(parent_ids), json_body=encode(resource)
        )
        return self._one(response.json())

    def update(self, parent_ids: Sequence[str], resource: T) -> T:
        """PATCH the attributes set on *resource*.

        The API answers ``204 No Content`` for a successful update; the
        submitted resource is returned in that case.
        """
        response = self._client.patch(
            self.item_path(parent_ids, resource.id), json_body=encode(resource)
        )
        if response.status_code == 204 or not response.content:
            return resource
        return self._one(response.json())

    def delete(self, parent_ids: Sequence[str], resource_id: str) -> None:
        self._client.delete(self.item_path(parent_ids, resource_id))


def service_for(client: SyncClient, model: type[T]) -> ResourceService[T]:
    """Return the :class:`ResourceService` for a known resource model.

    Raises:
        KeyError: If *model* has no registered path.
    """
    return ResourceService(client, model, RESOURCE_PATHS[model])
