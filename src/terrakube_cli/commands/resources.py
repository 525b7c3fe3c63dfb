"""Resource command declarations for the Terrakube API.

Every resource is a :class:`~terrakube_cli.resource.Config` registered on the
root application by :func:`register_resources`. Name resolvers look parents
up with a ``name==<value>`` filter; organization and workspace scopes also
accept a UUID in their name flag. Provider versions are addressed through a
provider scope resolved the same way.
"""

from __future__ import annotations

from typing import Any

import typer

from terrakube_cli.client.services import service_for
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
from terrakube_cli.resource import (
    Config,
    FieldDef,
    FieldType,
    ParentScope,
    Runtime,
    name_resolver,
    register,
)


def _crud(model: type[Resource]) -> dict[str, Any]:
    """Return list/get/create/update/delete callbacks backed by the model's service."""

    def list_(client, parent_ids, opts):
        return service_for(client, model).list(parent_ids, opts)

    def get(client, parent_ids, resource_id):
        return service_for(client, model).get(parent_ids, resource_id)

    def create(client, parent_ids, resource):
        return service_for(client, model).create(parent_ids, resource)

    def update(client, parent_ids, resource):
        return service_for(client, model).update(parent_ids, resource)

    def delete(client, parent_ids, resource_id):
        service_for(client, model).delete(parent_ids, resource_id)

    return {"list": list_, "get": get, "create": create, "update": update, "delete": delete}


def _lister(model: type[Resource]):
    return lambda client, parent_ids, opts: service_for(client, model).list(parent_ids, opts)


# ---------------------------------------------------------------------------
# Parent scopes
# ---------------------------------------------------------------------------

ORGANIZATION_SCOPE = ParentScope(
    name="organization",
    id_flag="organization-id",
    name_flag="organization-name",
    resolver=name_resolver(_lister(Organization), "organization", "organization-id"),
    uuid_names=True,
)

WORKSPACE_SCOPE = ParentScope(
    name="workspace",
    id_flag="workspace-id",
    name_flag="workspace-name",
    resolver=name_resolver(_lister(Workspace), "workspace", "workspace-id"),
    uuid_names=True,
    envvar="TERRAKUBE_WORKSPACE_ID",
)

MODULE_SCOPE = ParentScope(
    name="module",
    id_flag="module-id",
    name_flag="module-name",
    resolver=name_resolver(_lister(Module), "module", "module-id"),
)

COLLECTION_SCOPE = ParentScope(
    name="collection",
    id_flag="collection-id",
    name_flag="collection-name",
    resolver=name_resolver(_lister(Collection), "collection", "collection-id"),
)

PROVIDER_SCOPE = ParentScope(
    name="provider",
    id_flag="provider-id",
    name_flag="provider-name",
    resolver=name_resolver(_lister(Provider), "provider", "provider-id"),
)


# ---------------------------------------------------------------------------
# Field tables
# ---------------------------------------------------------------------------

STR, BOOL, INT = FieldType.STRING, FieldType.BOOL, FieldType.INT

_VARIABLE_FIELDS = (
    FieldDef("key", "key", STR, "k", True, "Variable key"),
    FieldDef("value", "value", STR, "v", False, "Variable value"),
    FieldDef("description", "description", STR, "d", False, "Variable description"),
    FieldDef("category", "category", STR, None, False, "Variable category (TERRAFORM or ENV)"),
    FieldDef("sensitive", "sensitive", BOOL, None, False, "Mark the value as sensitive"),
    FieldDef("hcl", "hcl", BOOL, None, False, "Parse the value as HCL"),
)


def resource_configs(runtime: Runtime) -> list[Config[Any]]:
    """Return the configuration of every shipped resource command group."""
    return [
        Config(
            name="organization",
            model=Organization,
            runtime=runtime,
            fields=(
                FieldDef("name", "name", STR, "n", True, "Organization name"),
                FieldDef("description", "description", STR, "d", False, "Organization description"),
                FieldDef("execution_mode", "execution-mode", STR, "e", False, "Execution mode (local or remote)"),
                FieldDef("icon", "icon", STR, "i", False, "Organization icon"),
            ),
            **_crud(Organization),
        ),
        Config(
            name="workspace",
            model=Workspace,
            runtime=runtime,
            parents=(ORGANIZATION_SCOPE,),
            fields=(
                FieldDef("name", "name", STR, "n", True, "Workspace name"),
                FieldDef("description", "description", STR, "d", False, "Workspace description"),
                FieldDef("source", "source", STR, "s", False, "Repository URL"),
                FieldDef("branch", "branch", STR, "b", False, "Repository branch"),
                FieldDef("folder", "folder", STR, "f", False, "Folder inside the repository"),
                FieldDef("iac_type", "iac-type", STR, "t", False, "IaC tool (terraform or tofu)"),
                FieldDef("terraform_version", "iac-version", STR, None, False, "IaC tool version"),
                FieldDef("execution_mode", "execution-mode", STR, "e", False, "Execution mode (local or remote)"),
            ),
            **_crud(Workspace),
        ),
        Config(
            name="module",
            model=Module,
            runtime=runtime,
            parents=(ORGANIZATION_SCOPE,),
            fields=(
                FieldDef("name", "name", STR, "n", True, "Module name"),
                FieldDef("description", "description", STR, "d", False, "Module description"),
                FieldDef("source", "source", STR, "s", False, "Repository URL"),
                FieldDef("provider", "provider", STR, "p", False, "Module provider"),
                FieldDef("tag_prefix", "tag-prefix", STR, None, False, "Tag prefix for versions"),
                FieldDef("folder", "folder", STR, None, False, "Folder inside the repository"),
            ),
            **_crud(Module),
        ),
        Config(
            name="module-version",
            model=ModuleVersion,
            runtime=runtime,
            parents=(ORGANIZATION_SCOPE, MODULE_SCOPE),
            fields=(
                FieldDef("version", "version", STR, None, True, "Version number"),
                FieldDef("commit", "commit", STR, None, False, "Commit hash"),
            ),
            **_crud(ModuleVersion),
        ),
        Config(
            name="team",
            model=Team,
            runtime=runtime,
            parents=(ORGANIZATION_SCOPE,),
            fields=(
                FieldDef("name", "name", STR, "n", True, "Team name"),
                FieldDef("manage_provider", "manage-provider", BOOL, None, False, "Allow managing providers"),
                FieldDef("manage_module", "manage-module", BOOL, None, False, "Allow managing modules"),
                FieldDef("manage_workspace", "manage-workspace", BOOL, None, False, "Allow managing workspaces"),
                FieldDef("manage_state", "manage-state", BOOL, None, False, "Allow managing state"),
                FieldDef("manage_collection", "manage-collection", BOOL, None, False, "Allow managing collections"),
                FieldDef("manage_vcs", "manage-vcs", BOOL, None, False, "Allow managing VCS connections"),
                FieldDef("manage_template", "manage-template", BOOL, None, False, "Allow managing templates"),
            ),
            **_crud(Team),
        ),
        Config(
            name="variable",
            model=Variable,
            runtime=runtime,
            parents=(ORGANIZATION_SCOPE, WORKSPACE_SCOPE),
            fields=_VARIABLE_FIELDS,
            **_crud(Variable),
        ),
        Config(
            name="organization-variable",
            model=OrganizationVariable,
            runtime=runtime,
            aliases=("org-var", "org-vars", "organization-variables"),
            parents=(ORGANIZATION_SCOPE,),
            fields=_VARIABLE_FIELDS,
            **_crud(OrganizationVariable),
        ),
        Config(
            name="tag",
            model=Tag,
            runtime=runtime,
            parents=(ORGANIZATION_SCOPE,),
            fields=(FieldDef("name", "name", STR, "n", True, "Tag name"),),
            **_crud(Tag),
        ),
        Config(
            name="workspace-tag",
            model=WorkspaceTag,
            runtime=runtime,
            aliases=("wstag",),
            parents=(ORGANIZATION_SCOPE, WORKSPACE_SCOPE),
            fields=(FieldDef("tag_id", "tag-id", STR, None, True, "Tag ID to associate"),),
            **_crud(WorkspaceTag),
        ),
        Config(
            name="template",
            model=Template,
            runtime=runtime,
            aliases=("tpl",),
            parents=(ORGANIZATION_SCOPE,),
            fields=(
                FieldDef("name", "name", STR, "n", True, "Template name"),
                FieldDef("description", "description", STR, "d", False, "Template description"),
                FieldDef("version", "version", STR, None, False, "Template version"),
                FieldDef("content", "content", STR, "c", True, "Template content (YAML flow)"),
            ),
            **_crud(Template),
        ),
        Config(
            name="collection",
            model=Collection,
            runtime=runtime,
            aliases=("collections",),
            parents=(ORGANIZATION_SCOPE,),
            fields=(
                FieldDef("name", "name", STR, "n", True, "Collection name"),
                FieldDef("description", "description", STR, "d", False, "Collection description"),
                FieldDef("priority", "priority", INT, None, False, "Collection priority"),
            ),
            **_crud(Collection),
        ),
        Config(
            name="collection-item",
            model=CollectionItem,
            runtime=runtime,
            parents=(ORGANIZATION_SCOPE, COLLECTION_SCOPE),
            fields=(
                FieldDef("key", "key", STR, "k", True, "Item key"),
                FieldDef("value", "value", STR, "v", True, "Item value"),
                FieldDef("description", "description", STR, "d", False, "Item description"),
                FieldDef("category", "category", STR, None, False, "Item category (TERRAFORM or ENV)"),
                FieldDef("sensitive", "sensitive", BOOL, None, False, "Mark the value as sensitive"),
                FieldDef("hcl", "hcl", BOOL, None, False, "Parse the value as HCL"),
            ),
            **_crud(CollectionItem),
        ),
        Config(
            name="collection-reference",
            model=CollectionReference,
            runtime=runtime,
            aliases=("collection-references", "collection-refs"),
            parents=(ORGANIZATION_SCOPE, COLLECTION_SCOPE),
            fields=(FieldDef("description", "description", STR, "d", False, "Reference description"),),
            **_crud(CollectionReference),
        ),
        Config(
            name="agent",
            model=Agent,
            runtime=runtime,
            parents=(ORGANIZATION_SCOPE,),
            fields=(
                FieldDef("name", "name", STR, "n", True, "Agent name"),
                FieldDef("description", "description", STR, "d", False, "Agent description"),
                FieldDef("url", "url", STR, "u", True, "Agent URL"),
            ),
            **_crud(Agent),
        ),
        Config(
            name="ssh",
            model=Ssh,
            runtime=runtime,
            parents=(ORGANIZATION_SCOPE,),
            fields=(
                FieldDef("name", "name", STR, "n", True, "SSH key name"),
                FieldDef("description", "description", STR, "d", False, "SSH key description"),
                FieldDef("private_key", "private-key", STR, None, True, "Private key content"),
                FieldDef("ssh_type", "ssh-type", STR, None, True, "Key type (rsa or ed25519)"),
            ),
            **_crud(Ssh),
        ),
        Config(
            name="provider",
            model=Provider,
            runtime=runtime,
            aliases=("providers",),
            parents=(ORGANIZATION_SCOPE,),
            fields=(
                FieldDef("name", "name", STR, "n", True, "Provider name"),
                FieldDef("description", "description", STR, "d", False, "Provider description"),
            ),
            **_crud(Provider),
        ),
        Config(
            name="provider-version",
            model=ProviderVersion,
            runtime=runtime,
            parents=(ORGANIZATION_SCOPE, PROVIDER_SCOPE),
            fields=(
                FieldDef("version_number", "version-number", STR, None, True, "Provider version number"),
                FieldDef("protocols", "protocols", STR, None, False, "Supported protocols"),
            ),
            **_crud(ProviderVersion),
        ),
        Config(
            name="vcs",
            model=Vcs,
            runtime=runtime,
            parents=(ORGANIZATION_SCOPE,),
            fields=(
                FieldDef("name", "name", STR, "n", True, "VCS connection name"),
                FieldDef("description", "description", STR, "d", True, "VCS description"),
                FieldDef("vcs_type", "vcs-type", STR, None, True, "VCS type (GITHUB, GITLAB, BITBUCKET, AZURE_DEVOPS)"),
                FieldDef("connection_type", "connection-type", STR, None, True, "Connection type (OAUTH, SSH)"),
                FieldDef("client_id", "client-id", STR, None, True, "OAuth client ID"),
                FieldDef("client_secret", "client-secret", STR, None, True, "OAuth client secret"),
                FieldDef("private_key", "private-key", STR, None, False, "SSH private key"),
                FieldDef("endpoint", "endpoint", STR, None, True, "VCS endpoint URL"),
                FieldDef("api_url", "vcs-api-url", STR, None, True, "VCS API URL"),
                FieldDef("status", "status", STR, None, False, "VCS connection status"),
                FieldDef("callback", "callback", STR, None, False, "OAuth callback URL"),
                FieldDef("access_token", "access-token", STR, None, False, "Access token"),
                FieldDef("redirect_url", "redirect-url", STR, None, False, "OAuth redirect URL"),
            ),
            **_crud(Vcs),
        ),
        Config(
            name="workspace-access",
            model=WorkspaceAccess,
            runtime=runtime,
            aliases=("workspace-accesses",),
            parents=(ORGANIZATION_SCOPE, WORKSPACE_SCOPE),
            fields=(
                FieldDef("manage_state", "manage-state", BOOL, None, False, "Manage state permission"),
                FieldDef("manage_workspace", "manage-workspace", BOOL, None, False, "Manage workspace permission"),
                FieldDef("manage_job", "manage-job", BOOL, None, False, "Manage job permission"),
                FieldDef("name", "name", STR, "n", True, "Team name for access"),
            ),
            **_crud(WorkspaceAccess),
        ),
        Config(
            name="workspace-schedule",
            model=WorkspaceSchedule,
            runtime=runtime,
            parents=(ORGANIZATION_SCOPE, WORKSPACE_SCOPE),
            fields=(
                FieldDef("schedule", "schedule", STR, None, True, "Cron expression"),
                FieldDef("template_id", "template-id", STR, None, True, "Template reference ID"),
            ),
            **_crud(WorkspaceSchedule),
        ),
        Config(
            name="webhook",
            model=Webhook,
            runtime=runtime,
            parents=(ORGANIZATION_SCOPE, WORKSPACE_SCOPE),
            fields=(
                FieldDef("path", "path", STR, None, False, "Webhook path"),
                FieldDef("branch", "branch", STR, None, False, "Branch to watch"),
                FieldDef("template_id", "template-id", STR, None, False, "Template ID"),
                FieldDef("remote_hook_id", "remote-hook-id", STR, None, False, "Remote hook ID"),
                FieldDef("event", "event", STR, None, False, "Event type"),
            ),
            **_crud(Webhook),
        ),
    ]


def register_resources(root: typer.Typer, runtime: Runtime) -> None:
    """Register every resource command group on *root*."""
    for cfg in resource_configs(runtime):
        register(root, cfg)
