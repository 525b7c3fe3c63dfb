"""Canonical Pydantic models shared across all terrakube-cli modules.

This is the single source of truth for data shapes in the project. The models
fall into two groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`GlobalConfig`.

**Resource models** -- the domain objects exchanged with the Terrakube API:
    :class:`Organization`, :class:`Workspace`, :class:`Module`, :class:`Team`,
    :class:`Variable`, :class:`OrganizationVariable`, :class:`Tag`,
    :class:`WorkspaceTag`, :class:`Template`, :class:`Collection`,
    :class:`Agent`, :class:`Ssh`, :class:`Provider`, :class:`Vcs`,
    :class:`ModuleVersion`, :class:`CollectionItem`,
    :class:`CollectionReference`, :class:`ProviderVersion`,
    :class:`WorkspaceAccess`, :class:`WorkspaceSchedule` and :class:`Webhook`.

Resource models share the :class:`Resource` base: an ``id`` plus attribute
fields whose wire names are camelCase aliases of the Python names. Fields
declared with :func:`relation` hold the ID of a related resource; they travel
as JSON:API relationships and are left out of table and TSV output.
``Optional`` attributes distinguish "not given" (``None``) from an explicit
empty value.
"""

from __future__ import annotations

from typing import Any, ClassVar, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# --- Global Config ---


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/terrakube/config.json``.

    Loaded and saved by :func:`~terrakube_cli.config.load_global_config` and
    :func:`~terrakube_cli.config.save_global_config`. Fields here have the
    lowest precedence and can be overridden by project config, environment
    variables, or CLI flags. See :func:`~terrakube_cli.config.resolve_config`
    for the full precedence chain.
    """

    api_url: Optional[str] = Field(
        default=None, description="Terrakube API base URL, without the /api/v1 suffix"
    )
    token: Optional[str] = Field(default=None, description="Bearer token")
    output: str = Field(
        default="json", description="Output format: json, yaml, table, tsv, none"
    )
    hide_nulls: bool = Field(
        default=False, description="Drop null attributes from json/yaml output"
    )


# --- Resource base ---


def relation(resource_type: str) -> Any:
    """Declare a field holding the ID of a related resource.

    Relation fields are serialised as JSON:API relationships and skipped
    by :func:`~terrakube_cli.renderer.extract_rows`.

    Args:
        resource_type: JSON:API ``type`` of the related resource.

    Returns:
        A :func:`pydantic.Field` with ``None`` as default.
    """
    return Field(default=None, json_schema_extra={"relation": resource_type})


class Resource(BaseModel):
    """Base class for all API resource models.

    Subclasses set :attr:`resource_type` to the JSON:API ``type`` of the
    resource, which is also the key used in ``filter[<type>]`` queries.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    resource_type: ClassVar[str] = ""

    id: str = ""

    @classmethod
    def relation_fields(cls) -> dict[str, str]:
        """Return a ``{field_name: related_type}`` mapping of relation fields."""
        result: dict[str, str] = {}
        for name, info in cls.model_fields.items():
            extra = info.json_schema_extra
            if isinstance(extra, dict) and "relation" in extra:
                result[name] = str(extra["relation"])
        return result


# --- Organization-level resources ---


class Organization(Resource):
    resource_type: ClassVar[str] = "organization"

    name: str = ""
    description: Optional[str] = None
    execution_mode: Optional[str] = None
    icon: Optional[str] = None


class Workspace(Resource):
    resource_type: ClassVar[str] = "workspace"

    name: str = ""
    description: Optional[str] = None
    source: Optional[str] = None
    branch: Optional[str] = None
    folder: Optional[str] = None
    iac_type: Optional[str] = None
    terraform_version: Optional[str] = None
    execution_mode: Optional[str] = None
    organization: Optional[str] = relation("organization")


class Module(Resource):
    resource_type: ClassVar[str] = "module"

    name: str = ""
    description: Optional[str] = None
    provider: Optional[str] = None
    source: Optional[str] = None
    tag_prefix: Optional[str] = None
    folder: Optional[str] = None
    organization: Optional[str] = relation("organization")


class Team(Resource):
    """Organization team with its management permissions."""

    resource_type: ClassVar[str] = "team"

    name: str = ""
    manage_provider: bool = False
    manage_module: bool = False
    manage_workspace: bool = False
    manage_state: bool = False
    manage_collection: bool = False
    manage_vcs: bool = False
    manage_template: bool = False
    organization: Optional[str] = relation("organization")


class Variable(Resource):
    """Workspace variable; ``category`` is ``TERRAFORM`` or ``ENV``."""

    resource_type: ClassVar[str] = "variable"

    key: str = ""
    value: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    sensitive: bool = False
    hcl: bool = False
    workspace: Optional[str] = relation("workspace")


class OrganizationVariable(Resource):
    """Organization-wide variable, called a global variable by the API."""

    resource_type: ClassVar[str] = "globalvar"

    key: str = ""
    value: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    sensitive: bool = False
    hcl: bool = False
    organization: Optional[str] = relation("organization")


class Tag(Resource):
    resource_type: ClassVar[str] = "tag"

    name: str = ""


class WorkspaceTag(Resource):
    resource_type: ClassVar[str] = "workspacetag"

    tag_id: str = ""
    workspace: Optional[str] = relation("workspace")


class Template(Resource):
    """Job template; the flow definition travels as ``tcl`` on the wire."""

    resource_type: ClassVar[str] = "template"

    name: str = ""
    description: Optional[str] = None
    version: Optional[str] = None
    content: str = Field(default="", alias="tcl")


class Collection(Resource):
    resource_type: ClassVar[str] = "collection"

    name: str = ""
    description: Optional[str] = None
    priority: int = 0


class Agent(Resource):
    resource_type: ClassVar[str] = "agent"

    name: str = ""
    description: Optional[str] = None
    url: str = ""


class Ssh(Resource):
    resource_type: ClassVar[str] = "ssh"

    name: str = ""
    description: Optional[str] = None
    private_key: str = ""
    ssh_type: str = ""


class Provider(Resource):
    """Private Terraform provider published in the organization registry."""

    resource_type: ClassVar[str] = "provider"

    name: str = ""
    description: Optional[str] = None


class Vcs(Resource):
    """Connection to a version control system (GitHub, GitLab, ...)."""

    resource_type: ClassVar[str] = "vcs"

    name: str = ""
    description: str = ""
    vcs_type: str = ""
    connection_type: str = ""
    client_id: str = ""
    client_secret: str = ""
    private_key: Optional[str] = None
    endpoint: str = ""
    api_url: str = ""
    status: Optional[str] = None
    callback: Optional[str] = None
    access_token: Optional[str] = None
    redirect_url: Optional[str] = None


# --- Nested resources ---


class ModuleVersion(Resource):
    resource_type: ClassVar[str] = "version"

    version: str = ""
    commit: Optional[str] = None
    module: Optional[str] = relation("module")


class CollectionItem(Resource):
    """Variable stored in a collection and shared by referencing workspaces."""

    resource_type: ClassVar[str] = "item"

    key: str = ""
    value: str = ""
    description: Optional[str] = None
    category: Optional[str] = None
    sensitive: bool = False
    hcl: bool = False
    collection: Optional[str] = relation("collection")


class CollectionReference(Resource):
    """Link from a collection to a workspace that uses its items."""

    resource_type: ClassVar[str] = "reference"

    description: Optional[str] = None
    collection: Optional[str] = relation("collection")
    workspace: Optional[str] = relation("workspace")

class ProviderVersion(Resource):
    resource_type: ClassVar[str] = "version"

    version_number: str = ""
    protocols: Optional[str] = None
    provider: Optional[str] = relation("provider")


class WorkspaceAccess(Resource):
    """Team permissions on one workspace; ``name`` is the team name."""

    resource_type: ClassVar[str] = "access"

    name: str = ""
    manage_state: bool = False
    manage_workspace: bool = False
    manage_job: bool = False
    workspace: Optional[str] = relation("workspace")


class WorkspaceSchedule(Resource):
    """Cron schedule running a template against a workspace."""

    resource_type: ClassVar[str] = "schedule"

    schedule: str = ""
    template_id: str = Field(default="", alias="templateReference")
    workspace: Optional[str] = relation("workspace")


class Webhook(Resource):
    resource_type: ClassVar[str] = "webhook"

    path: Optional[str] = None
    branch: Optional[str] = None
    template_id: Optional[str] = None
    remote_hook_id: Optional[str] = None
    event: Optional[str] = None
    workspace: Optional[str] = relation("workspace")
