"""terrakube-cli -- Command-line client for the Terrakube API.

Every API resource (organization, workspace, module, team, ...) is exposed as
a ``<resource> list|get|create|update|delete`` command group generated from a
declarative :class:`~terrakube_cli.resource.Config` description. The
generic engine lives in :mod:`terrakube_cli.resource`; the concrete resource
declarations live in :mod:`terrakube_cli.commands.resources`.

Typical workflow::

    terrakube config set api_url https://terrakube.example.com
    terrakube config set token "$TERRAKUBE_TOKEN"
    terrakube workspace list --organization-name acme -o table

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models for configuration and API resources.
    config: XDG-aware configuration loading and precedence resolution.
    renderer: json/yaml/table/tsv rendering of resource models.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stderr diagnostics with Rich support.
"""

__version__ = "0.1.0"
