"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~terrakube_cli.exceptions.TerrakubeError` subclass.
Shell scripts can inspect the exit code to tell an unknown organization
name apart from a rejected token without parsing stderr.

Example::

    $ terrakube workspace list --organization-name nope
    $ echo $?
    7   # EXIT_RESOLUTION_FAILURE -- no organization with that name
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required flags."""

EXIT_AUTH_FAILURE = 3
"""The API rejected the token (HTTP 401 / 403)."""

EXIT_NOT_FOUND = 4
"""The requested resource was not found (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The API returned an error status other than 401, 403 or 404."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_RESOLUTION_FAILURE = 7
"""A parent name matched zero or several resources."""

EXIT_DEFINITION_ERROR = 10
"""A resource command definition is inconsistent with its model."""
