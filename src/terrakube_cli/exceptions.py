"""Exception hierarchy for terrakube-cli.

All exceptions inherit from :class:`TerrakubeError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`terrakube_cli.exit_codes`. Library code only raises; the top-level
handler in :func:`terrakube_cli.app.main` prints the message once and exits
with the error's code.

Subclass hierarchy::

    TerrakubeError (exit 1)
    +-- InvalidUsageError   (exit 2)
    |   +-- MissingFlagError    (exit 2)
    +-- AuthError           (exit 3)
    +-- NotFoundError       (exit 4)
    +-- ServerError         (exit 5)
    +-- ConnectionError_    (exit 6)
    +-- ResolutionError     (exit 7)
    +-- DefinitionError     (exit 10)
    +-- RenderError         (exit 1)
    +-- ConfigError         (exit 1)
"""

from terrakube_cli.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_DEFINITION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_RESOLUTION_FAILURE,
    EXIT_SERVER_ERROR,
)


class TerrakubeError(Exception):
    """Base exception for all terrakube-cli errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`terrakube_cli.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(TerrakubeError):
    """Raised for invalid CLI arguments."""

    exit_code = EXIT_INVALID_USAGE


class MissingFlagError(InvalidUsageError):
    """Raised when a parent scope has neither its ID flag nor its name flag set."""


class AuthError(TerrakubeError):
    """Raised when the API rejects the configured token."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(TerrakubeError):
    """Raised when the API returns HTTP 404 (resource not found)."""

    exit_code = EXIT_NOT_FOUND


class ServerError(TerrakubeError):
    """Raised when the API returns an error status not covered by a narrower class."""

    exit_code = EXIT_SERVER_ERROR


class ConnectionError_(TerrakubeError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class ResolutionError(TerrakubeError):
    """Raised when a parent name matches zero or more than one resource."""

    exit_code = EXIT_RESOLUTION_FAILURE


class DefinitionError(TerrakubeError):
    """Raised when a resource definition does not fit its model.

    Examples are a field definition naming a model attribute that does not
    exist, or a parent scope with a name flag but no resolver. These are
    programming errors and are caught at registration time where possible.
    """

    exit_code = EXIT_DEFINITION_ERROR


class RenderError(TerrakubeError):
    """Raised for an unsupported output format or a serialisation failure."""

    exit_code = EXIT_GENERIC_FAILURE


class ConfigError(TerrakubeError):
    """Raised for configuration problems (invalid JSON, missing API URL)."""

    exit_code = EXIT_GENERIC_FAILURE
