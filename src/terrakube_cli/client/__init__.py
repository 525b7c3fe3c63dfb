"""HTTP client layer for the Terrakube API.

Re-exports the most commonly used names so callers can write::

    from terrakube_cli.client import SyncClient, service_for
"""

from terrakube_cli.client.services import ResourceService, service_for
from terrakube_cli.client.sync_client import SyncClient

__all__ = ["ResourceService", "SyncClient", "service_for"]
