"""Synchronous HTTP client for the Terrakube API.

This module provides :class:`SyncClient`, the blocking HTTP client used by
every resource command. It wraps :class:`httpx.Client` and layers on:

- **Base URL** -- ``<api_url>/api/v1/``; request paths are relative to it.
- **Auth injection** -- the configured token is sent as a bearer token.
- **JSON:API negotiation** -- ``Accept`` and ``Content-Type`` use
  ``application/vnd.api+json``.
- **Error mapping** -- 4xx/5xx responses and transport failures become
  :class:`~terrakube_cli.exceptions.TerrakubeError` subclasses.

Requests are sent exactly once: there is no retry and no caching.
"""

from __future__ import annotations

import json
from typing import Any, Optional

import httpx

from terrakube_cli.client.jsonapi import JSONAPI_MEDIA_TYPE
from terrakube_cli.exceptions import (
    AuthError,
    ConfigError,
    ConnectionError_,
    NotFoundError,
    ServerError,
)
from terrakube_cli.models import GlobalConfig
from terrakube_cli.output import get_output

API_PREFIX = "/api/v1/"


class SyncClient:
    """Synchronous HTTP client for API calls.

    Must be used as a context manager so that the underlying transport is
    properly opened and closed.

    Args:
        config: Effective configuration holding ``api_url`` and ``token``.
        transport: Optional httpx transport, e.g. :class:`httpx.MockTransport`
            in tests.
        timeout: Request timeout in seconds.

    Example::

        with SyncClient(config) as client:
            response = client.get("organization")
    """

    def __init__(
        self,
        config: GlobalConfig,
        transport: Optional[httpx.BaseTransport] = None,
        timeout: float = 30.0,
    ) -> None:
        self._config = config
        self._transport = transport
        self._timeout = timeout
        self._client: Optional[httpx.Client] = None

    @property
    def base_url(self) -> str:
        """API base URL including the ``/api/v1/`` prefix."""
        if not self._config.api_url:
            raise ConfigError(
                "API URL is not configured; run 'terrakube config set api_url <url>' "
                "or set TERRAKUBE_API_URL"
            )
        return self._config.api_url.rstrip("/") + API_PREFIX

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> SyncClient:
        headers = {"Accept": JSONAPI_MEDIA_TYPE}
        if self._config.token:
            headers["Authorization"] = f"Bearer {self._config.token}"
        self._client = httpx.Client(
            base_url=self.base_url,
            headers=headers,
            timeout=self._timeout,
            transport=self._transport,
            follow_redirects=True,
        )
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # Public request methods
    # ------------------------------------------------------------------ #

    def request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        json_body: Optional[Any] = None,
    ) -> httpx.Response:
        """Send one HTTP request and map error statuses to exceptions.

        Args:
            method: HTTP method (GET, POST, PATCH, DELETE).
            path: URL path relative to the ``/api/v1/`` base.
            params: Query parameters.
            json_body: JSON:API document to send.

        Returns:
            The :class:`httpx.Response` from the server.

        Raises:
            AuthError: On 401 / 403.
            NotFoundError: On 404.
            ServerError: On any other 4xx or 5xx status.
            ConnectionError_: On network / timeout errors.
        """
        assert self._client is not None, "Client not initialised -- use as context manager"

        kwargs: dict[str, Any] = {"params": params}
        if json_body is not None:
            kwargs["content"] = json.dumps(json_body)
            kwargs["headers"] = {"Content-Type": JSONAPI_MEDIA_TYPE}

        get_output().debug(f"{method.upper()} {path} {params or ''}".rstrip())
        try:
            response = self._client.request(method.upper(), path, **kwargs)
        except (httpx.ConnectError, httpx.TimeoutException, httpx.NetworkError) as exc:
            raise ConnectionError_(f"Connection failed: {exc}") from exc

        get_output().debug(f"{method.upper()} {path} -> {response.status_code}")
        self._map_response_error(response)
        return response

    def get(self, path: str, **kwargs: Any) -> httpx.Response:
        """Send a GET request."""
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> httpx.Response:
        """Send a POST request."""
        return self.request("POST", path, **kwargs)

    def patch(self, path: str, **kwargs: Any) -> httpx.Response:
        """Send a PATCH request."""
        return self.request("PATCH", path, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> httpx.Response:
        """Send a DELETE request."""
        return self.request("DELETE", path, **kwargs)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _map_response_error(self, response: httpx.Response) -> None:
        """Raise a typed exception for error HTTP status codes."""
        status = response.status_code
        if status < 400:
            return

        # JSON:API errors are {"errors": [{"detail": ...}, ...]}.
        try:
            detail = response.json()
            if isinstance(detail, dict) and isinstance(detail.get("errors"), list):
                msg = "; ".join(
                    str(e.get("detail") or e.get("title") or e)
                    for e in detail["errors"]
                    if isinstance(e, dict)
                )
            elif isinstance(detail, dict):
                msg = detail.get("message") or detail.get("error") or ""
            else:
                msg = str(detail)
        except ValueError:
            msg = response.text[:200] if response.text else ""

        prefix = f"HTTP {status}"
        full_msg = f"{prefix}: {msg}" if msg else prefix

        if status in (401, 403):
            raise AuthError(full_msg)
        if status == 404:
            raise NotFoundError(full_msg)
        raise ServerError(full_msg)
