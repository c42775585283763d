"""Request construction shared by the sync and async clients.

Builds the token exchange request and decorates resource requests
with content negotiation, cache and authorization headers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from ..config import ClientConfig

# JSON is preferred; some classic endpoints only speak XML
ACCEPT = "application/json, application/xml;q=0.9"
CACHE_CONTROL = "no-store, no-cache, must-revalidate, max-age=0, post-check=0, pre-check=0"
STRICT_TRANSPORT_SECURITY = "max-age=31536000 ; includeSubDomains"


class RequestBuilder:
    """Builds and decorates requests for a single client configuration."""

    def __init__(self, config: ClientConfig) -> None:
        self.config = config
        self.basic_auth = httpx.BasicAuth(
            config.username,
            config.password.get_secret_value(),
        )

    def build_token_request(self, client: httpx.Client | httpx.AsyncClient) -> httpx.Request:
        """Build the empty-bodied POST of the bearer token exchange.

        Credentials are applied at send time with ``basic_auth``.
        """
        return client.build_request("POST", self.config.token_endpoint)

    def build_resource_request(
        self,
        client: httpx.Client | httpx.AsyncClient,
        url: str,
    ) -> httpx.Request:
        """Build a GET request against a classic resource URL."""
        return client.build_request("GET", url)

    @staticmethod
    def decorate(request: httpx.Request, authorization: str) -> httpx.Request:
        """Set negotiation, cache and authorization headers in place."""
        request.headers["Accept"] = ACCEPT
        request.headers["Cache-Control"] = CACHE_CONTROL
        request.headers["Strict-Transport-Security"] = STRICT_TRANSPORT_SECURITY
        request.headers["Authorization"] = authorization
        return request
