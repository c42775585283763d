"""Synchronous Jamf classic API client.

Every resource call goes through ``execute_authenticated``, which keeps
the bearer token fresh, decorates the request, and decodes the JSON or
XML body into the requested type.
"""

from __future__ import annotations

import threading
from datetime import timedelta
from typing import Any, Self, TypeVar

import httpx
from pydantic import ValidationError as PydanticValidationError

from .config import ClientConfig
from .core.auth_builder import RequestBuilder
from .core.content import decode_body
from .core.http_executor import SyncHTTPExecutor
from .core.token_ops import TokenStore
from .endpoints import COMPUTERS_CONTEXT, endpoint_builder
from .errors import DecodeError, JamfError
from .models import BearerToken, Computer, ComputerList
from .telemetry import configure_telemetry, get_logger

T = TypeVar("T")


def default_http_client(timeout: float = 60.0) -> httpx.Client:
    """HTTP client used when the caller does not supply one."""
    return httpx.Client(timeout=httpx.Timeout(timeout))


def new_client(
    domain: str,
    username: str,
    password: str,
    http_client: httpx.Client | None = None,
) -> JamfClient:
    """Create a client for a Jamf domain.

    Raises:
        InvalidConfigError: If domain, username or password is empty.
    """
    config = ClientConfig.from_credentials(domain, username, password)
    return JamfClient(config, http_client=http_client)


class JamfClient:
    """Synchronous Jamf classic API client."""

    def __init__(
        self,
        config: ClientConfig,
        *,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize client.

        Args:
            config: SDK configuration.
            http_client: Optional HTTP client; one with ``config.timeout``
                is created (and owned) when omitted.
        """
        self.config = config
        self._owns_http = http_client is None
        self._http = http_client or default_http_client(config.timeout)
        self._executor = SyncHTTPExecutor(self._http)
        self._builder = RequestBuilder(config)
        self._tokens = TokenStore(timedelta(seconds=config.token_buffer))
        self._token_lock = threading.Lock()
        if config.telemetry is not None:
            configure_telemetry(config.telemetry)
        self._logger = get_logger().bind(domain=config.domain)

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client if the SDK created it."""
        if self._owns_http:
            self._http.close()

    @property
    def endpoint(self) -> str:
        """Base URL of the classic resource API."""
        return self.config.endpoint

    @property
    def token(self) -> BearerToken:
        """Current bearer token (empty before the first request)."""
        return self._tokens.token

    @token.setter
    def token(self, token: BearerToken) -> None:
        self._tokens.replace(token)

    def request_token(self) -> BearerToken:
        """Exchange the configured credentials for a new bearer token.

        Returns:
            The stored token.

        Raises:
            NetworkError: On transport failure.
            UpstreamError: If the exchange is not answered with 200/201.
            DecodeError: If the token body is not valid JSON.
        """
        request = self._builder.build_token_request(self._http)
        response = self._executor.execute(request, auth=self._builder.basic_auth)

        try:
            token = BearerToken.model_validate_json(response.content)
        except PydanticValidationError as e:
            raise DecodeError("application/json", e).wrap(
                "error decoding bearer token response"
            ) from e

        self._tokens.replace(token)
        self._logger.info("Bearer token acquired", expires=token.expires)
        return token

    def ensure_valid_token(self) -> None:
        """Renew the bearer token when absent or within the renewal margin.

        Raises:
            TokenExpirationError: If the stored expiration cannot be parsed.
            JamfError: If a renewal was needed and failed.
        """
        with self._token_lock:
            if not self._tokens.needs_renewal():
                return
            self._logger.debug("Renewing bearer token")
            try:
                self.request_token()
            except JamfError as e:
                raise e.wrap("error requesting new bearer token")

    def execute_authenticated(self, request: httpx.Request, result_type: type[T]) -> T:
        """Send an authenticated request and decode its body.

        Args:
            request: Prepared request against a classic resource.
            result_type: Type to decode the body into.

        Returns:
            Decoded instance of ``result_type``.

        Raises:
            JamfError: Classified failure, with context.
        """
        try:
            self.ensure_valid_token()
        except JamfError as e:
            raise e.wrap("error checking for bearer token expiration")

        self._builder.decorate(request, self._tokens.authorization_header())
        response = self._executor.execute(request)
        return decode_body(
            response.content,
            response.headers.get("Content-Type"),
            result_type,
        )

    def computers(self) -> ComputerList:
        """Return all enrolled computer devices."""
        ep = f"{self.endpoint}/{COMPUTERS_CONTEXT}"
        request = self._builder.build_resource_request(self._http, ep)
        try:
            return self.execute_authenticated(request, ComputerList)
        except JamfError as e:
            raise e.wrap(f"unable to query enrolled computers from {ep}")

    def computer_details(self, identifier: int | str) -> Computer:
        """Return the details of a computer given its ID or name."""
        try:
            ep = endpoint_builder(self.endpoint, COMPUTERS_CONTEXT, identifier)
        except JamfError as e:
            raise e.wrap(
                f"error building JAMF query request endpoint for computer: {identifier}"
            )
        request = self._builder.build_resource_request(self._http, ep)
        try:
            return self.execute_authenticated(request, Computer)
        except JamfError as e:
            raise e.wrap(
                f"unable to query enrolled computer for computer: {identifier} ({ep})"
            )
