"""Async Jamf classic API client.

Mirrors ``JamfClient`` over ``httpx.AsyncClient``. Token renewal is
serialized with an ``asyncio.Lock`` so concurrent tasks trigger at most
one exchange.
"""

from __future__ import annotations

import asyncio
from datetime import timedelta
from typing import Any, Self, TypeVar

import httpx
from pydantic import ValidationError as PydanticValidationError

from .config import ClientConfig
from .core.auth_builder import RequestBuilder
from .core.content import decode_body
from .core.http_executor import AsyncHTTPExecutor
from .core.token_ops import TokenStore
from .endpoints import COMPUTERS_CONTEXT, endpoint_builder
from .errors import DecodeError, JamfError
from .models import BearerToken, Computer, ComputerList
from .telemetry import configure_telemetry, get_logger

T = TypeVar("T")


def new_async_client(
    domain: str,
    username: str,
    password: str,
    http_client: httpx.AsyncClient | None = None,
) -> AsyncJamfClient:
    """Create an async client for a Jamf domain.

    Raises:
        InvalidConfigError: If domain, username or password is empty.
    """
    config = ClientConfig.from_credentials(domain, username, password)
    return AsyncJamfClient(config, http_client=http_client)


class AsyncJamfClient:
    """Asynchronous Jamf classic API client."""

    def __init__(
        self,
        config: ClientConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(config.timeout)
        )
        self._executor = AsyncHTTPExecutor(self._http)
        self._builder = RequestBuilder(config)
        self._tokens = TokenStore(timedelta(seconds=config.token_buffer))
        self._token_lock = asyncio.Lock()
        if config.telemetry is not None:
            configure_telemetry(config.telemetry)
        self._logger = get_logger().bind(domain=config.domain)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client if the SDK created it."""
        if self._owns_http:
            await self._http.aclose()

    @property
    def endpoint(self) -> str:
        return self.config.endpoint

    @property
    def token(self) -> BearerToken:
        return self._tokens.token

    @token.setter
    def token(self, token: BearerToken) -> None:
        self._tokens.replace(token)

    async def request_token(self) -> BearerToken:
        """Exchange the configured credentials for a new bearer token."""
        request = self._builder.build_token_request(self._http)
        response = await self._executor.execute(request, auth=self._builder.basic_auth)

        try:
            token = BearerToken.model_validate_json(response.content)
        except PydanticValidationError as e:
            raise DecodeError("application/json", e).wrap(
                "error decoding bearer token response"
            ) from e

        self._tokens.replace(token)
        self._logger.info("Bearer token acquired", expires=token.expires)
        return token

    async def ensure_valid_token(self) -> None:
        """Renew the bearer token when absent or within the renewal margin."""
        async with self._token_lock:
            if not self._tokens.needs_renewal():
                return
            self._logger.debug("Renewing bearer token")
            try:
                await self.request_token()
            except JamfError as e:
                raise e.wrap("error requesting new bearer token")

    async def execute_authenticated(
        self, request: httpx.Request, result_type: type[T]
    ) -> T:
        """Send an authenticated request and decode its body."""
        try:
            await self.ensure_valid_token()
        except JamfError as e:
            raise e.wrap("error checking for bearer token expiration")

        self._builder.decorate(request, self._tokens.authorization_header())
        response = await self._executor.execute(request)
        return decode_body(
            response.content,
            response.headers.get("Content-Type"),
            result_type,
        )

    async def computers(self) -> ComputerList:
        """Return all enrolled computer devices."""
        ep = f"{self.endpoint}/{COMPUTERS_CONTEXT}"
        request = self._builder.build_resource_request(self._http, ep)
        try:
            return await self.execute_authenticated(request, ComputerList)
        except JamfError as e:
            raise e.wrap(f"unable to query enrolled computers from {ep}")

    async def computer_details(self, identifier: int | str) -> Computer:
        """Return the details of a computer given its ID or name."""
        try:
            ep = endpoint_builder(self.endpoint, COMPUTERS_CONTEXT, identifier)
        except JamfError as e:
            raise e.wrap(
                f"error building JAMF query request endpoint for computer: {identifier}"
            )
        request = self._builder.build_resource_request(self._http, ep)
        try:
            return await self.execute_authenticated(request, Computer)
        except JamfError as e:
            raise e.wrap(
                f"unable to query enrolled computer for computer: {identifier} ({ep})"
            )
