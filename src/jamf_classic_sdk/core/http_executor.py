"""Centralized HTTP executors for the Jamf classic SDK.

Sends a prepared request, maps transport failures onto SDK errors and
classifies the response. Only 200 and 201 count as success; nothing is
retried.
"""

from __future__ import annotations

import httpx

from ..errors import NetworkError, ResponseReadError, TimeoutError, UpstreamError
from ..telemetry import get_logger, trace_operation

SUCCESS_STATUSES = frozenset({200, 201})


def status_line(response: httpx.Response) -> str:
    """Render ``"500 Internal Server Error"`` style status text."""
    return f"{response.status_code} {response.reason_phrase}".strip()


def transport_error(request: httpx.Request, exc: httpx.HTTPError) -> NetworkError:
    """Map an httpx failure onto an SDK error naming method and URL."""
    method = request.method
    url = str(request.url)
    message = f"error making {method} request to {url}: {exc}"
    if isinstance(exc, httpx.TimeoutException):
        return TimeoutError(message, method=method, url=url, cause=exc)
    return NetworkError(message, method=method, url=url, cause=exc)


def rejection_error(response: httpx.Response, body: str) -> UpstreamError:
    """Build the error for a non-success status with its plain text body."""
    get_logger().warning(
        "Request rejected",
        status_code=response.status_code,
        url=str(response.request.url),
    )
    return UpstreamError(
        body,
        status_code=response.status_code,
        url=str(response.request.url),
    )


class SyncHTTPExecutor:
    """Synchronous HTTP executor."""

    def __init__(self, client: httpx.Client) -> None:
        """Initialize sync HTTP executor.

        Args:
            client: HTTP client.
        """
        self._client = client

    def execute(
        self,
        request: httpx.Request,
        *,
        auth: httpx.Auth | None = None,
    ) -> httpx.Response:
        """Send request and return the fully read, successful response.

        Args:
            request: Prepared request.
            auth: Optional per-request authentication.

        Returns:
            HTTP response with status 200 or 201.

        Raises:
            NetworkError: On transport failure.
            UpstreamError: On any other status.
            ResponseReadError: If the body cannot be read.
        """
        with trace_operation(
            "http_request",
            attributes={"http.method": request.method, "http.url": str(request.url)},
        ):
            try:
                if auth is None:
                    response = self._client.send(request, stream=True)
                else:
                    response = self._client.send(request, stream=True, auth=auth)
            except httpx.HTTPError as e:
                raise transport_error(request, e) from e

            try:
                body = self._read(response)
            finally:
                response.close()

            if response.status_code not in SUCCESS_STATUSES:
                raise rejection_error(response, body)
            return response

    @staticmethod
    def _read(response: httpx.Response) -> str:
        try:
            response.read()
            return response.text
        except httpx.HTTPError as e:
            raise ResponseReadError(
                status_line(response), e, status_code=response.status_code
            ) from e


class AsyncHTTPExecutor:
    """Asynchronous HTTP executor."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        """Initialize async HTTP executor.

        Args:
            client: Async HTTP client.
        """
        self._client = client

    async def execute(
        self,
        request: httpx.Request,
        *,
        auth: httpx.Auth | None = None,
    ) -> httpx.Response:
        """Send request and return the fully read, successful response.

        Args:
            request: Prepared request.
            auth: Optional per-request authentication.

        Returns:
            HTTP response with status 200 or 201.

        Raises:
            NetworkError: On transport failure.
            UpstreamError: On any other status.
            ResponseReadError: If the body cannot be read.
        """
        with trace_operation(
            "http_request",
            attributes={"http.method": request.method, "http.url": str(request.url)},
        ):
            try:
                if auth is None:
                    response = await self._client.send(request, stream=True)
                else:
                    response = await self._client.send(request, stream=True, auth=auth)
            except httpx.HTTPError as e:
                raise transport_error(request, e) from e

            try:
                body = await self._read(response)
            finally:
                await response.aclose()

            if response.status_code not in SUCCESS_STATUSES:
                raise rejection_error(response, body)
            return response

    @staticmethod
    async def _read(response: httpx.Response) -> str:
        try:
            await response.aread()
            return response.text
        except httpx.HTTPError as e:
            raise ResponseReadError(
                status_line(response), e, status_code=response.status_code
            ) from e
