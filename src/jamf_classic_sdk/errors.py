"""Error classes for the Jamf classic SDK.

Implements a structured error hierarchy with stable error codes and a
context chain, so every layer can say what it was attempting without
losing the original classification.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Self


class ErrorCode(StrEnum):
    """Standardized error codes for the Jamf classic SDK."""

    # Configuration errors (1xxx)
    INVALID_CONFIG = "CFG_1001"

    # Transport errors (2xxx)
    NETWORK_ERROR = "NET_2001"
    TIMEOUT_ERROR = "NET_2002"

    # Upstream responses (3xxx)
    UPSTREAM_REJECTED = "HTTP_3001"
    RESPONSE_UNREADABLE = "HTTP_3002"

    # Body decoding (4xxx)
    DECODE_FAILED = "DEC_4001"
    UNSUPPORTED_FORMAT = "DEC_4002"

    # Token lifecycle (5xxx)
    TOKEN_EXPIRATION_INVALID = "TOK_5001"


class JamfError(Exception):
    """Base error for the Jamf classic SDK with structured error information."""

    def __init__(
        self,
        message: str,
        code: ErrorCode | str,
        *,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code if isinstance(code, str) else code.value
        self.status_code = status_code
        self.details = details or {}
        self.context: list[str] = []

    def wrap(self, context: str) -> Self:
        """Prepend a context message and return the same error for re-raising."""
        self.context.append(context)
        return self

    def __str__(self) -> str:
        return ": ".join([*reversed(self.context), self.message])

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error": str(self),
            "code": self.code,
            "status_code": self.status_code,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class InvalidConfigError(JamfError):
    """Missing or invalid client configuration."""

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.INVALID_CONFIG,
            details={"field": field} if field else None,
        )


class NetworkError(JamfError):
    """The underlying network call failed."""

    def __init__(
        self,
        message: str = "Network request failed",
        *,
        method: str | None = None,
        url: str | None = None,
        cause: Exception | None = None,
        code: ErrorCode = ErrorCode.NETWORK_ERROR,
    ) -> None:
        details: dict[str, Any] = {}
        if method:
            details["method"] = method
        if url:
            details["url"] = url
        if cause:
            details["cause"] = str(cause)
        super().__init__(message, code, details=details)
        self.__cause__ = cause


class TimeoutError(NetworkError):
    """Request timed out."""

    def __init__(
        self,
        message: str = "Request timed out",
        *,
        method: str | None = None,
        url: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message,
            method=method,
            url=url,
            cause=cause,
            code=ErrorCode.TIMEOUT_ERROR,
        )


class UpstreamError(JamfError):
    """The API answered with a status outside 200/201."""

    def __init__(
        self,
        body: str,
        *,
        status_code: int,
        url: str | None = None,
    ) -> None:
        super().__init__(
            f"request error: {body}",
            ErrorCode.UPSTREAM_REJECTED,
            status_code=status_code,
            details={"body": body, "url": url} if url else {"body": body},
        )
        self.body = body


class ResponseReadError(JamfError):
    """The response body could not be read."""

    def __init__(
        self,
        status: str,
        cause: Exception,
        *,
        status_code: int | None = None,
    ) -> None:
        super().__init__(
            f"request error: {status}. unable to retrieve plain text response: {cause}",
            ErrorCode.RESPONSE_UNREADABLE,
            status_code=status_code,
            details={"cause": str(cause)},
        )
        self.__cause__ = cause


class DecodeError(JamfError):
    """The response was successful but its body could not be decoded."""

    def __init__(
        self,
        content_type: str,
        cause: Exception | None = None,
    ) -> None:
        message = (
            "response was successful but error occurred decoding "
            f"response body of type {content_type}"
        )
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(
            message,
            ErrorCode.DECODE_FAILED,
            details={"content_type": content_type},
        )
        self.content_type = content_type
        self.__cause__ = cause


class UnsupportedFormatError(JamfError):
    """The response declared a content type no decoder handles."""

    def __init__(self, content_type: str) -> None:
        super().__init__(
            "response was successful but received unexpected "
            f"response body of type {content_type}",
            ErrorCode.UNSUPPORTED_FORMAT,
            details={"content_type": content_type},
        )
        self.content_type = content_type


class TokenExpirationError(JamfError):
    """The stored bearer token expiration is not valid RFC3339."""

    def __init__(
        self,
        expires: str,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            f"error parsing the bearer token expiration date: {expires}",
            ErrorCode.TOKEN_EXPIRATION_INVALID,
            details={"expires": expires},
        )
        self.__cause__ = cause
