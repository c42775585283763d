"""Jamf classic API Python SDK."""

from .async_client import AsyncJamfClient, new_async_client
from .client import JamfClient, new_client
from .config import ClientConfig, TelemetryConfig
from .errors import (
    DecodeError,
    InvalidConfigError,
    JamfError,
    NetworkError,
    ResponseReadError,
    TimeoutError,
    TokenExpirationError,
    UnsupportedFormatError,
    UpstreamError,
)
from .models import BearerToken, Computer, ComputerList

__all__ = [
    "AsyncJamfClient",
    "JamfClient",
    "new_async_client",
    "new_client",
    "ClientConfig",
    "TelemetryConfig",
    "DecodeError",
    "InvalidConfigError",
    "JamfError",
    "NetworkError",
    "ResponseReadError",
    "TimeoutError",
    "TokenExpirationError",
    "UnsupportedFormatError",
    "UpstreamError",
    "BearerToken",
    "Computer",
    "ComputerList",
]

__version__ = "0.1.0"
