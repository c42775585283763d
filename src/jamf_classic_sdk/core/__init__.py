"""Core components for the Jamf classic SDK.

Token bookkeeping, request decoration, HTTP execution and body decoding
shared between the sync and async clients.
"""

from __future__ import annotations

from .auth_builder import RequestBuilder
from .content import BodyFormat, ContentFormat, classify_content_type, decode_body
from .http_executor import AsyncHTTPExecutor, SyncHTTPExecutor
from .token_ops import TokenStore

__all__ = [
    "RequestBuilder",
    "BodyFormat",
    "ContentFormat",
    "classify_content_type",
    "decode_body",
    "AsyncHTTPExecutor",
    "SyncHTTPExecutor",
    "TokenStore",
]
