"""Content-type negotiation and body decoding for the Jamf classic SDK.

The classic API is inconsistent about its wire format: some endpoints
answer in JSON, others in XML, and some label JSON payloads as
``text/plain``. The decoder picks a strategy per response from the
declared ``Content-Type`` instead of assuming one format globally.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, TypeVar

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..errors import DecodeError, UnsupportedFormatError

T = TypeVar("T")

XML_MEDIA_TYPES = frozenset({"text/xml", "application/xml"})
JSON_MEDIA_TYPES = frozenset({"text/json", "application/json", "text/plain"})


class BodyFormat(StrEnum):
    """Decoding strategies known to the SDK."""

    JSON = "json"
    XML = "xml"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class ContentFormat:
    """Decoding strategy chosen for a response, with its base media type."""

    kind: BodyFormat
    media_type: str


def media_type_of(content_type: str | None) -> str:
    """Strip parameters such as charset from a Content-Type value.

    Example:
        >>> media_type_of("text/xml;charset=UTF-8")
        'text/xml'
    """
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def classify_content_type(content_type: str | None) -> ContentFormat:
    """Map a Content-Type header value onto a decoding strategy."""
    media_type = media_type_of(content_type)
    if media_type in XML_MEDIA_TYPES:
        return ContentFormat(BodyFormat.XML, media_type)
    if media_type in JSON_MEDIA_TYPES:
        return ContentFormat(BodyFormat.JSON, media_type)
    return ContentFormat(BodyFormat.UNSUPPORTED, media_type)


def element_to_data(element: ET.Element) -> Any:
    """Convert an XML element into plain Python data.

    Leaf elements become their stripped text (``None`` when empty).
    Elements with children become dicts keyed by child tag; a tag that
    repeats becomes a list. Attributes are ignored.
    """
    children = list(element)
    if not children:
        text = (element.text or "").strip()
        return text or None

    data: dict[str, Any] = {}
    for child in children:
        value = element_to_data(child)
        if child.tag not in data:
            data[child.tag] = value
            continue
        existing = data[child.tag]
        if isinstance(existing, list):
            existing.append(value)
        else:
            data[child.tag] = [existing, value]
    return data


def parse_xml(body: bytes | str) -> Any:
    """Parse an XML document, dropping its root element.

    A root with neither children nor text, such as ``<computers/>``,
    becomes an empty dict so it validates as an empty record.
    """
    data = element_to_data(ET.fromstring(body))
    return {} if data is None else data


def decode_body(
    body: bytes | str,
    content_type: str | None,
    result_type: type[T],
) -> T:
    """Decode a response body into an instance of ``result_type``.

    Args:
        body: Raw response body.
        content_type: Declared Content-Type header value.
        result_type: Any type pydantic can validate (model, dataclass, dict...).

    Returns:
        Validated instance of ``result_type``.

    Raises:
        DecodeError: If the body does not parse or validate.
        UnsupportedFormatError: If no decoder handles the media type.
    """
    fmt = classify_content_type(content_type)
    adapter: TypeAdapter[T] = TypeAdapter(result_type)

    if fmt.kind is BodyFormat.XML:
        try:
            return adapter.validate_python(parse_xml(body))
        except (ET.ParseError, PydanticValidationError) as e:
            raise DecodeError(fmt.media_type, e) from e

    if fmt.kind is BodyFormat.JSON:
        try:
            return adapter.validate_json(body)
        except PydanticValidationError as e:
            raise DecodeError(fmt.media_type, e) from e

    raise UnsupportedFormatError(fmt.media_type)
