"""Resource contexts and URL helpers for the classic API."""

from __future__ import annotations

from urllib.parse import quote

from .errors import InvalidConfigError

CLASSES_CONTEXT = "classes"
COMPUTERS_CONTEXT = "computers"
COMPUTER_EXT_ATTR_CONTEXT = "computerextensionattributes"
POLICIES_CONTEXT = "policies"
SCRIPTS_CONTEXT = "scripts"


def endpoint_builder(endpoint: str, context: str, identifier: int | str) -> str:
    """Build the URL of a single resource.

    Integers address a resource by ID, strings by name.

    Example:
        >>> endpoint_builder("https://jamf.test/JSSResource", "computers", 7)
        'https://jamf.test/JSSResource/computers/id/7'

    Raises:
        InvalidConfigError: If the identifier is neither a positive int
            nor a non-empty string.
    """
    # bool is an int subclass but never a valid ID
    if isinstance(identifier, int) and not isinstance(identifier, bool):
        if identifier <= 0:
            raise InvalidConfigError(
                f"invalid {context} identifier: {identifier}", field="identifier"
            )
        return f"{endpoint}/{context}/id/{identifier}"
    if isinstance(identifier, str) and identifier:
        return f"{endpoint}/{context}/name/{quote(identifier, safe='')}"
    raise InvalidConfigError(
        f"unsupported {context} identifier type: {identifier!r}", field="identifier"
    )
