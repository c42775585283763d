"""Bearer token bookkeeping shared by the sync and async clients.

The store holds one immutable ``BearerToken`` and swaps it whole on
renewal, so readers always observe either the old or the new token.
Locking around check-then-acquire belongs to the clients, since the
sync and async clients need different lock types.
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

from ..models import BearerToken

if TYPE_CHECKING:
    from datetime import datetime

DEFAULT_RENEWAL_MARGIN = timedelta(minutes=5)


class TokenStore:
    """Current bearer token of a single client instance."""

    def __init__(self, margin: timedelta = DEFAULT_RENEWAL_MARGIN) -> None:
        """Initialize an empty store.

        Args:
            margin: Remaining lifetime at or below which the token is renewed.
        """
        self.margin = margin
        self._token = BearerToken()

    @property
    def token(self) -> BearerToken:
        """Get current token."""
        return self._token

    def replace(self, token: BearerToken) -> None:
        """Replace the stored token after a successful exchange."""
        self._token = token

    def authorization_header(self) -> str:
        """Value of the Authorization header for the current token."""
        return f"Bearer {self._token.token}"

    def needs_renewal(self, now: datetime | None = None) -> bool:
        """Check whether a new token must be acquired before the next request.

        An absent expiration counts as expired. A present but unparsable
        expiration is an error rather than a reason to renew.

        Raises:
            TokenExpirationError: If the stored expiration is not RFC3339.
        """
        if self._token.is_empty:
            return True
        return self._token.time_until_expiry(now) <= self.margin
