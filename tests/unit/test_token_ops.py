"""Unit tests for bearer token bookkeeping."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from jamf_classic_sdk.core.token_ops import DEFAULT_RENEWAL_MARGIN, TokenStore
from jamf_classic_sdk.errors import TokenExpirationError
from jamf_classic_sdk.models import BearerToken

NOW = datetime(2024, 3, 9, 12, 0, tzinfo=UTC)


def store_with(expires: str) -> TokenStore:
    store = TokenStore()
    store.replace(BearerToken(token="T", expires=expires))
    return store


class TestBearerToken:
    """Tests for BearerToken."""

    def test_empty_by_default(self) -> None:
        token = BearerToken()

        assert token.is_empty
        assert token.token == ""

    def test_parses_zulu_with_fraction(self) -> None:
        token = BearerToken(token="T", expires="2024-03-09T21:45:14.469Z")

        assert token.expires_at() == datetime(2024, 3, 9, 21, 45, 14, 469000, tzinfo=UTC)

    def test_parses_offset(self) -> None:
        token = BearerToken(token="T", expires="2024-03-09T13:00:00+01:00")

        assert token.time_until_expiry(NOW) == timedelta(0)

    @pytest.mark.parametrize(
        "expires",
        [
            "not-a-date",
            "2024-03-09T12:30:00",
            "2024-03-09",
            "2100-03-09 12:00:00+00:00",
            "21000309T120000Z",
            "2100-W10-6T12:00:00Z",
        ],
    )
    def test_rejects_non_rfc3339(self, expires: str) -> None:
        with pytest.raises(TokenExpirationError) as exc_info:
            BearerToken(token="T", expires=expires).expires_at()

        assert expires in str(exc_info.value)

    def test_ignores_unknown_fields(self) -> None:
        token = BearerToken.model_validate_json('{"token": "T", "expires": "x", "extra": 1}')

        assert token.token == "T"


class TestTokenStore:
    """Tests for TokenStore renewal decisions."""

    def test_default_margin_is_five_minutes(self) -> None:
        assert TokenStore().margin == DEFAULT_RENEWAL_MARGIN == timedelta(minutes=5)

    def test_empty_store_needs_renewal(self) -> None:
        assert TokenStore().needs_renewal(NOW)

    def test_far_expiry_is_valid(self) -> None:
        store = store_with("2024-03-09T13:00:00Z")

        assert not store.needs_renewal(NOW)

    def test_expiry_within_margin_needs_renewal(self) -> None:
        store = store_with("2024-03-09T12:04:59Z")

        assert store.needs_renewal(NOW)

    def test_expiry_exactly_at_margin_needs_renewal(self) -> None:
        store = store_with("2024-03-09T12:05:00Z")

        assert store.needs_renewal(NOW)

    def test_expired_token_needs_renewal(self) -> None:
        store = store_with("2024-03-09T11:00:00Z")

        assert store.needs_renewal(NOW)

    @pytest.mark.parametrize(
        "expires",
        ["tomorrow", "2100-03-09 12:00:00+00:00", "21000309T120000Z", "2100-W10-6T12:00:00Z"],
    )
    def test_unparsable_expiry_raises(self, expires: str) -> None:
        store = store_with(expires)

        with pytest.raises(TokenExpirationError):
            store.needs_renewal(NOW)

    def test_replace_swaps_whole_token(self) -> None:
        store = store_with("2024-03-09T13:00:00Z")
        new = BearerToken(token="U", expires="2024-03-09T14:00:00Z")

        store.replace(new)

        assert store.token is new
        assert store.authorization_header() == "Bearer U"
