"""Pydantic models for the Jamf classic SDK.

Resource models accept both wire shapes the classic API produces: JSON
bodies wrap the payload in the resource name, XML bodies arrive with the
root element already stripped by the decoder.
"""

from __future__ import annotations

import re
from datetime import UTC, datetime, timedelta
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from .errors import TokenExpirationError

# RFC3339 date-time with a "T" separator and a mandatory offset
RFC3339_PATTERN = re.compile(
    r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:\.\d+)?(?:Z|[+-]\d{2}:\d{2})",
    re.ASCII,
)


class BearerToken(BaseModel):
    """Bearer token returned by the token exchange."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    token: str = ""
    expires: str = ""

    @property
    def is_empty(self) -> bool:
        """True until the first successful token exchange."""
        return not self.expires

    def expires_at(self) -> datetime:
        """Parse the RFC3339 expiration timestamp.

        Raises:
            TokenExpirationError: If the timestamp is not RFC3339 with an offset.
        """
        if not RFC3339_PATTERN.fullmatch(self.expires):
            raise TokenExpirationError(self.expires)
        try:
            return datetime.fromisoformat(self.expires)
        except ValueError as e:
            raise TokenExpirationError(self.expires, e) from e

    def time_until_expiry(self, now: datetime | None = None) -> timedelta:
        """Get time remaining until token expires."""
        return self.expires_at() - (now or datetime.now(UTC))


def _as_list(value: Any) -> Any:
    # A single repeated XML child decodes to a dict rather than a list
    if value is None:
        return []
    if isinstance(value, dict):
        return [value]
    return value


class ComputerSummary(BaseModel):
    """Entry of the enrolled computer listing."""

    model_config = ConfigDict(extra="ignore")

    id: int
    name: str


class ComputerList(BaseModel):
    """All enrolled computers."""

    model_config = ConfigDict(extra="ignore")

    computers: list[ComputerSummary] = Field(
        default_factory=list,
        validation_alias=AliasChoices("computers", "computer"),
    )

    @field_validator("computers", mode="before")
    @classmethod
    def normalize_computers(cls, v: Any) -> Any:
        return _as_list(v)


class ComputerGeneral(BaseModel):
    """General section of a computer record."""

    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    mac_address: str | None = None
    serial_number: str | None = None
    udid: str | None = None
    ip_address: str | None = None
    last_reported_ip: str | None = None
    platform: str | None = None
    report_date_utc: str | None = None


class ComputerHardware(BaseModel):
    """Hardware section of a computer record."""

    model_config = ConfigDict(extra="ignore")

    make: str | None = None
    model: str | None = None
    model_identifier: str | None = None
    os_name: str | None = None
    os_version: str | None = None
    os_build: str | None = None
    processor_type: str | None = None
    total_ram: int | None = None


class Computer(BaseModel):
    """Details of a single enrolled computer."""

    model_config = ConfigDict(extra="ignore")

    general: ComputerGeneral
    hardware: ComputerHardware | None = None

    @model_validator(mode="before")
    @classmethod
    def unwrap_resource(cls, data: Any) -> Any:
        """Unwrap the JSON ``{"computer": {...}}`` envelope."""
        if isinstance(data, dict) and "general" not in data and "computer" in data:
            return data["computer"]
        return data
