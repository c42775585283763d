"""Configuration for the Jamf classic SDK.

Uses Pydantic v2 for validation with sensible defaults. Endpoints are
derived from the domain and never set directly.
"""

from __future__ import annotations

from typing import Annotated, Any, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    field_validator,
)
from pydantic import ValidationError as PydanticValidationError

from .errors import InvalidConfigError

CREDENTIALS_REQUIRED = "you must provide a valid Jamf domain, username, and password"
CREDENTIAL_FIELDS = frozenset({"domain", "username", "password"})

RESOURCE_PATH = "JSSResource"
TOKEN_PATH = "api/v1/auth/token"


class TelemetryConfig(BaseModel):
    """Structured logging and tracing configuration."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    service_name: str = "jamf-classic-sdk"
    log_level: str = "INFO"


class ClientConfig(BaseModel):
    """Main configuration for the Jamf classic SDK."""

    model_config = ConfigDict(frozen=True, validate_default=True)

    # Required
    domain: str = Field(..., min_length=1)
    username: str = Field(..., min_length=1)
    password: SecretStr

    # HTTP settings
    timeout: Annotated[float, Field(gt=0, le=600)] = 60.0

    # Seconds of remaining lifetime below which the bearer token is renewed
    token_buffer: Annotated[int, Field(ge=0)] = 300

    # Applied by the clients on construction; None leaves logging as the
    # application configured it
    telemetry: TelemetryConfig | None = None

    @field_validator("domain")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the domain so derived endpoints never double a slash."""
        v = v.rstrip("/")
        if not v:
            raise ValueError(CREDENTIALS_REQUIRED)
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: SecretStr) -> SecretStr:
        """Reject an empty password."""
        if not v.get_secret_value():
            raise ValueError(CREDENTIALS_REQUIRED)
        return v

    @property
    def endpoint(self) -> str:
        """Base URL of the classic resource API."""
        return f"{self.domain}/{RESOURCE_PATH}"

    @property
    def token_endpoint(self) -> str:
        """URL of the bearer token exchange."""
        return f"{self.domain}/{TOKEN_PATH}"

    def with_overrides(self, **kwargs: Any) -> Self:
        """Create new config with overridden values."""
        data = self.model_dump()
        data["password"] = self.password.get_secret_value()
        data.update(kwargs)
        return self.__class__(**data)

    @classmethod
    def from_credentials(
        cls,
        domain: str,
        username: str,
        password: str,
        **kwargs: Any,
    ) -> Self:
        """Create config from credentials, failing fast when any is empty.

        Raises:
            InvalidConfigError: If a credential is empty or any value fails
                validation (a domain of only slashes, a zero timeout...).
        """
        if not domain or not username or not password:
            raise InvalidConfigError(CREDENTIALS_REQUIRED)
        try:
            return cls(domain=domain, username=username, password=password, **kwargs)
        except PydanticValidationError as e:
            raise _config_error(e) from e

    @classmethod
    def from_env(cls, prefix: str = "JAMF_") -> Self:
        """Create config from environment variables."""
        import os

        def get_env(key: str, default: Any = None) -> Any:
            return os.environ.get(f"{prefix}{key}", default)

        for key in ("DOMAIN", "USERNAME", "PASSWORD"):
            if not get_env(key):
                msg = f"{prefix}{key} environment variable is required"
                raise InvalidConfigError(msg, field=key.lower())

        raw_timeout = get_env("TIMEOUT", "60.0")
        try:
            timeout = float(raw_timeout)
        except ValueError as e:
            msg = f"{prefix}TIMEOUT must be a number of seconds, got {raw_timeout!r}"
            raise InvalidConfigError(msg, field="timeout") from e

        try:
            return cls(
                domain=get_env("DOMAIN"),
                username=get_env("USERNAME"),
                password=get_env("PASSWORD"),
                timeout=timeout,
            )
        except PydanticValidationError as e:
            raise _config_error(e) from e


def _config_error(exc: PydanticValidationError) -> InvalidConfigError:
    first = exc.errors()[0]
    field = str(first["loc"][0]) if first["loc"] else None
    if field in CREDENTIAL_FIELDS:
        return InvalidConfigError(CREDENTIALS_REQUIRED, field=field)
    return InvalidConfigError(f"invalid {field}: {first['msg']}", field=field)
