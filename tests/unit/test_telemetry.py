"""Unit tests for logging and tracing helpers."""

from __future__ import annotations

import asyncio
import json
from typing import Iterator
from unittest.mock import MagicMock

import pytest
import structlog
from conftest import FakeJamf
from opentelemetry import trace

from jamf_classic_sdk import AsyncJamfClient, JamfClient, UpstreamError, telemetry
from jamf_classic_sdk.config import ClientConfig, TelemetryConfig
from jamf_classic_sdk.telemetry import (
    configure_telemetry,
    redact_secrets,
    trace_operation,
)


@pytest.fixture(autouse=True)
def reset_telemetry(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.setattr(telemetry, "_tracer", None)
    monkeypatch.setattr(telemetry, "_logger", None)
    yield
    structlog.reset_defaults()


def test_redact_secrets_masks_credentials() -> None:
    event = {"event": "sent", "authorization": "Bearer abc", "password": "pw", "url": "u"}

    result = redact_secrets(None, "info", event)

    assert result == {"event": "sent", "authorization": "***", "password": "***", "url": "u"}


def test_log_level_names() -> None:
    assert telemetry._log_level_to_int("debug") == 10
    assert telemetry._log_level_to_int("WARNING") == 30
    assert telemetry._log_level_to_int("nonsense") == 20


def test_disabled_telemetry_uses_noop_tracer() -> None:
    configure_telemetry(TelemetryConfig(enabled=False))

    assert isinstance(telemetry.get_tracer(), trace.NoOpTracer)


def test_enabled_telemetry_renders_json(capsys: pytest.CaptureFixture[str]) -> None:
    configure_telemetry(TelemetryConfig(service_name="test-sdk", log_level="DEBUG"))

    telemetry.get_logger().info("Bearer token acquired", token="secret-value")

    out = capsys.readouterr().out
    assert '"event": "Bearer token acquired"' in out
    assert "secret-value" not in out


def test_trace_operation_reraises() -> None:
    with pytest.raises(ValueError, match="boom"):
        with trace_operation("http_request", attributes={"http.method": "GET"}):
            raise ValueError("boom")


def test_trace_operation_records_error_code(monkeypatch: pytest.MonkeyPatch) -> None:
    tracer = MagicMock()
    monkeypatch.setattr(telemetry, "_tracer", tracer)

    with pytest.raises(UpstreamError):
        with trace_operation("http_request"):
            raise UpstreamError("bad API call", status_code=500, url="u")

    span = tracer.start_as_current_span.return_value.__enter__.return_value
    span.set_attribute.assert_called_once_with("jamf.error.code", "HTTP_3001")
    span.record_exception.assert_called_once()


class TestClientTelemetry:
    """Telemetry settings carried by ClientConfig are applied by the clients."""

    def test_disabled_telemetry_applied_on_construction(
        self, base_config: ClientConfig, fake_jamf: FakeJamf
    ) -> None:
        config = base_config.with_overrides(telemetry=TelemetryConfig(enabled=False))

        with JamfClient(config, http_client=fake_jamf.http_client()):
            assert isinstance(telemetry.get_tracer(), trace.NoOpTracer)

    def test_async_client_applies_telemetry(
        self, base_config: ClientConfig, fake_jamf: FakeJamf
    ) -> None:
        config = base_config.with_overrides(telemetry=TelemetryConfig(enabled=False))

        async def scenario() -> None:
            async with AsyncJamfClient(config, http_client=fake_jamf.async_http_client()):
                assert isinstance(telemetry.get_tracer(), trace.NoOpTracer)

        asyncio.run(scenario())

    def test_token_exchange_logged_as_json(
        self,
        base_config: ClientConfig,
        fake_jamf: FakeJamf,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        config = base_config.with_overrides(
            telemetry=TelemetryConfig(service_name="jamf-test", log_level="INFO")
        )

        with JamfClient(config, http_client=fake_jamf.http_client()) as client:
            client.ensure_valid_token()

        lines = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
        acquired = [line for line in lines if line["event"] == "Bearer token acquired"]
        assert len(acquired) == 1
        assert acquired[0]["domain"] == config.domain
        assert acquired[0]["level"] == "info"
        assert fake_jamf.token not in json.dumps(lines)

    def test_no_telemetry_leaves_logging_alone(
        self, base_config: ClientConfig, fake_jamf: FakeJamf
    ) -> None:
        with JamfClient(base_config, http_client=fake_jamf.http_client()):
            pass

        assert telemetry._tracer is None
