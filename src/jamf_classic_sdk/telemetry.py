"""Structured logging and tracing for the Jamf classic SDK.

Log events are rendered as JSON by structlog with credentials masked;
each HTTP exchange runs inside an OpenTelemetry span that records the
SDK error code when the exchange fails.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

if TYPE_CHECKING:
    from collections.abc import Generator

    from .config import TelemetryConfig

INSTRUMENTATION_NAME = "jamf-classic-sdk"
INSTRUMENTATION_VERSION = "0.1.0"

SECRET_KEYS = frozenset({"authorization", "password", "token"})
REDACTED = "***"

_tracer: trace.Tracer | None = None
_logger: structlog.BoundLogger | None = None


def get_tracer() -> trace.Tracer:
    """Tracer used for HTTP exchange spans."""
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(INSTRUMENTATION_NAME, INSTRUMENTATION_VERSION)
    return _tracer


def get_logger() -> structlog.BoundLogger:
    """Logger shared by clients and executors."""
    global _logger
    if _logger is None:
        _logger = structlog.get_logger(INSTRUMENTATION_NAME)
    return _logger


def redact_secrets(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Mask credential values bound to a log event."""
    for key in SECRET_KEYS.intersection(event_dict):
        event_dict[key] = REDACTED
    return event_dict


def _log_level_to_int(level: str) -> int:
    """Convert a level name such as ``"debug"`` to its number, defaulting to INFO."""
    return logging.getLevelNamesMapping().get(level.upper(), logging.INFO)


def _json_processors() -> list[Any]:
    # Redaction runs first so no later processor sees a raw secret
    return [
        redact_secrets,
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(sort_keys=True),
    ]


def configure_telemetry(config: TelemetryConfig) -> None:
    """Apply a telemetry configuration to the SDK's tracer and logger.

    When disabled, spans become no-ops and the logger is left to the
    application's own structlog setup.

    Args:
        config: Telemetry configuration.
    """
    global _tracer, _logger

    if not config.enabled:
        _tracer = trace.NoOpTracer()
        return

    structlog.configure(
        processors=_json_processors(),
        wrapper_class=structlog.make_filtering_bound_logger(
            _log_level_to_int(config.log_level)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _tracer = trace.get_tracer(config.service_name, INSTRUMENTATION_VERSION)
    _logger = structlog.get_logger(config.service_name)


@contextmanager
def trace_operation(
    name: str,
    *,
    attributes: dict[str, Any] | None = None,
) -> Generator[trace.Span, None, None]:
    """Run a block inside a span, marking the span failed on error.

    SDK errors additionally set ``jamf.error.code`` on the span.
    """
    with get_tracer().start_as_current_span(
        name,
        attributes=attributes,
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        try:
            yield span
        except Exception as e:
            code = getattr(e, "code", None)
            if isinstance(code, str):
                span.set_attribute("jamf.error.code", code)
            span.set_status(Status(StatusCode.ERROR, str(e)))
            span.record_exception(e)
            raise
