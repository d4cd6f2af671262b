# SPDX-FileCopyrightText: 2025 camera-monitor-signaling
#
# SPDX-License-Identifier: MIT
import json
import logging
import os
from datetime import datetime, timezone
from typing import Any

from opentelemetry import _logs, trace
from opentelemetry.exporter.otlp.proto.http._log_exporter import OTLPLogExporter
from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
from opentelemetry.sdk.resources import Resource
from opentelemetry.semconv.resource import ResourceAttributes


_configured = False
# Attributes every LogRecord carries; anything else came in through ``extra=``.
_STANDARD_FIELDS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", None, None))
) | {"message", "asctime", "taskName"}


def _record_extras(record: logging.LogRecord) -> dict[str, Any]:
    """Return the structured fields attached to a record via ``extra=``."""
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _STANDARD_FIELDS
    }


def _trace_fields() -> dict[str, str]:
    span_ctx = trace.get_current_span().get_span_context()
    if not span_ctx or not span_ctx.is_valid:
        return {}
    return {
        "trace_id": format(span_ctx.trace_id, "032x"),
        "span_id": format(span_ctx.span_id, "016x"),
    }


class JsonFormatter(logging.Formatter):
    """Format log records as structured JSON."""

    def __init__(self, service_name: str, environment: str) -> None:
        super().__init__()
        self.service_name = service_name
        self.environment = environment

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        payload: dict[str, Any] = {
            "timestamp": ts,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
            "environment": self.environment,
            **_trace_fields(),
        }
        for key, value in _record_extras(record).items():
            payload.setdefault(key, value)

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=True, default=str)


class PrettyFormatter(logging.Formatter):
    """Human-readable, single-line log formatter."""

    def __init__(self, service_name: str, environment: str) -> None:
        super().__init__()
        self.service_name = service_name
        self.environment = environment

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        extras: dict[str, Any] = {
            "service": self.service_name,
            "env": self.environment,
            **_trace_fields(),
        }
        for key, value in _record_extras(record).items():
            extras.setdefault(key, value)

        if record.exc_info:
            extras["exception"] = self.formatException(record.exc_info)

        parts = [
            ts,
            f"{record.levelname:<7}",
            f"[{record.name}]",
            record.getMessage(),
            " ".join(f"{k}={v}" for k, v in extras.items()),
        ]
        return " ".join(filter(None, parts))


def service_resource(
    service_name: str, service_version: str | None, environment: str | None
) -> Resource:
    """OTel resource shared by the log and metric providers."""
    env = environment or os.getenv("ENVIRONMENT", "development")
    return Resource.create(
        {
            ResourceAttributes.SERVICE_NAME: service_name,
            ResourceAttributes.SERVICE_VERSION: service_version or "unknown",
            ResourceAttributes.DEPLOYMENT_ENVIRONMENT: env,
        }
    )


def otlp_endpoint(signal: str) -> str | None:
    """``OTEL_EXPORTER_OTLP_<SIGNAL>_ENDPOINT``, else the generic endpoint."""
    return os.getenv(f"OTEL_EXPORTER_OTLP_{signal.upper()}_ENDPOINT") or os.getenv(
        "OTEL_EXPORTER_OTLP_ENDPOINT"
    )


def configure_logging(
    service_name: str,
    service_version: str | None = None,
    environment: str | None = None,
) -> None:
    """Route the root logger to the console and to OpenTelemetry. Idempotent.

    ``LOG_LEVEL`` and ``LOG_FORMAT`` (``json`` or ``pretty``) tune the console.
    """
    global _configured
    if _configured:
        return

    level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
    resource = service_resource(service_name, service_version, environment)
    env = str(resource.attributes[ResourceAttributes.DEPLOYMENT_ENVIRONMENT])

    provider = LoggerProvider(resource=resource)
    _logs.set_logger_provider(provider)
    endpoint = otlp_endpoint("logs")
    if endpoint:
        try:
            provider.add_log_record_processor(
                BatchLogRecordProcessor(OTLPLogExporter(endpoint=endpoint))
            )
        except Exception as err:  # pragma: no cover
            logging.getLogger(__name__).warning(
                "OTLP log export disabled", extra={"error": str(err)}
            )

    pretty = os.getenv("LOG_FORMAT", "json").lower() == "pretty"
    formatter_cls = PrettyFormatter if pretty else JsonFormatter
    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(formatter_cls(service_name, env))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(console)
    root.addHandler(LoggingHandler(level=level, logger_provider=provider))

    _configured = True
