# SPDX-FileCopyrightText: 2025 camera-monitor-signaling
#
# SPDX-License-Identifier: MIT
import json
import logging
import sys

import pytest

from common.logging_config import (
    JsonFormatter,
    PrettyFormatter,
    otlp_endpoint,
    service_resource,
)


def _record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="signaling.router",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Client %s",
        args=("registered",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_service_and_extras() -> None:
    formatter = JsonFormatter(service_name="signaling", environment="test")

    payload = json.loads(formatter.format(_record(client_id="c1", role="camera")))

    assert payload["message"] == "Client registered"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "signaling.router"
    assert payload["service"] == "signaling"
    assert payload["environment"] == "test"
    assert payload["client_id"] == "c1"
    assert payload["role"] == "camera"
    assert "trace_id" not in payload
    assert "lineno" not in payload


def test_json_formatter_keeps_reserved_keys() -> None:
    formatter = JsonFormatter(service_name="signaling", environment="test")

    payload = json.loads(formatter.format(_record(service="spoofed")))

    assert payload["service"] == "signaling"


def test_json_formatter_serializes_unknown_types() -> None:
    formatter = JsonFormatter(service_name="signaling", environment="test")

    payload = json.loads(formatter.format(_record(path=object())))

    assert payload["path"].startswith("<object object")


def test_json_formatter_renders_exceptions() -> None:
    formatter = JsonFormatter(service_name="signaling", environment="test")
    try:
        raise ValueError("boom")
    except ValueError:
        record = _record()
        record.exc_info = sys.exc_info()

    payload = json.loads(formatter.format(record))

    assert "ValueError: boom" in payload["exception"]


def test_pretty_formatter_single_line() -> None:
    formatter = PrettyFormatter(service_name="signaling", environment="dev")

    line = formatter.format(_record(client_id="c1"))

    assert "\n" not in line
    assert "INFO" in line
    assert "[signaling.router] Client registered" in line
    assert "service=signaling" in line
    assert "env=dev" in line
    assert "client_id=c1" in line


def test_otlp_endpoint_prefers_signal_specific_variable(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://collector:4318")
    monkeypatch.setenv("OTEL_EXPORTER_OTLP_LOGS_ENDPOINT", "http://logs:4318")
    monkeypatch.delenv("OTEL_EXPORTER_OTLP_METRICS_ENDPOINT", raising=False)

    assert otlp_endpoint("logs") == "http://logs:4318"
    assert otlp_endpoint("metrics") == "http://collector:4318"


def test_otlp_endpoint_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("OTEL_EXPORTER_OTLP_ENDPOINT", raising=False)
    monkeypatch.delenv("OTEL_EXPORTER_OTLP_LOGS_ENDPOINT", raising=False)

    assert otlp_endpoint("logs") is None


def test_service_resource_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ENVIRONMENT", raising=False)

    attributes = service_resource("signaling", None, None).attributes

    assert attributes["service.name"] == "signaling"
    assert attributes["service.version"] == "unknown"
    assert attributes["deployment.environment"] == "development"
