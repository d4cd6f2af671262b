# SPDX-FileCopyrightText: 2025 camera-monitor-signaling
#
# SPDX-License-Identifier: MIT
import logging
from typing import Optional

from opentelemetry import metrics
from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import MetricReader, PeriodicExportingMetricReader

from common.logging_config import otlp_endpoint, service_resource


_configured = False
_meter: Optional[metrics.Meter] = None
_METER_NAME = "signaling"
_EXPORT_INTERVAL_MS = 5000


def configure_metrics(
    service_name: str,
    service_version: str,
    environment: str | None = None,
) -> metrics.Meter:
    """Install the global MeterProvider once and return the service meter.

    Metrics are exported over OTLP HTTP only when an endpoint is configured.
    """
    global _configured, _meter
    if _configured and _meter is not None:
        return _meter

    readers: list[MetricReader] = []
    endpoint = otlp_endpoint("metrics")
    if endpoint:
        try:
            readers.append(
                PeriodicExportingMetricReader(
                    OTLPMetricExporter(endpoint=endpoint),
                    export_interval_millis=_EXPORT_INTERVAL_MS,
                )
            )
        except Exception as err:  # pragma: no cover
            logging.getLogger(__name__).warning(
                "OTLP metric export disabled", extra={"error": str(err)}
            )

    resource = service_resource(service_name, service_version, environment)
    metrics.set_meter_provider(MeterProvider(resource=resource, metric_readers=readers))
    _meter = metrics.get_meter(_METER_NAME, service_version)
    _configured = True
    return _meter


def get_meter() -> metrics.Meter:
    """Get the configured Meter instance.

    Before ``configure_metrics`` runs this is the OpenTelemetry proxy meter,
    whose instruments are no-ops until a provider is installed.
    """
    if _meter is None:
        return metrics.get_meter(_METER_NAME)
    return _meter


class SignalingMetrics:
    """Instruments recorded by the router, notifier and channels."""

    def __init__(self, meter: metrics.Meter | None = None) -> None:
        meter = meter or get_meter()
        self.registrations = meter.create_counter(
            "signaling.registrations",
            description="Completed register messages",
        )
        self.forwarded = meter.create_counter(
            "signaling.messages.forwarded",
            description="Signaling messages delivered to a registered target",
        )
        self.routing_misses = meter.create_counter(
            "signaling.messages.routing_misses",
            description="Signaling messages addressed to an unknown client id",
        )
        self.malformed = meter.create_counter(
            "signaling.messages.malformed",
            description="Inbound frames that failed to parse",
        )
        self.dropped_outbound = meter.create_counter(
            "signaling.outbound.dropped",
            description="Outbound frames discarded because a peer queue was full",
        )
        self.connected_clients = meter.create_up_down_counter(
            "signaling.clients.connected",
            description="Currently registered clients",
        )


_signaling_metrics: Optional[SignalingMetrics] = None


def get_signaling_metrics() -> SignalingMetrics:
    """Process-wide instruments, created on first use."""
    global _signaling_metrics
    if _signaling_metrics is None:
        _signaling_metrics = SignalingMetrics()
    return _signaling_metrics
