"""OpenTelemetry wiring for the engine service.

Spans and counters are always recorded through the global OpenTelemetry API.
Until :func:`setup_telemetry` installs SDK providers those calls are no-ops,
so the engine can be used in tests and scripts without any exporter.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from fastapi import FastAPI
from opentelemetry import metrics, trace
from opentelemetry._logs import set_logger_provider
from opentelemetry.exporter.otlp.proto.grpc._log_exporter import OTLPLogExporter
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.instrumentation.system_metrics import SystemMetricsInstrumentor
from opentelemetry.sdk._logs import LoggerProvider
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased
from opentelemetry.semconv.resource import ResourceAttributes
from sqlalchemy.ext.asyncio import AsyncEngine

from advisor_engine import __version__
from advisor_engine.config import EngineSettings

logger = logging.getLogger(__name__)

INSTRUMENTATION_SCOPE = "advisor_engine"
METRIC_EXPORT_INTERVAL_MS = 15_000

_installed = False


@dataclass(frozen=True)
class EngineInstruments:
    """Counters describing what the engine produced."""

    recommendations: metrics.Counter
    degraded_sections: metrics.Counter

    def record_recommendations(self, recommendations: list[Any]) -> None:
        for rec in recommendations:
            attributes = {"recommendation.type": rec.type.value, "recommendation.priority": rec.priority.value}
            self.recommendations.add(1, attributes)

    def record_degraded(self, section: str) -> None:
        self.degraded_sections.add(1, {"dashboard.section": section})


def get_tracer(name: str) -> trace.Tracer:
    return trace.get_tracer(name, __version__)


def get_instruments() -> EngineInstruments:
    """Build the engine counters against whichever meter provider is active."""

    meter = metrics.get_meter(INSTRUMENTATION_SCOPE, __version__)
    return EngineInstruments(
        recommendations=meter.create_counter(
            "engine.recommendations.generated",
            unit="{recommendation}",
            description="Recommendations produced, by type and priority",
        ),
        degraded_sections=meter.create_counter(
            "engine.dashboard.degraded_sections",
            unit="{section}",
            description="Dashboard sections that failed or were skipped",
        ),
    )


def setup_telemetry(app: FastAPI, settings: EngineSettings, engine: AsyncEngine | None = None) -> bool:
    """Install OTLP exporters and instrument the app; returns whether telemetry is on.

    Only the first enabled call installs providers; later apps in the same
    process are instrumented against the existing ones.
    """

    global _installed  # noqa: PLW0603

    if not settings.telemetry_enabled:
        logger.info("Telemetry disabled via configuration")
        return False

    if not _installed:
        _install_providers(settings)
        SystemMetricsInstrumentor().instrument()
        LoggingInstrumentor().instrument(set_logging_format=False)
        _installed = True
        logger.info(
            "Telemetry exporting to %s (sample ratio %.2f)",
            settings.telemetry_otlp_endpoint or "the default OTLP endpoint",
            settings.telemetry_sample_ratio,
        )

    FastAPIInstrumentor.instrument_app(app, excluded_urls="health")
    if engine is not None:
        SQLAlchemyInstrumentor().instrument(engine=engine.sync_engine)
    return True


def _install_providers(settings: EngineSettings) -> None:
    resource = Resource.create(
        {
            ResourceAttributes.SERVICE_NAME: settings.telemetry_service_name or settings.app_name,
            ResourceAttributes.SERVICE_VERSION: __version__,
        }
    )
    exporter_options: dict[str, Any] = {"insecure": settings.telemetry_otlp_insecure}
    if settings.telemetry_otlp_endpoint:
        exporter_options["endpoint"] = settings.telemetry_otlp_endpoint

    tracer_provider = TracerProvider(
        resource=resource,
        sampler=ParentBased(TraceIdRatioBased(settings.telemetry_sample_ratio)),
    )
    tracer_provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(**exporter_options)))
    trace.set_tracer_provider(tracer_provider)

    reader = PeriodicExportingMetricReader(
        OTLPMetricExporter(**exporter_options),
        export_interval_millis=METRIC_EXPORT_INTERVAL_MS,
    )
    metrics.set_meter_provider(MeterProvider(resource=resource, metric_readers=[reader]))

    logger_provider = LoggerProvider(resource=resource)
    logger_provider.add_log_record_processor(BatchLogRecordProcessor(OTLPLogExporter(**exporter_options)))
    set_logger_provider(logger_provider)


__all__ = ["EngineInstruments", "get_instruments", "get_tracer", "setup_telemetry"]
