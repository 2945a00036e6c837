"""Observability setup for OpenTelemetry, metrics, and structured logging."""

import logging

import structlog
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, generate_latest

from .config import settings

SERVICE_NAME = "matchtrip-booking-core"
SERVICE_VERSION = "1.0.0"

# Prometheus metrics
REGISTRY = CollectorRegistry()

# Request metrics
REQUEST_COUNT = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status_code'],
    registry=REGISTRY
)

REQUEST_DURATION = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint'],
    registry=REGISTRY
)

# Storage metrics
STORE_UPDATES = Counter(
    'store_updates_total',
    'Locked read-modify-write transactions by outcome',
    ['collection', 'outcome'],
    registry=REGISTRY
)

STORE_LOCK_WAIT = Histogram(
    'store_lock_wait_seconds',
    'Time spent acquiring a collection lock',
    ['collection'],
    buckets=(0.001, 0.005, 0.02, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5),
    registry=REGISTRY
)

STORE_LOCK_TIMEOUTS = Counter(
    'store_lock_timeouts_total',
    'Lock acquisitions that exceeded the retry bound',
    ['collection'],
    registry=REGISTRY
)

# Business metrics
BOOKINGS_CREATED = Counter(
    'bookings_created_total',
    'Total bookings created',
    ['sport', 'package'],
    registry=REGISTRY
)

BOOKING_TRANSITIONS = Counter(
    'booking_status_transitions_total',
    'Booking status and payment status changes',
    ['field', 'value'],
    registry=REGISTRY
)

PRICE_CALCULATIONS = Counter(
    'price_calculations_total',
    'Server-side price calculations',
    ['sport', 'package'],
    registry=REGISTRY
)

CLIENT_PRICE_MISMATCHES = Counter(
    'client_price_mismatches_total',
    'Client totals outside the accepted tolerance',
    registry=REGISTRY
)

ACTIVE_SESSIONS = Gauge(
    'admin_sessions_active',
    'Admin sessions left after the last expiry sweep',
    registry=REGISTRY
)


def setup_structured_logging():
    """Configure structured logging with structlog."""

    def add_trace_context(logger, method_name, event_dict):
        """Add trace context to log events."""
        span = trace.get_current_span()
        if span and span.is_recording():
            ctx = span.get_span_context()
            event_dict['trace_id'] = format(ctx.trace_id, '032x')
            event_dict['span_id'] = format(ctx.span_id, '016x')
        return event_dict

    structlog.configure(
        processors=[
            # request_id is bound here by RequestIDMiddleware
            structlog.contextvars.merge_contextvars,
            add_trace_context,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.ConsoleRenderer() if settings.debug else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, settings.log_level)
        ),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def setup_tracing(app_name: str = SERVICE_NAME):
    """Setup OpenTelemetry tracing."""
    resource = Resource.create({
        "service.name": app_name,
        "service.version": SERVICE_VERSION,
        "environment": settings.environment,
    })

    provider = TracerProvider(resource=resource)

    # Export only when a collector is configured
    if settings.otlp_endpoint:
        otlp_exporter = OTLPSpanExporter(endpoint=settings.otlp_endpoint)
        provider.add_span_processor(BatchSpanProcessor(otlp_exporter))

    trace.set_tracer_provider(provider)
    return trace.get_tracer(__name__)


def instrument_fastapi(app):
    """Instrument FastAPI with OpenTelemetry."""
    FastAPIInstrumentor.instrument_app(app)


class MetricsCollector:
    """Collector for storage and business metrics."""

    @staticmethod
    def record_request(method: str, endpoint: str, status_code: int, duration: float):
        """Record one HTTP request."""
        REQUEST_COUNT.labels(method=method, endpoint=endpoint, status_code=str(status_code)).inc()
        REQUEST_DURATION.labels(method=method, endpoint=endpoint).observe(duration)

    @staticmethod
    def record_store_update(collection: str, outcome: str):
        """Record a store transaction outcome (committed, aborted, failed)."""
        STORE_UPDATES.labels(collection=collection, outcome=outcome).inc()

    @staticmethod
    def record_lock_wait(collection: str, seconds: float):
        """Record how long a writer waited for a collection lock."""
        STORE_LOCK_WAIT.labels(collection=collection).observe(seconds)

    @staticmethod
    def record_lock_timeout(collection: str):
        """Record a lock acquisition timeout."""
        STORE_LOCK_TIMEOUTS.labels(collection=collection).inc()

    @staticmethod
    def record_booking_created(sport: str, package: str):
        """Record a booking creation."""
        BOOKINGS_CREATED.labels(sport=sport, package=package).inc()

    @staticmethod
    def record_booking_transition(field: str, value: str):
        """Record a status or payment status change."""
        BOOKING_TRANSITIONS.labels(field=field, value=value).inc()

    @staticmethod
    def record_price_calculation(sport: str, package: str):
        """Record a server-side quote."""
        PRICE_CALCULATIONS.labels(sport=sport, package=package).inc()

    @staticmethod
    def record_client_price_mismatch():
        """Record a client total outside tolerance."""
        CLIENT_PRICE_MISMATCHES.inc()

    @staticmethod
    def set_active_sessions(count: int):
        """Set the number of live admin sessions."""
        ACTIVE_SESSIONS.set(count)


def get_prometheus_metrics():
    """Get Prometheus metrics for the /metrics endpoint."""
    return generate_latest(REGISTRY)


# Global metrics collector instance
metrics_collector = MetricsCollector()
