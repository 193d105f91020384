import logging
import uuid

import structlog
from fastapi import FastAPI, Request
from prometheus_fastapi_instrumentator import Instrumentator

# OpenTelemetry
from opentelemetry import trace
from opentelemetry.sdk.resources import Resource, SERVICE_NAME
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from shared.config.settings import LOG_LEVEL, OTLP_ENDPOINT

REQUEST_ID_HEADER = "X-Request-ID"


def add_otel_ids(logger, log_method, event_dict):
    """Adds the active trace/span ids so log lines can be joined with traces."""
    span = trace.get_current_span()
    if span.is_recording():
        ctx = span.get_span_context()
        event_dict["trace_id"] = trace.format_trace_id(ctx.trace_id)
        event_dict["span_id"] = trace.format_span_id(ctx.span_id)
    return event_dict


def service_tagger(service_name: str):
    def add_service(logger, log_method, event_dict):
        event_dict.setdefault("service", service_name)
        return event_dict
    return add_service


def configure_logging(level: str = LOG_LEVEL, service_name: str = "eshop_admin"):
    """JSON logs on stdout; request-scoped fields come in through contextvars."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            service_tagger(service_name),
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            add_otel_ids,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level, logging.INFO)),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_request_context(app: FastAPI):
    """Binds request_id, method and path to every log line written while serving a request."""

    @app.middleware("http")
    async def bind_request_context(request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        with structlog.contextvars.bound_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        ):
            response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def configure_tracing(app: FastAPI, service_name: str, endpoint: str = OTLP_ENDPOINT):
    # Off unless an OTLP collector is configured
    if not endpoint:
        return

    resource = Resource.create({SERVICE_NAME: service_name})
    provider = TracerProvider(resource=resource)
    trace.set_tracer_provider(provider)

    exporter = OTLPSpanExporter(endpoint=endpoint, insecure=True)
    provider.add_span_processor(BatchSpanProcessor(exporter))

    FastAPIInstrumentor.instrument_app(app)


def configure_metrics(app: FastAPI):
    # HTTP latency and status codes next to the eshop_* business counters, at /metrics
    Instrumentator(excluded_handlers=["/metrics", "/health"]).instrument(app).expose(
        app, include_in_schema=False
    )


def setup_observability(app: FastAPI, service_name: str):
    """
    Bootstraps logging, request context, tracing and metrics for the app.
    Call once in main.py, before any router is included.
    """
    configure_logging(service_name=service_name)
    configure_request_context(app)
    configure_tracing(app, service_name)
    configure_metrics(app)
