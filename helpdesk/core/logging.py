"""Logging and tracing setup for the help desk command line."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from logging.config import dictConfig
from typing import Any, Iterator

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from helpdesk.core.config import Settings

ROOT_LOGGER = "helpdesk"
TICKETS_LOGGER = "helpdesk.tickets"

_provider: TracerProvider | None = None


def _parse_headers(header_string: str | None) -> dict[str, str]:
    if not header_string:
        return {}
    headers: dict[str, str] = {}
    for item in header_string.split(","):
        if "=" not in item:
            continue
        key, value = item.split("=", 1)
        headers[key.strip()] = value.strip()
    return headers


def _handler_config(settings: Settings) -> dict[str, Any]:
    if settings.log_file:
        return {
            "class": "logging.FileHandler",
            "formatter": "default",
            "filename": settings.log_file,
            "encoding": "utf-8",
        }
    return {"class": "logging.StreamHandler", "formatter": "default", "stream": "ext://sys.stderr"}


def configure_logging(settings: Settings, *, verbose: bool = False) -> logging.Logger:
    """Attach a handler to the ``helpdesk`` logger family.

    Store and lifecycle messages come from ``helpdesk.tickets``; ``verbose``
    lowers that family to DEBUG so individual loads, saves and ignored update
    values are shown. Output goes to ``settings.log_file`` when set, otherwise
    to stderr so it never mixes with tables printed on stdout.
    """

    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    tickets_level = logging.DEBUG if verbose else level
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"default": {"format": settings.log_format}},
            "handlers": {"helpdesk": _handler_config(settings)},
            "loggers": {
                ROOT_LOGGER: {"handlers": ["helpdesk"], "level": level},
                TICKETS_LOGGER: {"level": tickets_level},
            },
        }
    )
    return logging.getLogger(ROOT_LOGGER)


@contextmanager
def tracing(settings: Settings) -> Iterator[TracerProvider | None]:
    """Export repository spans over OTLP for the duration of one command."""

    global _provider

    if not settings.otel_enabled or _provider is not None:
        yield None
        return

    provider = TracerProvider(resource=Resource(attributes={"service.name": settings.otel_service_name}))
    exporter_kwargs: dict[str, object] = {}
    if settings.otel_exporter_otlp_endpoint:
        exporter_kwargs["endpoint"] = settings.otel_exporter_otlp_endpoint
    headers = _parse_headers(settings.otel_exporter_otlp_headers)
    if headers:
        exporter_kwargs["headers"] = headers
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(**exporter_kwargs)))
    trace.set_tracer_provider(provider)
    _provider = provider
    try:
        yield provider
    finally:
        provider.shutdown()
        _provider = None
