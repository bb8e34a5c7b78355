"""
Shared pytest fixtures for the rabbitmq_tracing tests.

This module provides:
- OpenTelemetry fixtures (span_exporter, tracer_provider, otel_tracer,
  get_spans, find_span) backed by an in-memory span exporter
- Wrapped aio-pika doubles (mock_exchange, mock_queue, mock_channel)
- An incoming message factory (make_incoming_message)
- A remote parent context factory (remote_parent_headers)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from opentelemetry.sdk.trace import ReadableSpan, TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from rabbitmq_tracing.observability import OpenTelemetryTracer
from rabbitmq_tracing.propagation import with_trace_headers

# ============================================================================
# Incoming message double
# ============================================================================


@dataclass
class FakeIncomingMessage:
    """Stand-in for aio_pika.IncomingMessage with the attributes the wrappers read."""

    body: bytes = b"payload"
    headers: dict[str, Any] = field(default_factory=dict)
    exchange: str | None = "orders"
    routing_key: str | None = "orders.created"
    message_id: str | None = "msg-1"
    correlation_id: str | None = None
    consumer_tag: str | None = "ctag-1"
    delivery_tag: int | None = 1
    redelivered: bool | None = False


# ============================================================================
# OpenTelemetry Fixtures
# ============================================================================


@pytest.fixture
def span_exporter() -> InMemorySpanExporter:
    """In-memory exporter capturing every finished span of a test."""
    return InMemorySpanExporter()


@pytest.fixture
def tracer_provider(span_exporter: InMemorySpanExporter) -> TracerProvider:
    """
    TracerProvider exporting synchronously into span_exporter.

    The provider is passed explicitly to the tracers under test, so the
    global OpenTelemetry provider is never touched.
    """
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(span_exporter))
    return provider


@pytest.fixture
def otel_tracer(tracer_provider: TracerProvider) -> OpenTelemetryTracer:
    """Tracer protocol implementation recording into span_exporter."""
    return OpenTelemetryTracer("rabbitmq_tracing.tests", tracer_provider)


@pytest.fixture
def app_tracer(tracer_provider: TracerProvider) -> Any:
    """Raw OpenTelemetry tracer used to create application (ambient) spans."""
    return tracer_provider.get_tracer("application")


@pytest.fixture
def get_spans(span_exporter: InMemorySpanExporter) -> Callable[[], list[ReadableSpan]]:
    """
    Helper fixture to retrieve finished spans from the exporter.

    Example:
        >>> def test_spans(get_spans):
        ...     spans = get_spans()
        ...     assert len(spans) > 0
    """

    def _get_spans() -> list[ReadableSpan]:
        return list(span_exporter.get_finished_spans())

    return _get_spans


@pytest.fixture
def find_span(
    get_spans: Callable[[], list[ReadableSpan]],
) -> Callable[[str], ReadableSpan | None]:
    """Helper fixture to find a finished span by exact name."""

    def _find_span(name: str) -> ReadableSpan | None:
        return next((s for s in get_spans() if s.name == name), None)

    return _find_span


@pytest.fixture
def remote_parent_headers(app_tracer: Any) -> Callable[[], tuple[dict[str, Any], Any]]:
    """
    Factory producing headers that carry the context of an upstream span.

    Returns:
        Callable returning (headers, span_context) where span_context is the
        context the headers were built from
    """

    def _make() -> tuple[dict[str, Any], Any]:
        upstream = app_tracer.start_span("upstream")
        headers = with_trace_headers({}, upstream)
        upstream.end()
        return headers, upstream.get_span_context()

    return _make


# ============================================================================
# aio-pika doubles
# ============================================================================


@pytest.fixture
def make_incoming_message() -> Callable[..., FakeIncomingMessage]:
    """Factory for incoming messages (keyword arguments override defaults)."""

    def _make(**kwargs: Any) -> FakeIncomingMessage:
        return FakeIncomingMessage(**kwargs)

    return _make


@pytest.fixture
def mock_exchange() -> MagicMock:
    """Mock aio-pika exchange named 'orders'."""
    exchange = MagicMock()
    exchange.name = "orders"
    exchange.publish = AsyncMock(return_value=None)
    exchange.bind = AsyncMock(return_value="bind-ok")
    exchange.unbind = AsyncMock(return_value="unbind-ok")
    exchange.delete = AsyncMock(return_value="delete-ok")
    return exchange


@pytest.fixture
def mock_queue() -> MagicMock:
    """Mock aio-pika queue named 'orders.q'."""
    queue = MagicMock()
    queue.name = "orders.q"
    queue.consume = AsyncMock(return_value="ctag-1")
    queue.get = AsyncMock(return_value=None)
    queue.cancel = AsyncMock(return_value=None)
    queue.bind = AsyncMock(return_value="bind-ok")
    queue.purge = AsyncMock(return_value="purge-ok")
    queue.delete = AsyncMock(return_value="delete-ok")
    return queue


@pytest.fixture
def mock_channel(mock_exchange: MagicMock, mock_queue: MagicMock) -> MagicMock:
    """Mock aio-pika channel handing out mock_exchange and mock_queue."""
    channel = MagicMock()
    default_exchange = MagicMock()
    default_exchange.name = ""
    default_exchange.publish = AsyncMock(return_value=None)
    channel.default_exchange = default_exchange
    channel.declare_exchange = AsyncMock(return_value=mock_exchange)
    channel.get_exchange = AsyncMock(return_value=mock_exchange)
    channel.declare_queue = AsyncMock(return_value=mock_queue)
    channel.get_queue = AsyncMock(return_value=mock_queue)
    channel.set_qos = AsyncMock(return_value="qos-ok")
    channel.queue_delete = AsyncMock(return_value="queue-delete-ok")
    channel.exchange_delete = AsyncMock(return_value="exchange-delete-ok")
    channel.close = AsyncMock(return_value=None)
    channel.is_closed = False
    channel.number = 1
    return channel
