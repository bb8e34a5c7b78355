"""
rabbitmq_tracing - OpenTelemetry trace propagation for aio-pika.

This library provides:
- Drop-in tracing wrappers for aio-pika connections, channels, exchanges
  and queues
- PRODUCER spans around publishes, with the trace context carried in the
  AMQP message headers
- CONSUMER spans around consumer callbacks and polled messages, parented
  to the producer's context
- Pass-through of every other client operation
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("rabbitmq-tracing")
except PackageNotFoundError:
    # Package not installed (running from source without install)
    __version__ = "0.0.0.dev0"

from rabbitmq_tracing.channel import TracingChannel
from rabbitmq_tracing.config import TracingConfig
from rabbitmq_tracing.connection import TracingConnection, connect, connect_robust
from rabbitmq_tracing.consumer import TracingConsumer
from rabbitmq_tracing.exceptions import RabbitMQTracingError, TracingConfigError
from rabbitmq_tracing.exchange import TracingExchange
from rabbitmq_tracing.observability import (
    MockTracer,
    NullTracer,
    OpenTelemetryTracer,
    SpanKindEnum,
    Tracer,
    create_tracer,
)
from rabbitmq_tracing.propagation import (
    extract_context,
    inject_context,
    reserved_header_keys,
    with_trace_headers,
)
from rabbitmq_tracing.queue import TracingQueue, TracingQueueIterator
from rabbitmq_tracing.span_decorator import DEFAULT_EXCHANGE_NAME, SpanDecorator

__all__ = [
    "__version__",
    # Wrappers
    "TracingConnection",
    "TracingChannel",
    "TracingExchange",
    "TracingQueue",
    "TracingQueueIterator",
    "TracingConsumer",
    "connect",
    "connect_robust",
    # Configuration
    "TracingConfig",
    # Span tagging
    "SpanDecorator",
    "DEFAULT_EXCHANGE_NAME",
    # Propagation
    "extract_context",
    "inject_context",
    "reserved_header_keys",
    "with_trace_headers",
    # Tracer
    "Tracer",
    "NullTracer",
    "OpenTelemetryTracer",
    "MockTracer",
    "SpanKindEnum",
    "create_tracer",
    # Exceptions
    "RabbitMQTracingError",
    "TracingConfigError",
]
