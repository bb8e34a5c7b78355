"""
Observability utilities for rabbitmq_tracing.

This module provides the tracer abstraction consumed by the client wrappers
and the standard attribute names applied to messaging spans.

Example:
    >>> from rabbitmq_tracing.observability import create_tracer, SpanKindEnum
    >>>
    >>> tracer = create_tracer("rabbitmq_tracing")
    >>> span = tracer.start_span("send", kind=SpanKindEnum.PRODUCER)
    >>> with tracer.use_span(span):
    ...     pass
    >>> span.end()
"""

from rabbitmq_tracing.observability.attributes import (
    ATTR_ERROR_TYPE,
    ATTR_MESSAGING_BODY_SIZE,
    ATTR_MESSAGING_CONVERSATION_ID,
    ATTR_MESSAGING_DESTINATION,
    ATTR_MESSAGING_MESSAGE_ID,
    ATTR_MESSAGING_OPERATION,
    ATTR_MESSAGING_SYSTEM,
    ATTR_RABBITMQ_CONSUMER_TAG,
    ATTR_RABBITMQ_DELIVERY_TAG,
    ATTR_RABBITMQ_EXCHANGE,
    ATTR_RABBITMQ_REDELIVERED,
    ATTR_RABBITMQ_ROUTING_KEY,
)
from rabbitmq_tracing.observability.tracer import (
    MockTracer,
    NullTracer,
    OpenTelemetryTracer,
    RecordedSpan,
    SpanKindEnum,
    Tracer,
    create_tracer,
)

__all__ = [
    # Tracer (composition-based API)
    "Tracer",
    "NullTracer",
    "OpenTelemetryTracer",
    "MockTracer",
    "RecordedSpan",
    "SpanKindEnum",
    "create_tracer",
    # Attributes - Messaging
    "ATTR_MESSAGING_SYSTEM",
    "ATTR_MESSAGING_DESTINATION",
    "ATTR_MESSAGING_OPERATION",
    "ATTR_MESSAGING_MESSAGE_ID",
    "ATTR_MESSAGING_CONVERSATION_ID",
    "ATTR_MESSAGING_BODY_SIZE",
    # Attributes - RabbitMQ
    "ATTR_RABBITMQ_ROUTING_KEY",
    "ATTR_RABBITMQ_EXCHANGE",
    "ATTR_RABBITMQ_CONSUMER_TAG",
    "ATTR_RABBITMQ_DELIVERY_TAG",
    "ATTR_RABBITMQ_REDELIVERED",
    # Attributes - Error
    "ATTR_ERROR_TYPE",
]
