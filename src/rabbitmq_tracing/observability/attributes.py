"""
Standard span attributes for traced RabbitMQ operations.

This module defines the attribute names applied by the span decorator.
They follow one generation of the OpenTelemetry messaging semantic
conventions (``messaging.destination.name`` and ``messaging.operation``,
without the older flat ``messaging.destination_kind`` style keys). RabbitMQ
specific details live under ``messaging.rabbitmq.*``.

Example:
    >>> from rabbitmq_tracing.observability.attributes import (
    ...     ATTR_MESSAGING_DESTINATION,
    ...     ATTR_MESSAGING_SYSTEM,
    ... )
    >>>
    >>> span.set_attribute(ATTR_MESSAGING_SYSTEM, "rabbitmq")
    >>> span.set_attribute(ATTR_MESSAGING_DESTINATION, "orders")
"""

# =============================================================================
# Messaging Attributes (OpenTelemetry Semantic Conventions)
# =============================================================================

ATTR_MESSAGING_SYSTEM = "messaging.system"
"""Messaging system identifier (e.g., 'rabbitmq')."""

ATTR_MESSAGING_DESTINATION = "messaging.destination.name"
"""Destination exchange (publish) or queue (consume) name."""

ATTR_MESSAGING_OPERATION = "messaging.operation"
"""Messaging operation type ('publish', 'process' or 'receive')."""

ATTR_MESSAGING_MESSAGE_ID = "messaging.message.id"
"""AMQP message-id property (string)."""

ATTR_MESSAGING_CONVERSATION_ID = "messaging.message.conversation_id"
"""AMQP correlation-id property (string)."""

ATTR_MESSAGING_BODY_SIZE = "messaging.message.body.size"
"""Size of the message body in bytes (integer)."""

# =============================================================================
# RabbitMQ Attributes
# =============================================================================

ATTR_RABBITMQ_ROUTING_KEY = "messaging.rabbitmq.destination.routing_key"
"""Routing key the message was published with (string)."""

ATTR_RABBITMQ_EXCHANGE = "messaging.rabbitmq.exchange"
"""Exchange a delivered message was originally published to (string)."""

ATTR_RABBITMQ_CONSUMER_TAG = "messaging.rabbitmq.consumer_tag"
"""Consumer tag of the subscription that received the message (string)."""

ATTR_RABBITMQ_DELIVERY_TAG = "messaging.rabbitmq.message.delivery_tag"
"""Channel scoped delivery tag (integer)."""

ATTR_RABBITMQ_REDELIVERED = "messaging.rabbitmq.redelivered"
"""Whether the broker flagged the delivery as a redelivery (boolean)."""

# =============================================================================
# Error Attributes
# =============================================================================

ATTR_ERROR_TYPE = "error.type"
"""Type of error encountered (exception class name)."""

# =============================================================================
# Module Exports
# =============================================================================

__all__ = [
    # Messaging (OTEL semantic)
    "ATTR_MESSAGING_SYSTEM",
    "ATTR_MESSAGING_DESTINATION",
    "ATTR_MESSAGING_OPERATION",
    "ATTR_MESSAGING_MESSAGE_ID",
    "ATTR_MESSAGING_CONVERSATION_ID",
    "ATTR_MESSAGING_BODY_SIZE",
    # RabbitMQ
    "ATTR_RABBITMQ_ROUTING_KEY",
    "ATTR_RABBITMQ_EXCHANGE",
    "ATTR_RABBITMQ_CONSUMER_TAG",
    "ATTR_RABBITMQ_DELIVERY_TAG",
    "ATTR_RABBITMQ_REDELIVERED",
    # Error
    "ATTR_ERROR_TYPE",
]
