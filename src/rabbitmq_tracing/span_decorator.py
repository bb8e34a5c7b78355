"""Messaging tags applied to publish, delivery and polling receive spans.

``SpanDecorator`` only sets attributes, status and exception events; it never
changes span timing or parents. Subclass it to add application specific
tags and pass the instance to ``TracingChannel``.

Example:
    >>> class TenantSpanDecorator(SpanDecorator):
    ...     def on_deliver(self, span, queue, message):
    ...         super().on_deliver(span, queue, message)
    ...         span.set_attribute("tenant.id", message.headers.get("tenant-id", ""))
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from opentelemetry.trace import Status, StatusCode

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

if TYPE_CHECKING:
    from aio_pika.abc import AbstractIncomingMessage, AbstractMessage
    from opentelemetry.trace import Span

DEFAULT_EXCHANGE_NAME = "amq.default"
"""Name RabbitMQ uses for the nameless default exchange."""

UNKNOWN_QUEUE_NAME = "(unknown)"

OPERATION_PUBLISH = "publish"
OPERATION_PROCESS = "process"
OPERATION_RECEIVE = "receive"


class SpanDecorator:
    """Apply RabbitMQ messaging attributes to spans.

    Args:
        messaging_system: Value of the messaging.system attribute
    """

    def __init__(self, messaging_system: str = "rabbitmq") -> None:
        self.messaging_system = messaging_system

    def on_publish(
        self,
        span: Span | None,
        exchange: str | None,
        routing_key: str | None,
        message: AbstractMessage,
    ) -> None:
        """Tag a producer span before the message is handed to the broker."""
        if span is None:
            return
        self._set_attributes(
            span,
            {
                ATTR_MESSAGING_SYSTEM: self.messaging_system,
                ATTR_MESSAGING_DESTINATION: exchange or DEFAULT_EXCHANGE_NAME,
                ATTR_MESSAGING_OPERATION: OPERATION_PUBLISH,
                ATTR_RABBITMQ_ROUTING_KEY: routing_key,
                ATTR_MESSAGING_MESSAGE_ID: message.message_id,
                ATTR_MESSAGING_CONVERSATION_ID: message.correlation_id,
                ATTR_MESSAGING_BODY_SIZE: _body_size(message),
            },
        )

    def on_deliver(
        self,
        span: Span | None,
        queue: str | None,
        message: AbstractIncomingMessage,
    ) -> None:
        """Tag a consumer span wrapping a pushed delivery."""
        self._on_incoming(span, queue, message, OPERATION_PROCESS)

    def on_receive(
        self,
        span: Span | None,
        queue: str | None,
        message: AbstractIncomingMessage,
    ) -> None:
        """Tag a consumer span recording a pulled message."""
        self._on_incoming(span, queue, message, OPERATION_RECEIVE)

    def on_error(self, span: Span | None, error: BaseException) -> None:
        """Mark a span as failed with ``error``."""
        if span is None:
            return
        span.set_status(Status(StatusCode.ERROR, str(error)))
        span.set_attribute(ATTR_ERROR_TYPE, type(error).__name__)
        span.record_exception(error)

    def _on_incoming(
        self,
        span: Span | None,
        queue: str | None,
        message: AbstractIncomingMessage,
        operation: str,
    ) -> None:
        if span is None:
            return
        exchange = message.exchange
        self._set_attributes(
            span,
            {
                ATTR_MESSAGING_SYSTEM: self.messaging_system,
                ATTR_MESSAGING_DESTINATION: queue or UNKNOWN_QUEUE_NAME,
                ATTR_MESSAGING_OPERATION: operation,
                ATTR_RABBITMQ_EXCHANGE: exchange or DEFAULT_EXCHANGE_NAME,
                ATTR_RABBITMQ_ROUTING_KEY: message.routing_key,
                ATTR_MESSAGING_MESSAGE_ID: message.message_id,
                ATTR_MESSAGING_CONVERSATION_ID: message.correlation_id,
                ATTR_RABBITMQ_CONSUMER_TAG: message.consumer_tag,
                ATTR_RABBITMQ_DELIVERY_TAG: message.delivery_tag,
                ATTR_RABBITMQ_REDELIVERED: message.redelivered,
                ATTR_MESSAGING_BODY_SIZE: _body_size(message),
            },
        )

    @staticmethod
    def _set_attributes(span: Span, attributes: dict[str, Any]) -> None:
        span.set_attributes({key: value for key, value in attributes.items() if value is not None})


def _body_size(message: AbstractMessage) -> int | None:
    body = message.body
    if body is None:
        return None
    return len(body)


__all__ = [
    "DEFAULT_EXCHANGE_NAME",
    "OPERATION_PROCESS",
    "OPERATION_PUBLISH",
    "OPERATION_RECEIVE",
    "SpanDecorator",
    "UNKNOWN_QUEUE_NAME",
]
