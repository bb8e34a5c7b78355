"""Tracing wrapper for aio-pika exchanges (the producer side).

``TracingExchange.publish`` starts a PRODUCER span, propagates its context in
a copy of the message with extended headers and ends the span once the
wrapped publish returns or raises. Every other exchange attribute or method
(``bind``, ``unbind``, ``delete``, ``name``, ...) is forwarded untouched.

Example:
    >>> exchange = TracingExchange(await channel.declare_exchange("orders"), tracer)
    >>> await exchange.publish(Message(b"{}"), routing_key="orders.created")
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from aio_pika import Message

from rabbitmq_tracing.facade import TracingWrapper
from rabbitmq_tracing.observability.tracer import SpanKindEnum
from rabbitmq_tracing.propagation import with_trace_headers
from rabbitmq_tracing.spans import (
    activate,
    decorate,
    finish_span,
    mark_error,
    mark_ok,
    resolve_parent,
    start_span,
)

if TYPE_CHECKING:
    from aio_pika.abc import AbstractMessage, TimeoutType
    from opentelemetry.context import Context
    from opentelemetry.trace import Span

logger = logging.getLogger(__name__)


class TracingExchange(TracingWrapper):
    """Exchange wrapper that traces ``publish``.

    Constructor arguments are those of TracingWrapper, with the aio-pika
    exchange as the wrapped object.
    """

    async def publish(
        self,
        message: AbstractMessage,
        routing_key: str,
        *,
        mandatory: bool = True,
        immediate: bool = False,
        timeout: TimeoutType = None,
    ) -> Any:
        """Publish ``message`` inside a PRODUCER span.

        The span brackets only the local publish call. Errors raised by the
        wrapped exchange are recorded on the span and re-raised unchanged.

        Returns:
            Whatever the wrapped exchange's publish returns (the publisher
            confirmation frame, or None)
        """
        parent = resolve_parent(message.headers) if self._config.use_message_context else None
        span = self._start_publish_span(message, routing_key, parent)
        if span is None:
            return await self._wrapped.publish(
                message,
                routing_key,
                mandatory=mandatory,
                immediate=immediate,
                timeout=timeout,
            )

        try:
            with activate(self._tracer, span, parent):
                traced_message = self._with_trace_context(message, span, parent)
                result = await self._wrapped.publish(
                    traced_message,
                    routing_key,
                    mandatory=mandatory,
                    immediate=immediate,
                    timeout=timeout,
                )
        except Exception as e:
            mark_error(span, e, self._span_decorator)
            logger.debug(
                "Traced publish failed",
                extra={
                    "exchange": self._exchange_name(),
                    "routing_key": routing_key,
                    "error_type": type(e).__name__,
                },
            )
            raise
        else:
            mark_ok(span)
            logger.debug(
                "Traced publish",
                extra={
                    "exchange": self._exchange_name(),
                    "routing_key": routing_key,
                    "message_id": message.message_id,
                },
            )
            return result
        finally:
            finish_span(span)

    def _start_publish_span(
        self,
        message: AbstractMessage,
        routing_key: str,
        parent: Context | None,
    ) -> Span | None:
        span = start_span(
            self._tracer,
            self._config.publish_span_name,
            SpanKindEnum.PRODUCER,
            context=parent,
        )
        if span is not None:
            decorate(
                self._span_decorator.on_publish,
                span,
                self._exchange_name(),
                routing_key,
                message,
            )
        return span

    def _with_trace_context(
        self,
        message: AbstractMessage,
        span: Span,
        parent: Context | None,
    ) -> AbstractMessage:
        """Copy ``message`` with the span context added to its headers.

        Baggage is taken from ``parent`` when given, otherwise from the
        current context.

        The caller's message and header table are left untouched; if the copy
        cannot be built the original message is published as is.
        """
        try:
            return Message(
                body=message.body,
                headers=with_trace_headers(message.headers, span, parent),
                content_type=message.content_type,
                content_encoding=message.content_encoding,
                delivery_mode=message.delivery_mode,
                priority=message.priority,
                correlation_id=message.correlation_id,
                reply_to=message.reply_to,
                expiration=message.expiration,
                message_id=message.message_id,
                timestamp=message.timestamp,
                type=message.type,
                user_id=message.user_id,
                app_id=message.app_id,
            )
        except Exception:
            logger.warning("Failed to add trace context to outgoing message", exc_info=True)
            return message

    def _exchange_name(self) -> str | None:
        return getattr(self._wrapped, "name", None)


__all__ = [
    "TracingExchange",
]
