"""Tracing adapter for aio-pika consumer callbacks.

``TracingQueue.consume`` registers a ``TracingConsumer`` in place of the
application's callback. For every delivery the adapter starts a CONSUMER
span (child of the context found in the message headers), makes it the
ambient span while the callback runs and ends it when the callback returns,
raises or is cancelled.

The adapter holds no per-delivery state, so deliveries processed
concurrently by aio-pika never share a span.
"""

from __future__ import annotations

import functools
import inspect
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rabbitmq_tracing.config import TracingConfig
from rabbitmq_tracing.observability.tracer import SpanKindEnum
from rabbitmq_tracing.span_decorator import SpanDecorator
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
    from aio_pika.abc import AbstractIncomingMessage

    from rabbitmq_tracing.observability.tracer import Tracer

logger = logging.getLogger(__name__)

ConsumerCallback = Callable[["AbstractIncomingMessage"], Any]


async def _invoke(callback: ConsumerCallback, message: AbstractIncomingMessage) -> Any:
    result = callback(message)
    if inspect.isawaitable(result):
        result = await result
    return result


class TracingConsumer:
    """Wrap a consumer callback so each delivery runs inside a span.

    Args:
        callback: The application's consumer callback (async or sync)
        tracer: Tracer used to create consumer spans
        queue_name: Name of the queue the callback consumes from
        config: Tracing configuration (defaults to TracingConfig())
        span_decorator: Decorator applying messaging tags

    Example:
        >>> async def on_message(message):
        ...     async with message.process():
        ...         handle(message.body)
        >>> await raw_queue.consume(TracingConsumer(on_message, tracer, "orders"))
    """

    def __init__(
        self,
        callback: ConsumerCallback,
        tracer: Tracer,
        queue_name: str | None,
        *,
        config: TracingConfig | None = None,
        span_decorator: SpanDecorator | None = None,
    ) -> None:
        self._callback = callback
        self._tracer = tracer
        self._queue_name = queue_name
        self._config = config or TracingConfig()
        self._span_decorator = span_decorator or SpanDecorator(self._config.messaging_system)
        functools.update_wrapper(self, callback, updated=())

    @property
    def callback(self) -> ConsumerCallback:
        """The wrapped application callback."""
        return self._callback

    def for_queue(self, queue_name: str) -> TracingConsumer:
        """Return a consumer that reports deliveries from ``queue_name``.

        ``self`` is returned when it already targets that queue; otherwise a
        new consumer wraps the same callback with the same tracer, config and
        span decorator.
        """
        if queue_name == self._queue_name:
            return self
        return TracingConsumer(
            self._callback,
            self._tracer,
            queue_name,
            config=self._config,
            span_decorator=self._span_decorator,
        )

    async def __call__(self, message: AbstractIncomingMessage) -> Any:
        """Deliver ``message`` to the wrapped callback inside a CONSUMER span."""
        parent = resolve_parent(message.headers)
        span = start_span(
            self._tracer,
            self._config.receive_span_name,
            SpanKindEnum.CONSUMER,
            context=parent,
        )
        if span is None:
            return await _invoke(self._callback, message)

        decorate(self._span_decorator.on_deliver, span, self._queue_name, message)
        try:
            with activate(self._tracer, span, parent):
                result = await _invoke(self._callback, message)
        except Exception as e:
            mark_error(span, e, self._span_decorator)
            logger.debug(
                "Traced delivery failed",
                extra={
                    "queue": self._queue_name,
                    "message_id": message.message_id,
                    "error_type": type(e).__name__,
                },
            )
            raise
        else:
            mark_ok(span)
            logger.debug(
                "Traced delivery",
                extra={
                    "queue": self._queue_name,
                    "message_id": message.message_id,
                    "routing_key": message.routing_key,
                },
            )
            return result
        finally:
            finish_span(span)

    def __repr__(self) -> str:
        return f"<TracingConsumer queue={self._queue_name!r} callback={self._callback!r}>"


__all__ = [
    "ConsumerCallback",
    "TracingConsumer",
]
