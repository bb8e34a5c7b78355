"""Tracing wrappers for aio-pika queues (the consumer side).

- ``consume`` registers the callback through a ``TracingConsumer``
- ``get`` records a short CONSUMER span for each fetched message
- ``iterator`` / ``async for`` records the same span for each message the
  iterator yields

Every other queue attribute or method (``bind``, ``unbind``, ``purge``,
``delete``, ``cancel``, ``name``, ...) is forwarded untouched.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from rabbitmq_tracing.consumer import ConsumerCallback, TracingConsumer
from rabbitmq_tracing.facade import TracingWrapper
from rabbitmq_tracing.spans import build_and_finish_child_span

if TYPE_CHECKING:
    from types import TracebackType

    from aio_pika.abc import AbstractIncomingMessage, TimeoutType

logger = logging.getLogger(__name__)


class TracingQueue(TracingWrapper):
    """Queue wrapper that traces deliveries and polled messages.

    Constructor arguments are those of TracingWrapper, with the aio-pika
    queue as the wrapped object.

    Example:
        >>> queue = TracingQueue(await channel.declare_queue("orders"), tracer)
        >>> await queue.consume(on_message)
        >>> message = await queue.get(fail=False)
    """

    async def consume(
        self,
        callback: ConsumerCallback,
        no_ack: bool = False,
        exclusive: bool = False,
        arguments: dict[str, Any] | None = None,
        consumer_tag: str | None = None,
        timeout: TimeoutType = None,
    ) -> str:
        """Start consuming with ``callback`` wrapped in a TracingConsumer.

        Returns:
            The consumer tag returned by the wrapped queue
        """
        return await self._wrapped.consume(
            self._trace_callback(callback),
            no_ack=no_ack,
            exclusive=exclusive,
            arguments=arguments,
            consumer_tag=consumer_tag,
            timeout=timeout,
        )

    async def get(
        self,
        *,
        no_ack: bool = False,
        fail: bool = True,
        timeout: TimeoutType = 5,
    ) -> AbstractIncomingMessage | None:
        """Fetch one message and record a receive span for it.

        No span is created when the queue is empty (None returned or
        QueueEmpty raised) or when the fetch fails.
        """
        message = await self._wrapped.get(no_ack=no_ack, fail=fail, timeout=timeout)
        if message is not None:
            self._record_receive(message)
        return message

    def iterator(self, **kwargs: Any) -> TracingQueueIterator:
        """Return a queue iterator that records a receive span per message."""
        return TracingQueueIterator(self._wrapped.iterator(**kwargs), self.name, **self._child_options())

    def __aiter__(self) -> TracingQueueIterator:
        return self.iterator()

    def _trace_callback(self, callback: ConsumerCallback) -> TracingConsumer:
        if isinstance(callback, TracingConsumer):
            return callback.for_queue(self.name)
        return TracingConsumer(callback, queue_name=self.name, **self._child_options())

    def _record_receive(self, message: AbstractIncomingMessage) -> None:
        build_and_finish_child_span(
            self._tracer,
            self._config.receive_span_name,
            self.name,
            message,
            self._span_decorator,
        )
        logger.debug(
            "Traced receive",
            extra={"queue": self.name, "message_id": message.message_id},
        )


class TracingQueueIterator(TracingWrapper):
    """Queue iterator wrapper that records a receive span per yielded message.

    Args:
        iterator: The aio-pika queue iterator to wrap
        queue_name: Name of the iterated queue
        tracer, config, span_decorator: As for TracingWrapper
    """

    def __init__(self, iterator: Any, queue_name: str | None, **options: Any) -> None:
        super().__init__(iterator, **options)
        self._queue_name = queue_name

    def __aiter__(self) -> TracingQueueIterator:
        return self

    async def __anext__(self) -> AbstractIncomingMessage:
        message = await self._wrapped.__anext__()
        build_and_finish_child_span(
            self._tracer,
            self._config.receive_span_name,
            self._queue_name,
            message,
            self._span_decorator,
        )
        return message

    async def __aenter__(self) -> TracingQueueIterator:
        await self._wrapped.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> Any:
        return await self._wrapped.__aexit__(exc_type, exc_val, exc_tb)


__all__ = [
    "TracingQueue",
    "TracingQueueIterator",
]
