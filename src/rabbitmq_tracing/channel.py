"""Tracing wrapper for aio-pika channels.

``TracingChannel`` is a drop-in replacement for an aio-pika channel. The only
operations it changes are the ones handing out exchanges and queues, whose
results are wrapped so that publishing, consuming and polling are traced.
QoS, transactions, deletion, close callbacks, publisher confirms and
everything else the channel offers are forwarded verbatim.

Example:
    >>> from rabbitmq_tracing import TracingChannel
    >>>
    >>> channel = TracingChannel(await connection.channel())
    >>> queue = await channel.declare_queue("orders", durable=True)
    >>> await channel.default_exchange.publish(Message(b"{}"), routing_key="orders")
    >>> await queue.consume(on_message)
"""

from __future__ import annotations

from collections.abc import Generator
from typing import TYPE_CHECKING, Any

from rabbitmq_tracing.exchange import TracingExchange
from rabbitmq_tracing.facade import TracingWrapper
from rabbitmq_tracing.queue import TracingQueue

if TYPE_CHECKING:
    from types import TracebackType

    from aio_pika.abc import AbstractExchange, AbstractQueue


class TracingChannel(TracingWrapper):
    """Channel wrapper handing out tracing exchanges and queues.

    Constructor arguments are those of TracingWrapper, with the aio-pika
    channel as the wrapped object. The tracer, configuration and span
    decorator are shared with every exchange and queue obtained from the
    channel.
    """

    @property
    def default_exchange(self) -> TracingExchange:
        """The channel's default exchange, traced."""
        return self._wrap_exchange(self._wrapped.default_exchange)

    async def declare_exchange(self, *args: Any, **kwargs: Any) -> TracingExchange:
        """Declare an exchange on the wrapped channel and trace its publishes."""
        return self._wrap_exchange(await self._wrapped.declare_exchange(*args, **kwargs))

    async def get_exchange(self, *args: Any, **kwargs: Any) -> TracingExchange:
        """Look up an exchange on the wrapped channel and trace its publishes."""
        return self._wrap_exchange(await self._wrapped.get_exchange(*args, **kwargs))

    async def declare_queue(self, *args: Any, **kwargs: Any) -> TracingQueue:
        """Declare a queue on the wrapped channel and trace its consumers."""
        return self._wrap_queue(await self._wrapped.declare_queue(*args, **kwargs))

    async def get_queue(self, *args: Any, **kwargs: Any) -> TracingQueue:
        """Look up a queue on the wrapped channel and trace its consumers."""
        return self._wrap_queue(await self._wrapped.get_queue(*args, **kwargs))

    def __await__(self) -> Generator[Any, None, TracingChannel]:
        yield from self._wrapped.__await__()
        return self

    async def __aenter__(self) -> TracingChannel:
        await self._wrapped.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> Any:
        return await self._wrapped.__aexit__(exc_type, exc_val, exc_tb)

    def _wrap_exchange(self, exchange: AbstractExchange) -> TracingExchange:
        if isinstance(exchange, TracingExchange):
            return exchange
        return TracingExchange(exchange, **self._child_options())

    def _wrap_queue(self, queue: AbstractQueue) -> TracingQueue:
        if isinstance(queue, TracingQueue):
            return queue
        return TracingQueue(queue, **self._child_options())


__all__ = [
    "TracingChannel",
]
