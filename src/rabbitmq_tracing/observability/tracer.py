"""
Tracer protocol and implementations used by the tracing client wrappers.

The wrappers never talk to OpenTelemetry's global API directly. They receive
a ``Tracer`` as a dependency, which keeps the interception logic independent
of how the tracer provider is configured and makes it trivial to disable
tracing or to record spans in tests.

Example:
    >>> from rabbitmq_tracing.observability import create_tracer, NullTracer
    >>>
    >>> # Create tracer based on configuration
    >>> tracer = create_tracer("rabbitmq_tracing", enable_tracing=True)
    >>>
    >>> # Or explicitly disable tracing
    >>> tracer = NullTracer()
    >>>
    >>> span = tracer.start_span("send", kind=SpanKindEnum.PRODUCER)
    >>> try:
    ...     with tracer.use_span(span):
    ...         await exchange.publish(message, routing_key="orders")
    ... finally:
    ...     if span:
    ...         span.end()
"""

from __future__ import annotations

import contextlib
from collections.abc import Generator
from contextlib import AbstractContextManager
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from opentelemetry import context as otel_context
from opentelemetry import trace
from opentelemetry.trace import SpanKind as OtelSpanKind

if TYPE_CHECKING:
    from opentelemetry.context import Context
    from opentelemetry.trace import Span, TracerProvider


class SpanKindEnum(Enum):
    """
    Span kinds for distributed tracing.

    Values:
        INTERNAL: Default span kind for internal operations
        PRODUCER: For publishing a message to an exchange
        CONSUMER: For receiving or processing a message from a queue
    """

    INTERNAL = "internal"
    PRODUCER = "producer"
    CONSUMER = "consumer"


_KIND_MAPPING = {
    SpanKindEnum.INTERNAL: OtelSpanKind.INTERNAL,
    SpanKindEnum.PRODUCER: OtelSpanKind.PRODUCER,
    SpanKindEnum.CONSUMER: OtelSpanKind.CONSUMER,
}


@runtime_checkable
class Tracer(Protocol):
    """
    Protocol for tracers consumed by the tracing wrappers.

    Implementations:
    - NullTracer: No-op tracer for when tracing is disabled
    - OpenTelemetryTracer: Wrapper around an OpenTelemetry tracer
    - MockTracer: Records span requests for tests
    """

    @property
    def enabled(self) -> bool:
        """
        Check if tracing is enabled.

        Returns:
            True if tracing is active and will create real spans
        """
        ...

    def start_span(
        self,
        name: str,
        kind: SpanKindEnum = SpanKindEnum.INTERNAL,
        attributes: dict[str, Any] | None = None,
        context: Context | None = None,
    ) -> Span | None:
        """
        Start a new span that must be ended manually.

        Messaging spans outlive a single ``with`` block in the places where
        they are started (the span has to exist before headers are built and
        must be ended after the broker call), so they are started here and
        ended by the caller.

        Args:
            name: Span name (e.g., "send")
            kind: The span kind (PRODUCER, CONSUMER, ...)
            attributes: Span attributes (optional)
            context: Parent context. None means "use the current context",
                    which resolves to the ambient span or to a root span.

        Returns:
            The Span object if tracing is enabled, None otherwise.
            Caller MUST call span.end() when the operation is complete.
        """
        ...

    def use_span(
        self,
        span: Span | None,
        context: Context | None = None,
    ) -> AbstractContextManager[Span | None]:
        """
        Activate a span as the current span for the duration of a block.

        The span is NOT ended when the block exits; activation is released
        on every exit path, including exceptions and cancellation.

        Args:
            span: Span returned by start_span (None is accepted and ignored)
            context: Base context the span is activated in, e.g. the context
                    extracted from a message (keeps its baggage). None means
                    the current context.

        Returns:
            Context manager yielding the span
        """
        ...


class NullTracer:
    """
    No-op tracer implementation for when tracing is disabled.

    The wrappers detect the missing span and forward every call untouched,
    so a channel wrapped with a NullTracer behaves exactly like the raw
    aio-pika channel.

    Example:
        >>> tracer = NullTracer()
        >>> tracer.start_span("send") is None
        True
        >>> tracer.enabled
        False
    """

    @property
    def enabled(self) -> bool:
        """Always returns False for NullTracer."""
        return False

    def start_span(
        self,
        name: str,
        kind: SpanKindEnum = SpanKindEnum.INTERNAL,
        attributes: dict[str, Any] | None = None,
        context: Context | None = None,
    ) -> None:
        """Return None (no-op for disabled tracing)."""
        return None

    @contextlib.contextmanager
    def use_span(
        self,
        span: Span | None,
        context: Context | None = None,
    ) -> Generator[None, None, None]:
        """Activate nothing (yields None)."""
        yield None


class OpenTelemetryTracer:
    """
    OpenTelemetry tracer implementation.

    Wraps the OpenTelemetry tracer API to conform to our Tracer protocol.

    Args:
        tracer_name: Instrumentation scope name (typically the package name)
        tracer_provider: Provider to obtain the tracer from. Defaults to the
            globally configured provider.

    Example:
        >>> tracer = OpenTelemetryTracer("rabbitmq_tracing")
        >>> span = tracer.start_span("send", kind=SpanKindEnum.PRODUCER)
        >>> span.end()
    """

    def __init__(
        self,
        tracer_name: str,
        tracer_provider: TracerProvider | None = None,
    ) -> None:
        """
        Initialize OpenTelemetry tracer.

        Args:
            tracer_name: Instrumentation scope name
            tracer_provider: Optional explicit TracerProvider
        """
        if tracer_provider is None:
            self._tracer = trace.get_tracer(tracer_name)
        else:
            self._tracer = tracer_provider.get_tracer(tracer_name)

    @property
    def enabled(self) -> bool:
        """Always returns True for OpenTelemetryTracer."""
        return True

    def start_span(
        self,
        name: str,
        kind: SpanKindEnum = SpanKindEnum.INTERNAL,
        attributes: dict[str, Any] | None = None,
        context: Context | None = None,
    ) -> Span:
        """
        Start a new span with SpanKind for distributed tracing.

        Args:
            name: Span name
            kind: The span kind (PRODUCER, CONSUMER, etc.)
            attributes: Span attributes (optional)
            context: Optional OpenTelemetry context holding the parent span.
                    When None, the current context is used.

        Returns:
            The OpenTelemetry Span. Caller MUST call span.end().
        """
        otel_kind = _KIND_MAPPING.get(kind, OtelSpanKind.INTERNAL)

        return self._tracer.start_span(
            name,
            kind=otel_kind,
            attributes=attributes or {},
            context=context,
        )

    @contextlib.contextmanager
    def use_span(
        self,
        span: Span | None,
        context: Context | None = None,
    ) -> Generator[Span | None, None, None]:
        """
        Make ``span`` the current span until the block exits.

        The span is set into ``context`` (or the current context), so
        baggage carried by that context stays visible inside the block.
        Exception recording and status handling stay with the caller.
        """
        if span is None:
            yield None
            return
        token = otel_context.attach(trace.set_span_in_context(span, context))
        try:
            yield span
        finally:
            otel_context.detach(token)


@dataclass(frozen=True)
class RecordedSpan:
    """A span request captured by MockTracer."""

    name: str
    kind: SpanKindEnum
    attributes: dict[str, Any] | None
    context: Any | None


class MockTracer:
    """
    Mock tracer for testing that records span information.

    No real spans are created (start_span returns None), so the wrappers
    take their pass-through path while the requested span names, kinds and
    parent contexts are still available for assertions.

    Example:
        >>> tracer = MockTracer()
        >>> tracer.start_span("send", kind=SpanKindEnum.PRODUCER)
        >>> assert tracer.span_names == ["send"]
    """

    def __init__(self) -> None:
        """Initialize MockTracer with empty span list."""
        self.spans: list[RecordedSpan] = []

    @property
    def enabled(self) -> bool:
        """Returns True to enable attribute computation in tests."""
        return True

    @property
    def span_names(self) -> list[str]:
        """Get just the span names for easy assertions."""
        return [span.name for span in self.spans]

    @property
    def span_kinds(self) -> list[SpanKindEnum]:
        """Get just the span kinds for easy assertions."""
        return [span.kind for span in self.spans]

    def clear(self) -> None:
        """Clear recorded spans."""
        self.spans.clear()

    def start_span(
        self,
        name: str,
        kind: SpanKindEnum = SpanKindEnum.INTERNAL,
        attributes: dict[str, Any] | None = None,
        context: Context | None = None,
    ) -> None:
        """Record span and return None (mock spans don't need to be ended)."""
        self.spans.append(RecordedSpan(name, kind, attributes, context))
        return None

    @contextlib.contextmanager
    def use_span(
        self,
        span: Span | None,
        context: Context | None = None,
    ) -> Generator[Span | None, None, None]:
        """Yield the span unchanged."""
        yield span


def create_tracer(
    name: str,
    enable_tracing: bool = True,
    tracer_provider: TracerProvider | None = None,
) -> Tracer:
    """
    Factory function to create the appropriate tracer.

    Args:
        name: Tracer name (instrumentation scope)
        enable_tracing: Whether tracing should be enabled (default True)
        tracer_provider: Optional explicit TracerProvider

    Returns:
        OpenTelemetryTracer if enabled, NullTracer otherwise

    Example:
        >>> def __init__(self, tracer: Tracer | None = None, enable_tracing: bool = True):
        ...     self._tracer = tracer or create_tracer(__name__, enable_tracing)
    """
    if enable_tracing:
        return OpenTelemetryTracer(name, tracer_provider)
    return NullTracer()


__all__ = [
    "Tracer",
    "NullTracer",
    "OpenTelemetryTracer",
    "MockTracer",
    "RecordedSpan",
    "SpanKindEnum",
    "create_tracer",
]
