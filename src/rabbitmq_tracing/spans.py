"""Span lifecycle helpers shared by the producer and consumer wrappers.

Every helper here contains failures raised by the tracer, the propagator or
a span decorator: they are logged and swallowed so that tracing can never
change the outcome of a broker call.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Generator, Mapping
from typing import TYPE_CHECKING, Any

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from rabbitmq_tracing.observability.tracer import SpanKindEnum
from rabbitmq_tracing.propagation import extract_context, has_remote_parent

if TYPE_CHECKING:
    from aio_pika.abc import AbstractIncomingMessage
    from opentelemetry.context import Context
    from opentelemetry.trace import Span

    from rabbitmq_tracing.observability.tracer import Tracer
    from rabbitmq_tracing.span_decorator import SpanDecorator

logger = logging.getLogger(__name__)


def resolve_parent(headers: Mapping[str, Any] | None) -> Context | None:
    """Pick the parent context for a new messaging span.

    A span context carried in the message headers wins. Otherwise the
    ambient span of the current task is the parent, or a new root span is
    started when there is none. Baggage found in the headers is kept in the
    returned context either way.

    Returns:
        The parent context, or None to let the tracer use the current one
    """
    context = extract_context(headers)
    if context is None or has_remote_parent(context):
        return context
    # Baggage only: keep the ambient span as parent.
    return trace.set_span_in_context(trace.get_current_span(), context)


def start_span(
    tracer: Tracer,
    name: str,
    kind: SpanKindEnum,
    context: Context | None = None,
) -> Span | None:
    """Start a span, returning None instead of raising on tracer failure."""
    try:
        return tracer.start_span(name, kind=kind, context=context)
    except Exception:
        logger.warning("Failed to start %s span %r", kind.value, name, exc_info=True)
        return None


@contextlib.contextmanager
def activate(
    tracer: Tracer,
    span: Span | None,
    context: Context | None = None,
) -> Generator[None, None, None]:
    """Make ``span`` the ambient span for the body of the ``with`` block.

    ``context`` is the base context the span is activated in (the parent
    context the span was started from, so its baggage stays visible).

    The activation is released on every exit path. A tracer that fails to
    activate leaves the block running without an ambient span.
    """
    with contextlib.ExitStack() as stack:
        try:
            stack.enter_context(tracer.use_span(span, context=context))
        except Exception:
            logger.warning("Failed to activate span", exc_info=True)
        yield


def decorate(decorator_call: Any, *args: Any) -> None:
    """Run a span decorator hook, logging instead of raising on failure."""
    try:
        decorator_call(*args)
    except Exception:
        logger.warning(
            "Span decorator %s failed",
            getattr(decorator_call, "__name__", decorator_call),
            exc_info=True,
        )


def mark_ok(span: Span | None) -> None:
    """Set an OK status on a span that completed normally."""
    if span is None:
        return
    try:
        span.set_status(Status(StatusCode.OK))
    except Exception:
        logger.warning("Failed to set span status", exc_info=True)


def mark_error(span: Span | None, error: BaseException, span_decorator: SpanDecorator) -> None:
    """Tag a span as failed through the span decorator."""
    if span is None:
        return
    decorate(span_decorator.on_error, span, error)


def finish_span(span: Span | None) -> None:
    """End a span, logging instead of raising on failure."""
    if span is None:
        return
    try:
        span.end()
    except Exception:
        logger.warning("Failed to finish span", exc_info=True)


def build_and_finish_child_span(
    tracer: Tracer,
    name: str,
    queue: str | None,
    message: AbstractIncomingMessage,
    span_decorator: SpanDecorator,
) -> None:
    """Record a zero-work consumer span for a message fetched by polling.

    The span is a child of the context found in the message headers (or of
    the ambient span, or a root) and is ended right away. It is never
    activated: the caller processes the returned message outside of it.
    """
    span = start_span(
        tracer,
        name,
        SpanKindEnum.CONSUMER,
        context=resolve_parent(message.headers),
    )
    if span is None:
        return
    try:
        decorate(span_decorator.on_receive, span, queue, message)
        mark_ok(span)
    finally:
        finish_span(span)


__all__ = [
    "activate",
    "build_and_finish_child_span",
    "decorate",
    "finish_span",
    "mark_error",
    "mark_ok",
    "resolve_parent",
    "start_span",
]
