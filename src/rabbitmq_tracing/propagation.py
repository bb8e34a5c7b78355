"""Trace context propagation through AMQP message headers.

The globally configured OpenTelemetry text map propagator (W3C Trace Context
and Baggage by default) decides which header keys carry the context. This
module only adapts AMQP header tables to it:

- values received from the broker may be ``bytes`` (AMQP long strings) and
  are decoded before the propagator sees them
- outgoing headers are always written into a fresh dict, so the caller's
  header table is never mutated
- baggage travels next to the span context, and headers carrying only
  baggage still produce a context
- propagator failures are logged and swallowed; a missing or unreadable
  context is reported as ``None``

Example:
    >>> headers = with_trace_headers(message.headers, span)
    >>> context = extract_context(incoming.headers)
    >>> if context is None:
    ...     pass  # fall back to the ambient span or start a root span
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from typing import TYPE_CHECKING, Any

from opentelemetry import baggage, propagate, trace
from opentelemetry.context import Context
from opentelemetry.propagators.textmap import Getter, Setter

if TYPE_CHECKING:
    from opentelemetry.trace import Span

logger = logging.getLogger(__name__)


class HeadersGetter(Getter[Mapping[str, Any]]):
    """Read propagation fields from an AMQP header table."""

    def get(self, carrier: Mapping[str, Any], key: str) -> list[str] | None:
        value = carrier.get(key)
        if value is None:
            return None
        if isinstance(value, (list, tuple)):
            return [_to_text(item) for item in value]
        return [_to_text(value)]

    def keys(self, carrier: Mapping[str, Any]) -> list[str]:
        return [key for key in carrier if isinstance(key, str)]


class HeadersSetter(Setter[MutableMapping[str, Any]]):
    """Write propagation fields into an AMQP header table."""

    def set(self, carrier: MutableMapping[str, Any], key: str, value: str) -> None:
        carrier[key] = value


headers_getter = HeadersGetter()
headers_setter = HeadersSetter()


def _to_text(value: Any) -> str:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def reserved_header_keys() -> set[str]:
    """Return the header keys owned by the global propagator.

    Only these keys are ever added or overwritten on outgoing messages.
    """
    return set(propagate.get_global_textmap().fields)


def inject_context(
    span: Span,
    headers: MutableMapping[str, Any],
    context: Context | None = None,
) -> None:
    """Write the context of ``span`` into ``headers``.

    Same-named keys are overwritten; every other entry is left untouched.
    Errors raised by the propagator are logged and suppressed.

    Args:
        span: The span whose context is propagated
        headers: Mutable header table to write into
        context: Base context whose baggage travels with the span. None
            means the current context.
    """
    try:
        propagate.inject(
            headers,
            context=trace.set_span_in_context(span, context),
            setter=headers_setter,
        )
    except Exception:
        logger.warning("Failed to inject trace context into message headers", exc_info=True)


def extract_context(headers: Mapping[str, Any] | None) -> Context | None:
    """Read a trace context from ``headers``.

    Args:
        headers: AMQP header table, possibly None or empty

    Returns:
        A context holding the remote parent span and any baggage, or None
        when the headers carry neither a valid span context nor baggage.
        Never raises.
    """
    if not headers:
        return None

    try:
        context = propagate.extract(headers, context=Context(), getter=headers_getter)
    except Exception:
        logger.warning("Failed to extract trace context from message headers", exc_info=True)
        return None

    if not has_remote_parent(context) and not baggage.get_all(context):
        return None
    return context


def has_remote_parent(context: Context) -> bool:
    """Return True when ``context`` holds a valid span context."""
    return trace.get_current_span(context).get_span_context().is_valid


def with_trace_headers(
    headers: Mapping[str, Any] | None,
    span: Span,
    context: Context | None = None,
) -> dict[str, Any]:
    """Build a new header table carrying the context of ``span``.

    The caller's entries are copied first and the propagation fields are
    injected on top of them.

    Args:
        headers: The caller's header table (not modified)
        span: The span whose context is propagated
        context: Base context whose baggage travels with the span

    Returns:
        A fresh dict with the caller's entries plus the propagation fields
    """
    traced_headers: dict[str, Any] = dict(headers or {})
    inject_context(span, traced_headers, context)
    return traced_headers


__all__ = [
    "HeadersGetter",
    "HeadersSetter",
    "extract_context",
    "has_remote_parent",
    "headers_getter",
    "headers_setter",
    "inject_context",
    "reserved_header_keys",
    "with_trace_headers",
]
