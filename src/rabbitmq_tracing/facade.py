"""Pass-through base for the tracing wrappers.

Each wrapper overrides only the operations it traces. Every other attribute,
property or method is resolved on the wrapped aio-pika object by a single
``__getattr__``, so it keeps its exact signature, return value and
exceptions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rabbitmq_tracing.config import TracingConfig
from rabbitmq_tracing.observability.tracer import create_tracer
from rabbitmq_tracing.span_decorator import SpanDecorator

if TYPE_CHECKING:
    from rabbitmq_tracing.observability.tracer import Tracer


class TracingWrapper:
    """Forward everything that is not overridden to the wrapped object.

    Args:
        wrapped: The aio-pika object to wrap
        tracer: Tracer for the spans created by this wrapper. When omitted,
            one is created from ``config`` (a NullTracer if tracing is
            disabled).
        config: Tracing configuration (defaults to TracingConfig())
        span_decorator: Decorator applying messaging tags (defaults to
            SpanDecorator for config.messaging_system)
    """

    def __init__(
        self,
        wrapped: Any,
        tracer: Tracer | None = None,
        *,
        config: TracingConfig | None = None,
        span_decorator: SpanDecorator | None = None,
    ) -> None:
        self._wrapped = wrapped
        self._config = config or TracingConfig()
        self._tracer = tracer or create_tracer(
            self._config.tracer_name,
            self._config.enable_tracing,
        )
        self._span_decorator = span_decorator or SpanDecorator(self._config.messaging_system)

    @property
    def wrapped(self) -> Any:
        """The underlying aio-pika object."""
        return self._wrapped

    @property
    def tracer(self) -> Tracer:
        """The tracer used by this wrapper."""
        return self._tracer

    def __getattr__(self, name: str) -> Any:
        # Only reached for names the wrapper does not define itself.
        try:
            wrapped = self.__dict__["_wrapped"]
        except KeyError:
            raise AttributeError(name) from None
        return getattr(wrapped, name)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._wrapped!r}>"

    def _child_options(self) -> dict[str, Any]:
        """Constructor options shared with the wrappers this one hands out."""
        return {
            "tracer": self._tracer,
            "config": self._config,
            "span_decorator": self._span_decorator,
        }


__all__ = [
    "TracingWrapper",
]
