"""
Configuration for the tracing client wrappers.

This module provides:
- TracingConfig: Settings shared by the channel, exchange, queue and
  consumer wrappers
"""

from __future__ import annotations

from dataclasses import dataclass

from rabbitmq_tracing.exceptions import TracingConfigError

DEFAULT_TRACER_NAME = "rabbitmq_tracing"


@dataclass(frozen=True)
class TracingConfig:
    """
    Configuration for traced RabbitMQ operations.

    Attributes:
        enable_tracing: Create spans for publish, delivery and polling receive.
            When False, wrappers build a NullTracer and forward every call
            untouched (unless an explicit tracer is injected).
        messaging_system: Value of the messaging.system span attribute.
        publish_span_name: Name of the producer span started on publish.
        receive_span_name: Name of the consumer span started for each
            delivered or fetched message.
        use_message_context: Prefer a trace context that the application
            already injected into an outgoing message's headers over the
            ambient span when choosing the producer span's parent.
        tracer_name: Instrumentation scope name used when the wrappers
            create their own tracer.

    Example:
        >>> config = TracingConfig(publish_span_name="orders.send")
        >>> channel = TracingChannel(raw_channel, config=config)
    """

    enable_tracing: bool = True
    messaging_system: str = "rabbitmq"
    publish_span_name: str = "send"
    receive_span_name: str = "receive"
    use_message_context: bool = True
    tracer_name: str = DEFAULT_TRACER_NAME

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not self.messaging_system:
            raise TracingConfigError("messaging_system", "must not be empty")
        if not self.publish_span_name:
            raise TracingConfigError("publish_span_name", "must not be empty")
        if not self.receive_span_name:
            raise TracingConfigError("receive_span_name", "must not be empty")
        if not self.tracer_name:
            raise TracingConfigError("tracer_name", "must not be empty")


__all__ = [
    "DEFAULT_TRACER_NAME",
    "TracingConfig",
]
