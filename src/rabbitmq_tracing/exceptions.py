"""Library exceptions for the rabbitmq_tracing package.

Errors raised by the wrapped aio-pika objects are never converted into these
types; they reach the caller unchanged.
"""


class RabbitMQTracingError(Exception):
    """Base exception for rabbitmq_tracing library."""

    pass


class TracingConfigError(RabbitMQTracingError, ValueError):
    """Raised when a TracingConfig value is invalid."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"Invalid tracing configuration for {field}: {message}")


__all__ = [
    "RabbitMQTracingError",
    "TracingConfigError",
]
