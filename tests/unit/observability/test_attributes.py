"""Tests for rabbitmq_tracing.observability.attributes module."""

from rabbitmq_tracing import observability
from rabbitmq_tracing.observability import attributes
from rabbitmq_tracing.observability.attributes import (
    ATTR_ERROR_TYPE,
    ATTR_MESSAGING_DESTINATION,
    ATTR_MESSAGING_OPERATION,
    ATTR_MESSAGING_SYSTEM,
    ATTR_RABBITMQ_CONSUMER_TAG,
    ATTR_RABBITMQ_DELIVERY_TAG,
    ATTR_RABBITMQ_EXCHANGE,
    ATTR_RABBITMQ_REDELIVERED,
    ATTR_RABBITMQ_ROUTING_KEY,
)


def _all_attribute_names() -> dict[str, str]:
    return {name: getattr(attributes, name) for name in dir(attributes) if name.startswith("ATTR_")}


class TestAttributeConstants:
    """Tests for attribute constant definitions."""

    def test_messaging_attributes_follow_semantic_conventions(self):
        """Messaging attributes use the OpenTelemetry messaging namespace."""
        assert ATTR_MESSAGING_SYSTEM == "messaging.system"
        assert ATTR_MESSAGING_DESTINATION == "messaging.destination.name"
        assert ATTR_MESSAGING_OPERATION == "messaging.operation"

    def test_rabbitmq_attributes_have_rabbitmq_prefix(self):
        """RabbitMQ specific attributes live under messaging.rabbitmq."""
        for value in (
            ATTR_RABBITMQ_ROUTING_KEY,
            ATTR_RABBITMQ_EXCHANGE,
            ATTR_RABBITMQ_CONSUMER_TAG,
            ATTR_RABBITMQ_DELIVERY_TAG,
            ATTR_RABBITMQ_REDELIVERED,
        ):
            assert value.startswith("messaging.rabbitmq.")

    def test_no_deprecated_messaging_keys(self):
        """Older flat keys are not mixed with the current dotted ones."""
        values = set(_all_attribute_names().values())
        assert "messaging.destination_kind" not in values
        assert "messaging.destination" not in values
        assert "messaging.rabbitmq.routing_key" not in values

    def test_delivery_tag_key(self):
        assert ATTR_RABBITMQ_DELIVERY_TAG == "messaging.rabbitmq.message.delivery_tag"

    def test_error_type(self):
        assert ATTR_ERROR_TYPE == "error.type"

    def test_attribute_values_are_unique(self):
        """No two constants share an attribute name."""
        values = list(_all_attribute_names().values())
        assert len(values) == len(set(values))

    def test_all_constants_are_exported(self):
        """Every constant is listed in __all__ and re-exported by the package."""
        for name in _all_attribute_names():
            assert name in attributes.__all__
            assert name in observability.__all__
