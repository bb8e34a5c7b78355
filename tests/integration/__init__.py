"""
Integration tests for the rabbitmq_tracing library.

These tests run the tracing wrappers together on top of an in-memory broker,
so no RabbitMQ instance is needed.

Run integration tests:
    pytest tests/integration/ -v

Skip integration tests:
    pytest tests/ -v -m "not integration"
"""
