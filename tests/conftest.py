"""
Pytest configuration and fixtures for testing.

This module provides shared fixtures for the connection registry, the
broadcaster, fake connections and the FastAPI application.
"""

import pytest


@pytest.fixture
def registry():
    """
    Provides an empty ConnectionRegistry.

    Returns:
        ConnectionRegistry: Registry instance
    """
    from chat_relay.managers.connection_registry import ConnectionRegistry

    return ConnectionRegistry()


@pytest.fixture
def broadcaster(registry):
    """
    Provides a Broadcaster bound to the registry fixture.

    Args:
        registry: Fixture providing the registry

    Returns:
        Broadcaster: Broadcaster instance
    """
    from chat_relay.managers.broadcaster import Broadcaster

    return Broadcaster(registry)


@pytest.fixture
def make_connection():
    """
    Provides a factory creating connections with recording outboxes.

    Returns:
        Callable: Factory returning a new Connection on every call
    """
    from tests.mocks.websocket_mocks import create_fake_connection

    return create_fake_connection


@pytest.fixture
def make_session(registry, broadcaster, make_connection):
    """
    Provides a factory creating ChatSessions over fake connections.

    Args:
        registry: Fixture providing the registry
        broadcaster: Fixture providing the broadcaster
        make_connection: Fixture providing the connection factory

    Returns:
        Callable: Async factory returning an opened ChatSession
    """
    from chat_relay.api.ws.session import ChatSession

    async def factory():
        session = ChatSession(make_connection(), registry, broadcaster)
        await session.open()
        return session

    return factory


@pytest.fixture
def mock_websocket():
    """
    Provides a mock WebSocket connection for testing.

    Returns:
        Mock: Mocked WebSocket instance
    """
    from tests.mocks.websocket_mocks import create_mock_websocket

    return create_mock_websocket()


@pytest.fixture
def app():
    """
    Provides a freshly built application with its own registry.

    Returns:
        FastAPI: Application instance
    """
    from chat_relay import application

    return application()


@pytest.fixture
def client(app):
    """
    Provides a test client running the application lifespan.

    All WebSocket sessions opened from this client share one event loop.

    Args:
        app: Fixture providing the application

    Yields:
        TestClient: FastAPI test client instance
    """
    from fastapi.testclient import TestClient

    with TestClient(app) as test_client:
        yield test_client
