"""
Pytest fixtures for testing.
"""
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from songbridge.services.completion_registry import (
    CompletionRegistry,
    get_completion_registry,
    reset_completion_registry,
)
from songbridge.services.provider_client import ProviderClient, get_provider_client, reset_provider_client


@pytest.fixture
def registry():
    """Fresh completion registry shared by both applications."""
    return CompletionRegistry(max_entries=100)


@pytest.fixture
def mock_provider():
    """Provider client that accepts every job as 'abc123'."""
    provider = MagicMock(spec=ProviderClient)
    provider.submit = AsyncMock(return_value='abc123')
    return provider


def make_callback(task_id='abc123', audio_url='u1', image_url='i1', title='T', msg='ok', **extra):
    """Build a provider callback body."""
    track = {}
    if audio_url is not None:
        track['audio_url'] = audio_url
    if image_url is not None:
        track['image_url'] = image_url
    if title is not None:
        track['title'] = title

    payload = {
        'data': {
            'task_id': task_id,
            'data': [track],
        },
    }
    if msg is not None:
        payload['msg'] = msg
    payload.update(extra)
    return payload


@pytest.fixture
def callback_factory():
    """Factory for provider callback bodies."""
    return make_callback


@pytest.fixture
def apps(registry, mock_provider):
    """Both applications with the registry and provider overridden."""
    reset_completion_registry()
    reset_provider_client()

    from server import app, webhook_app

    for application in (app, webhook_app):
        application.dependency_overrides[get_completion_registry] = lambda: registry
        application.dependency_overrides[get_provider_client] = lambda: mock_provider

    yield app, webhook_app

    for application in (app, webhook_app):
        application.dependency_overrides.clear()
    reset_completion_registry()
    reset_provider_client()


@pytest_asyncio.fixture
async def client(apps):
    """Test client for the agent-facing tools application."""
    app, _ = apps
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as client:
        yield client


@pytest_asyncio.fixture
async def webhook_client(apps):
    """Test client for the provider-facing webhook application."""
    _, webhook_app = apps
    transport = ASGITransport(app=webhook_app)
    async with AsyncClient(transport=transport, base_url='http://test') as client:
        yield client
