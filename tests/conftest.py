"""
Shared test configuration and fixtures.
"""

import json
from unittest.mock import MagicMock, patch

import pytest

from pubsub_destination.config import AdapterConfig, get_adapter_config

SERVICE_ACCOUNT_INFO = {
    "type": "service_account",
    "project_id": "test-project",
    "private_key_id": "key-123",
    "client_email": "publisher@test-project.iam.gserviceaccount.com",
}


@pytest.fixture(autouse=True)
def reset_adapter_config():
    """Clear the cached adapter configuration around every test."""
    get_adapter_config.cache_clear()
    yield
    get_adapter_config.cache_clear()


@pytest.fixture
def adapter_config():
    """Adapter configuration pointing at real Pub/Sub (no emulator, no timeout)."""
    return AdapterConfig()


@pytest.fixture
def destination_config():
    """Destination configuration with two topic bindings."""
    return {
        "credentials": json.dumps(SERVICE_ACCOUNT_INFO),
        "projectId": "test-project",
        "eventToTopicMap": [
            {"from": "Order Completed", "to": "orders"},
            {"from": "Product Viewed", "to": "products"},
        ],
    }


@pytest.fixture
def mock_publisher():
    """
    Patch the Pub/Sub client and service account credentials.

    topic_path builds real topic paths; publish returns a future that
    resolves to "server-message-id-123" by default.
    """
    with patch(
        "pubsub_destination.infrastructure.pubsub_producer.pubsub_v1.PublisherClient"
    ) as mock_publisher_class, patch(
        "pubsub_destination.infrastructure.pubsub_producer.service_account.Credentials"
    ) as mock_credentials_class:
        publisher = MagicMock()
        publisher.topic_path.side_effect = (
            lambda project, topic: f"projects/{project}/topics/{topic}"
        )
        future = MagicMock()
        future.result.return_value = "server-message-id-123"
        publisher.publish.return_value = future

        mock_publisher_class.return_value = publisher
        publisher.mock_class = mock_publisher_class
        publisher.mock_credentials_class = mock_credentials_class
        publisher.future = future
        yield publisher
