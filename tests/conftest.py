"""
Shared pytest fixtures and configuration for all tests.
"""

from pathlib import Path

import pytest
import yaml

from kafka_connector.address import AclAddress, QuotaAddress, TopicAddress
from tests.utils.factories import acl_yaml, quota_yaml, topic_yaml
from tests.utils.mocks import MockAdminClient


# ============= Address Fixtures =============


@pytest.fixture
def topic_addr():
    return TopicAddress("prod", "orders")


@pytest.fixture
def acl_addr():
    return AclAddress("prod", "orders-reader")


@pytest.fixture
def quota_addr():
    return QuotaAddress("prod", "alice-limits")


# ============= Payload Fixtures =============


@pytest.fixture
def topic_payload() -> bytes:
    """Topic with 3 partitions, replication factor 2 and one config entry."""
    return topic_yaml()


@pytest.fixture
def acl_payload() -> bytes:
    """ACL allowing User:alice to read topic 'orders'."""
    return acl_yaml()


@pytest.fixture
def quota_payload() -> bytes:
    """Quota limiting User:alice's producer rate."""
    return quota_yaml()


# ============= Cluster Fixtures =============


@pytest.fixture
def admin_client():
    """Mock admin client with one existing topic."""
    client = MockAdminClient()
    client.add_topic(
        "orders",
        partitions=3,
        replication_factor=2,
        config={"retention.ms": "1000", "cleanup.policy": "compact"},
        defaults={"max.message.bytes": "1048588"},
    )
    return client


@pytest.fixture
def config_prefix(tmp_path) -> Path:
    """Prefix directory whose kafka/config.yaml declares a single 'prod' cluster."""
    config_dir = tmp_path / "kafka"
    config_dir.mkdir()
    (config_dir / "config.yaml").write_text(
        yaml.safe_dump(
            {
                "clusters": {"prod": {"bootstrap_servers": "prod:9092"}},
                "operation_timeout_ms": 5000,
                "concurrent_requests": 4,
            }
        )
    )
    return tmp_path


# ============= Pytest Configuration =============


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test (no external dependencies)")
    config.addinivalue_line("markers", "integration: mark test as integration test (requires services)")
