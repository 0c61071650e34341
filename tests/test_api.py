"""
Integration tests for the connector HTTP API.
"""

import pytest
from fastapi.testclient import TestClient

from kafka_connector.manager import api
from kafka_connector.manager.api import app
from kafka_connector.ops import DeleteTopic, op_to_string
from tests.utils.factories import topic_yaml


@pytest.fixture
def client(config_prefix, admin_client, monkeypatch):
    """Create a test client whose connector talks to a mock 'prod' cluster."""
    monkeypatch.setenv("KAFKA_CONNECTOR_PREFIX", str(config_prefix))
    monkeypatch.setattr("kafka_connector.kafka.registry.create_admin_client", lambda name, config: admin_client)
    with TestClient(app) as test_client:
        yield test_client
    api.connector = None


def test_health_check(client):
    """Test the health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "kafka-connector"


def test_root_endpoint(client):
    """Test the root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["service"] == "Kafka Connector API"
    assert "/plan" in data["endpoints"]


def test_not_initialized():
    api.connector = None
    response = TestClient(app).post("/filter", json={"path": "kafka/config.yaml"})
    assert response.status_code == 503


def test_filter(client):
    response = client.post("/filter", json={"path": "kafka/prod/topics/orders.yaml"})
    assert response.json() == {"path": "kafka/prod/topics/orders.yaml", "filter": "resource"}


def test_subpaths(client):
    assert client.get("/subpaths").json() == {"subpaths": ["kafka/prod"]}


def test_list(client):
    response = client.post("/list", json={"subpath": "kafka/prod"})
    assert response.status_code == 200
    assert response.json() == {"total": 1, "paths": ["kafka/prod/topics/orders.yaml"]}


def test_get_existing(client):
    response = client.post("/get", json={"path": "kafka/prod/topics/orders.yaml"})
    data = response.json()
    assert data["exists"] is True
    assert "partitions: 3" in data["resource_definition"]


def test_get_missing(client):
    data = client.post("/get", json={"path": "kafka/prod/topics/missing.yaml"}).json()
    assert data["exists"] is False
    assert data["resource_definition"] is None


def test_plan_and_exec(client, admin_client):
    path = "kafka/prod/topics/payments.yaml"
    plan = client.post("/plan", json={"path": path, "current": None, "desired": topic_yaml().decode()}).json()

    assert len(plan["ops"]) == 1
    response = client.post("/op_exec", json={"path": path, "op": plan["ops"][0]["op_definition"]})

    assert response.status_code == 200
    assert response.json()["friendly_message"] == "Created topic 'payments' in cluster 'prod'"
    assert "payments" in admin_client.topics


def test_plan_rejected(client):
    response = client.post(
        "/plan",
        json={
            "path": "kafka/prod/topics/orders.yaml",
            "current": topic_yaml(replication_factor=2).decode(),
            "desired": topic_yaml(replication_factor=3).decode(),
        },
    )
    assert response.status_code == 422
    assert response.json()["error_code"] == "PLAN_VALIDATION_FAILURE"


def test_invalid_address(client):
    response = client.post("/get", json={"path": "kafka/prod/widgets/x.yaml"})
    assert response.status_code == 400
    assert response.json()["error_code"] == "INVALID_ADDRESS"


def test_unknown_cluster(client):
    response = client.post("/get", json={"path": "kafka/staging/topics/orders.yaml"})
    assert response.status_code == 404
    assert response.json()["error_code"] == "CLUSTER_NOT_FOUND"


def test_remote_failure(client, admin_client):
    admin_client.empty_results.add("delete_topics")
    response = client.post(
        "/op_exec", json={"path": "kafka/prod/topics/orders.yaml", "op": op_to_string(DeleteTopic())}
    )
    assert response.status_code == 502
    assert response.json()["error_code"] == "NO_RESULT_RETURNED"


def test_op_exec_batch(client):
    response = client.post(
        "/op_exec_batch",
        json={
            "items": [
                {"path": "kafka/prod/topics/orders.yaml", "op": op_to_string(DeleteTopic())},
                {"path": "kafka/prod/topics/orders.yaml", "op": "nonsense"},
            ]
        },
    )
    data = response.json()
    assert data["total"] == 2
    assert data["failed"] == 1
    assert data["results"][0]["ok"] is True


def test_diag(client):
    valid = client.post("/diag", json={"path": "kafka/prod/topics/t.yaml", "body": "partitions: 2\n"}).json()
    assert valid == {"path": "kafka/prod/topics/t.yaml", "valid": True, "diagnostics": []}

    invalid = client.post("/diag", json={"path": "kafka/prod/topics/t.yaml", "body": "partitions: -1\n"}).json()
    assert invalid["valid"] is False
    assert invalid["diagnostics"][0]["field"] == "partitions"


def test_eq(client):
    response = client.post(
        "/eq", json={"path": "kafka/prod/topics/t.yaml", "a": "partitions: 2\n", "b": "{partitions: 2}"}
    )
    assert response.json()["equal"] is True


def test_skeletons(client):
    data = client.get("/skeletons").json()
    assert len(data["skeletons"]) == 4


def test_docstring(client):
    response = client.post("/docstring", json={"type_name": "KafkaAcl", "field": "host"})
    assert response.status_code == 200
    assert "hosts" in response.json()["markdown"]

    assert client.post("/docstring", json={"type_name": "Missing"}).status_code == 404
