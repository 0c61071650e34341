"""
Unit tests for YAML payload serialization.
"""

import pytest
import yaml

from kafka_connector.address import ConfigAddress, TaskAddress
from kafka_connector.common.exceptions import DeserializeError, InvalidAddressError, KindMismatchError
from kafka_connector.resources.models import KafkaAcl, KafkaQuota, KafkaTopic
from kafka_connector.resources.serialization import deserialize, expect_kind, serialize


@pytest.mark.unit
class TestDeserialize:
    """Test decoding payloads by address kind."""

    def test_topic(self, topic_addr, topic_payload):
        topic = deserialize(topic_addr, topic_payload)

        assert isinstance(topic, KafkaTopic)
        assert topic.partitions == 3
        assert topic.replication_factor == 2
        assert topic.config == {"retention.ms": "1000"}

    def test_acl(self, acl_addr, acl_payload):
        acl = deserialize(acl_addr, acl_payload)
        assert isinstance(acl, KafkaAcl)
        assert str(acl.principal) == "User:alice"

    def test_quota(self, quota_addr, quota_payload):
        quota = deserialize(quota_addr, quota_payload)
        assert isinstance(quota, KafkaQuota)
        assert quota.producer_byte_rate == 1048576.0

    def test_accepts_text(self, topic_addr):
        topic = deserialize(topic_addr, "partitions: 6\n")
        assert topic.partitions == 6
        assert topic.replication_factor == 1

    def test_empty_document_uses_defaults(self, topic_addr):
        assert deserialize(topic_addr, b"") == KafkaTopic()

    def test_kind_follows_address(self, acl_addr, topic_payload):
        with pytest.raises(DeserializeError) as exc_info:
            deserialize(acl_addr, topic_payload)
        assert exc_info.value.kind == "acl"

    def test_unknown_field_names_field(self, topic_addr):
        with pytest.raises(DeserializeError) as exc_info:
            deserialize(topic_addr, b"partitions: 3\nretention: 5\n")
        assert exc_info.value.field == "retention"

    def test_nested_field_path(self, acl_addr):
        payload = yaml.safe_dump(
            {
                "resource_type": "Topic",
                "resource_name": "orders",
                "pattern_type": "Literal",
                "principal": {"principal_type": "Robot", "name": "r2"},
                "operation": "Read",
                "permission": "Allow",
            }
        ).encode()

        with pytest.raises(DeserializeError) as exc_info:
            deserialize(acl_addr, payload)
        assert exc_info.value.field == "principal.principal_type"

    def test_yaml_syntax_error_has_position(self, topic_addr):
        with pytest.raises(DeserializeError) as exc_info:
            deserialize(topic_addr, b"partitions: 3\nconfig: [unclosed\n")
        assert exc_info.value.line is not None
        assert exc_info.value.column is not None

    def test_non_mapping_document(self, topic_addr):
        with pytest.raises(DeserializeError, match="mapping"):
            deserialize(topic_addr, b"- 1\n- 2\n")

    @pytest.mark.parametrize(
        "payload, field",
        [
            (b"partitions: true\n", "partitions"),
            (b"partitions: '5'\n", "partitions"),
            (b"partitions: 2.5\n", "partitions"),
            (b"replication_factor: 2.0\n", "replication_factor"),
            (b"replication_factor: false\n", "replication_factor"),
        ],
    )
    def test_topic_counts_are_not_coerced(self, topic_addr, payload, field):
        with pytest.raises(DeserializeError) as exc_info:
            deserialize(topic_addr, payload)
        assert exc_info.value.field == field

    @pytest.mark.parametrize(
        "rate, value",
        [
            ("producer_byte_rate", "'1000'"),
            ("consumer_byte_rate", "true"),
            ("request_percentage", "'50.5'"),
        ],
    )
    def test_quota_rates_are_not_coerced(self, quota_addr, rate, value):
        payload = f"entities: []\n{rate}: {value}\n".encode()

        with pytest.raises(DeserializeError) as exc_info:
            deserialize(quota_addr, payload)
        assert exc_info.value.field == rate

    def test_quota_rate_accepts_integer(self, quota_addr):
        quota = deserialize(quota_addr, b"entities: []\nproducer_byte_rate: 1000\n")
        assert quota.producer_byte_rate == 1000.0

    def test_invalid_utf8(self, topic_addr):
        with pytest.raises(DeserializeError, match="UTF-8"):
            deserialize(topic_addr, b"\xff\xfe")

    @pytest.mark.parametrize("addr", [ConfigAddress(), TaskAddress()])
    def test_non_resource_address(self, addr):
        with pytest.raises(InvalidAddressError):
            deserialize(addr, b"partitions: 1\n")


@pytest.mark.unit
class TestSerialize:
    """Test rendering resources to YAML."""

    def test_block_style_in_field_order(self):
        body = serialize(KafkaTopic(partitions=2, replication_factor=3, config={"b": "2", "a": "1"})).decode()
        assert body.splitlines()[0] == "partitions: 2"
        assert body.splitlines()[1] == "replication_factor: 3"
        assert "{" not in body

    def test_enums_written_by_name(self, acl_addr, acl_payload):
        body = serialize(deserialize(acl_addr, acl_payload)).decode()
        assert "operation: Read" in body
        assert "permission: Allow" in body

    def test_unset_rates_survive(self, quota_addr):
        quota = KafkaQuota(entities=[{"entity_type": "User", "name": "alice"}], request_percentage=0.0)
        assert deserialize(quota_addr, serialize(quota)) == quota


@pytest.mark.unit
class TestExpectKind:
    def test_matching_kind(self):
        topic = KafkaTopic()
        assert expect_kind(topic, KafkaTopic) is topic

    def test_mismatched_kind(self):
        with pytest.raises(KindMismatchError) as exc_info:
            expect_kind(KafkaTopic(), KafkaAcl)
        assert exc_info.value.expected == "KafkaAcl"
        assert exc_info.value.actual == "KafkaTopic"
