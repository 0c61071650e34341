"""
Unit tests for admin client construction.
"""

from unittest.mock import patch

import pytest
from confluent_kafka import KafkaError, KafkaException

from kafka_connector.common.exceptions import ClientCreationError
from kafka_connector.kafka.client import build_admin_config, create_admin_client
from kafka_connector.kafka.config import (
    KafkaClusterConfig,
    KafkaTlsConfig,
    SaslGssapiAuth,
    SaslPlainAuth,
    SaslScramSha256Auth,
)


@pytest.mark.unit
class TestBuildAdminConfig:
    """Test translation of cluster configs to client properties."""

    def test_plaintext(self):
        config = build_admin_config(KafkaClusterConfig(bootstrap_servers="b1:9092,b2:9092"))
        assert config == {"bootstrap.servers": "b1:9092,b2:9092"}

    def test_sasl_plain(self):
        config = build_admin_config(KafkaClusterConfig(auth=SaslPlainAuth(username="u", password="p")))

        assert config["security.protocol"] == "SASL_PLAINTEXT"
        assert config["sasl.mechanism"] == "PLAIN"
        assert config["sasl.username"] == "u"
        assert config["sasl.password"] == "p"

    def test_scram(self):
        config = build_admin_config(KafkaClusterConfig(auth=SaslScramSha256Auth(username="u", password="p")))
        assert config["sasl.mechanism"] == "SCRAM-SHA-256"

    def test_gssapi(self):
        config = build_admin_config(
            KafkaClusterConfig(auth=SaslGssapiAuth(principal="kafka/host@REALM", keytab_path="/etc/kafka.keytab"))
        )

        assert config["sasl.mechanism"] == "GSSAPI"
        assert config["sasl.kerberos.principal"] == "kafka/host@REALM"
        assert config["sasl.kerberos.keytab"] == "/etc/kafka.keytab"

    def test_gssapi_without_keytab(self):
        config = build_admin_config(KafkaClusterConfig(auth=SaslGssapiAuth(principal="p")))
        assert "sasl.kerberos.keytab" not in config

    def test_tls_without_sasl(self):
        config = build_admin_config(
            KafkaClusterConfig(tls=KafkaTlsConfig(ca_cert_path="/ca.pem", verify_certificate=False))
        )

        assert config["security.protocol"] == "SSL"
        assert config["ssl.ca.location"] == "/ca.pem"
        assert config["enable.ssl.certificate.verification"] == "false"
        assert "ssl.certificate.location" not in config

    def test_tls_upgrades_sasl(self):
        config = build_admin_config(
            KafkaClusterConfig(
                auth=SaslPlainAuth(username="u", password="p"),
                tls=KafkaTlsConfig(client_cert_path="/c.pem", client_key_path="/k.pem"),
            )
        )

        assert config["security.protocol"] == "SASL_SSL"
        assert config["ssl.certificate.location"] == "/c.pem"
        assert config["ssl.key.location"] == "/k.pem"
        assert "enable.ssl.certificate.verification" not in config

    def test_additional_config_overrides(self):
        config = build_admin_config(
            KafkaClusterConfig(
                auth=SaslPlainAuth(username="u", password="p"),
                additional_config={"security.protocol": "SASL_SSL", "client.id": "connector"},
            )
        )

        assert config["security.protocol"] == "SASL_SSL"
        assert config["client.id"] == "connector"


@pytest.mark.unit
class TestCreateAdminClient:
    def test_creates_client(self):
        with patch("kafka_connector.kafka.client.AdminClient") as admin_cls:
            client = create_admin_client("prod", KafkaClusterConfig(bootstrap_servers="prod:9092"))

        admin_cls.assert_called_once_with({"bootstrap.servers": "prod:9092"})
        assert client is admin_cls.return_value

    def test_wraps_failure(self):
        error = KafkaException(KafkaError(KafkaError._INVALID_ARG, "bad config"))
        with patch("kafka_connector.kafka.client.AdminClient", side_effect=error):
            with pytest.raises(ClientCreationError, match="prod"):
                create_admin_client("prod", KafkaClusterConfig())
