"""
Admin client construction for configured clusters.
"""

import logging
from typing import Dict

from confluent_kafka import KafkaException
from confluent_kafka.admin import AdminClient

from kafka_connector.common.exceptions import ClientCreationError
from kafka_connector.kafka.config import (
    KafkaClusterConfig,
    NoAuth,
    SaslGssapiAuth,
    SaslPlainAuth,
    SaslScramSha256Auth,
    SaslScramSha512Auth,
)

logger = logging.getLogger(__name__)

_SASL_MECHANISMS = {
    SaslPlainAuth: "PLAIN",
    SaslScramSha256Auth: "SCRAM-SHA-256",
    SaslScramSha512Auth: "SCRAM-SHA-512",
}


def build_admin_config(cluster_config: KafkaClusterConfig) -> Dict[str, str]:
    """
    Translate a cluster configuration into librdkafka client properties.

    Args:
        cluster_config: Connection parameters for one cluster

    Returns:
        Property dict suitable for ``AdminClient``
    """
    config: Dict[str, str] = {"bootstrap.servers": cluster_config.bootstrap_servers}

    auth = cluster_config.auth
    if isinstance(auth, NoAuth):
        pass
    elif isinstance(auth, SaslGssapiAuth):
        config["security.protocol"] = "SASL_PLAINTEXT"
        config["sasl.mechanism"] = "GSSAPI"
        config["sasl.kerberos.principal"] = auth.principal
        if auth.keytab_path:
            config["sasl.kerberos.keytab"] = auth.keytab_path
    else:
        config["security.protocol"] = "SASL_PLAINTEXT"
        config["sasl.mechanism"] = _SASL_MECHANISMS[type(auth)]
        config["sasl.username"] = auth.username
        config["sasl.password"] = auth.password

    tls = cluster_config.tls
    if tls is not None:
        # TLS upgrades whatever transport the auth variant selected
        current_protocol = config.get("security.protocol", "PLAINTEXT")
        config["security.protocol"] = "SASL_SSL" if "SASL" in current_protocol else "SSL"

        if tls.ca_cert_path:
            config["ssl.ca.location"] = tls.ca_cert_path
        if tls.client_cert_path:
            config["ssl.certificate.location"] = tls.client_cert_path
        if tls.client_key_path:
            config["ssl.key.location"] = tls.client_key_path
        if not tls.verify_certificate:
            config["enable.ssl.certificate.verification"] = "false"

    config.update(cluster_config.additional_config)
    return config


def create_admin_client(cluster_name: str, cluster_config: KafkaClusterConfig) -> AdminClient:
    """
    Create an admin client for one cluster.

    Args:
        cluster_name: Name of the cluster, used in logs and errors
        cluster_config: Connection parameters

    Returns:
        AdminClient instance

    Raises:
        ClientCreationError: If librdkafka rejects the configuration
    """
    try:
        client = AdminClient(build_admin_config(cluster_config))
    except (KafkaException, ValueError, TypeError) as e:
        raise ClientCreationError(f"Failed to create Kafka admin client for cluster '{cluster_name}': {e}") from e

    logger.info(f"Created Kafka AdminClient for cluster '{cluster_name}' ({cluster_config.bootstrap_servers})")
    return client
