"""
Kafka cluster access: configuration, admin clients, registry and executor.
"""

from .client import build_admin_config, create_admin_client
from .config import (
    KafkaClusterConfig,
    KafkaConnectorConfig,
    KafkaTlsConfig,
    NoAuth,
    SaslGssapiAuth,
    SaslPlainAuth,
    SaslScramSha256Auth,
    SaslScramSha512Auth,
)
from .executor import OpExecResponse, OpExecutor
from .registry import ClusterRegistry

__all__ = [
    "ClusterRegistry",
    "KafkaClusterConfig",
    "KafkaConnectorConfig",
    "KafkaTlsConfig",
    "NoAuth",
    "OpExecResponse",
    "OpExecutor",
    "SaslGssapiAuth",
    "SaslPlainAuth",
    "SaslScramSha256Auth",
    "SaslScramSha512Auth",
    "build_admin_config",
    "create_admin_client",
]
