"""
Kafka cluster configuration models.

The connector configuration lives at ``<prefix>/kafka/config.yaml`` and is
read once at initialization (or on explicit reload).
"""

import logging
from pathlib import Path
from typing import Annotated, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from kafka_connector.common.exceptions import ConfigLoadError, DeserializeError
from kafka_connector.resources.serialization import dump_model, load_model

logger = logging.getLogger(__name__)

CONFIG_RELATIVE_PATH = Path("kafka") / "config.yaml"


class NoAuth(BaseModel):
    """No authentication (plain connection)."""

    model_config = ConfigDict(extra="forbid")

    type: Literal["none"] = "none"


class SaslPlainAuth(BaseModel):
    """SASL/PLAIN authentication with username and password."""

    model_config = ConfigDict(extra="forbid")

    type: Literal["sasl_plain"] = "sasl_plain"
    username: str
    password: str


class SaslScramSha256Auth(BaseModel):
    """SASL/SCRAM-SHA-256 authentication."""

    model_config = ConfigDict(extra="forbid")

    type: Literal["sasl_scram_sha256"] = "sasl_scram_sha256"
    username: str
    password: str


class SaslScramSha512Auth(BaseModel):
    """SASL/SCRAM-SHA-512 authentication."""

    model_config = ConfigDict(extra="forbid")

    type: Literal["sasl_scram_sha512"] = "sasl_scram_sha512"
    username: str
    password: str


class SaslGssapiAuth(BaseModel):
    """Kerberos/GSSAPI authentication."""

    model_config = ConfigDict(extra="forbid")

    type: Literal["sasl_gssapi"] = "sasl_gssapi"
    principal: str
    keytab_path: Optional[str] = None


KafkaAuth = Annotated[
    Union[NoAuth, SaslPlainAuth, SaslScramSha256Auth, SaslScramSha512Auth, SaslGssapiAuth],
    Field(discriminator="type"),
]


class KafkaTlsConfig(BaseModel):
    """TLS/SSL configuration for secure Kafka connections."""

    model_config = ConfigDict(extra="forbid")

    ca_cert_path: Optional[str] = Field(
        default=None, description="Path to CA certificate file for verifying broker certificates"
    )
    client_cert_path: Optional[str] = Field(
        default=None, description="Path to client certificate file for mutual TLS authentication"
    )
    client_key_path: Optional[str] = Field(
        default=None, description="Path to client private key file for mutual TLS authentication"
    )
    verify_certificate: bool = Field(default=True, description="Whether to verify the broker's SSL certificate")


class KafkaClusterConfig(BaseModel):
    """Configuration for a single Kafka cluster."""

    model_config = ConfigDict(extra="forbid", coerce_numbers_to_str=True)

    bootstrap_servers: str = Field(
        default="localhost:9092",
        description="Comma-separated list of Kafka broker addresses (host:port)",
    )
    auth: KafkaAuth = Field(default_factory=NoAuth, description="Authentication configuration for this cluster")
    tls: Optional[KafkaTlsConfig] = Field(default=None, description="TLS/SSL configuration (optional)")
    additional_config: Dict[str, str] = Field(
        default_factory=dict,
        description="Additional client configuration properties as key-value pairs",
    )


def _default_clusters() -> Dict[str, KafkaClusterConfig]:
    return {"default": KafkaClusterConfig()}


class KafkaConnectorConfig(BaseModel):
    """The primary configuration block for the connector."""

    model_config = ConfigDict(extra="forbid")

    clusters: Dict[str, KafkaClusterConfig] = Field(
        default_factory=_default_clusters,
        description="Map of cluster names to their connection configurations",
    )
    operation_timeout_ms: int = Field(
        default=30000, gt=0, description="Timeout in milliseconds for Kafka admin operations"
    )
    concurrent_requests: int = Field(
        default=10, gt=0, description="Maximum number of concurrent requests to Kafka clusters"
    )

    @property
    def operation_timeout(self) -> float:
        """Operation timeout in seconds, as confluent-kafka expects it."""
        return self.operation_timeout_ms / 1000.0

    def to_bytes(self) -> bytes:
        return dump_model(self)

    @classmethod
    def from_bytes(cls, data: Union[bytes, str]) -> "KafkaConnectorConfig":
        return load_model(cls, data, "config")

    @classmethod
    def try_load(cls, prefix: Path) -> Optional["KafkaConnectorConfig"]:
        """
        Load the connector configuration from a prefix directory.

        Args:
            prefix: Directory holding the ``kafka/`` tree

        Returns:
            Parsed configuration, or None if the file does not exist

        Raises:
            ConfigLoadError: If the file cannot be read or parsed
        """
        config_path = Path(prefix) / CONFIG_RELATIVE_PATH
        if not config_path.exists():
            logger.info(f"No connector config at {config_path}, using defaults")
            return None

        try:
            data = config_path.read_bytes()
        except OSError as e:
            raise ConfigLoadError(f"Failed to read {config_path}: {e}") from e

        try:
            config = cls.from_bytes(data)
        except DeserializeError as e:
            raise ConfigLoadError(f"Failed to parse {config_path}: {e}") from e

        logger.info(f"Loaded connector config from {config_path} with {len(config.clusters)} cluster(s)")
        return config
