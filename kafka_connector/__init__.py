"""
Declarative reconciliation connector for Kafka clusters.

Maps topics, ACLs and quotas declared under ``kafka/`` paths onto the live
state of one or more clusters and plans/executes the admin operations that
move live state to the declared state.
"""

import logging

from kafka_connector.address import (
    AclAddress,
    ConfigAddress,
    QuotaAddress,
    ResourceAddress,
    TaskAddress,
    TopicAddress,
    decode_address,
    encode_address,
)
from kafka_connector.manager.connector import KafkaConnector
from kafka_connector.planner import plan


def setup_logging(level: str = "INFO") -> None:
    """
    Configure root logging for the connector process.

    Args:
        level: Log level name applied to the ``kafka_connector`` loggers
    """
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )

    # Control external library verbosity
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    logging.getLogger("kafka_connector").setLevel(level.upper())


__all__ = [
    "AclAddress",
    "ConfigAddress",
    "KafkaConnector",
    "QuotaAddress",
    "ResourceAddress",
    "TaskAddress",
    "TopicAddress",
    "decode_address",
    "encode_address",
    "plan",
    "setup_logging",
]
