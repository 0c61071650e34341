"""
Resource models and their YAML serialization.
"""

from .models import (
    KafkaAcl,
    KafkaAclOperation,
    KafkaAclPermission,
    KafkaPrincipal,
    KafkaPrincipalType,
    KafkaQuota,
    KafkaQuotaEntity,
    KafkaQuotaEntityType,
    KafkaResource,
    KafkaResourcePatternType,
    KafkaResourceType,
    KafkaTopic,
)
from .serialization import deserialize, expect_kind, serialize

__all__ = [
    "KafkaAcl",
    "KafkaAclOperation",
    "KafkaAclPermission",
    "KafkaPrincipal",
    "KafkaPrincipalType",
    "KafkaQuota",
    "KafkaQuotaEntity",
    "KafkaQuotaEntityType",
    "KafkaResource",
    "KafkaResourcePatternType",
    "KafkaResourceType",
    "KafkaTopic",
    "deserialize",
    "expect_kind",
    "serialize",
]
