"""
Pydantic models for the resources the connector reconciles.
"""

from enum import Enum
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat


class KafkaTopic(BaseModel):
    """
    A Kafka topic with its configuration settings.

    Partition and replica counts must be YAML integers; quoted numbers,
    booleans and floats are rejected rather than coerced.
    """

    model_config = ConfigDict(extra="forbid", coerce_numbers_to_str=True)

    partitions: int = Field(
        default=1, gt=0, le=2**31 - 1, strict=True, description="Number of partitions for the topic"
    )
    replication_factor: int = Field(
        default=1, gt=0, le=2**15 - 1, strict=True, description="Replication factor for the topic"
    )
    config: Dict[str, str] = Field(default_factory=dict, description="Topic-level configuration properties")


class KafkaResourceType(str, Enum):
    """The type of Kafka resource being controlled by an ACL."""

    TOPIC = "Topic"
    GROUP = "Group"
    CLUSTER = "Cluster"
    TRANSACTIONAL_ID = "TransactionalId"
    DELEGATION_TOKEN = "DelegationToken"


class KafkaResourcePatternType(str, Enum):
    """The pattern type for matching Kafka resources in ACLs."""

    LITERAL = "Literal"
    PREFIXED = "Prefixed"


class KafkaPrincipalType(str, Enum):
    """The type of principal in a Kafka ACL."""

    USER = "User"
    GROUP = "Group"


class KafkaAclOperation(str, Enum):
    """The operation type for Kafka ACLs."""

    READ = "Read"
    WRITE = "Write"
    CREATE = "Create"
    DELETE = "Delete"
    ALTER = "Alter"
    DESCRIBE = "Describe"
    CLUSTER_ACTION = "ClusterAction"
    DESCRIBE_CONFIGS = "DescribeConfigs"
    ALTER_CONFIGS = "AlterConfigs"
    IDEMPOTENT_WRITE = "IdempotentWrite"
    ALL = "All"


class KafkaAclPermission(str, Enum):
    """Permission type for Kafka ACLs."""

    ALLOW = "Allow"
    DENY = "Deny"


class KafkaPrincipal(BaseModel):
    """A Kafka principal (user or group)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    principal_type: KafkaPrincipalType = Field(..., description="The type of principal")
    name: str = Field(..., description="The name of the principal")

    def __str__(self) -> str:
        return f"{self.principal_type.value}:{self.name}"


class KafkaAcl(BaseModel):
    """
    A Kafka Access Control List entry.

    ACLs are compared field by field and are never patched in place: any
    difference replaces the whole entry.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    resource_type: KafkaResourceType = Field(..., description="The type of resource this ACL applies to")
    resource_name: str = Field(..., description="The name of the resource (e.g., topic name, group name)")
    pattern_type: KafkaResourcePatternType = Field(..., description="The pattern type for matching resources")
    principal: KafkaPrincipal = Field(..., description="The principal this ACL applies to")
    host: str = Field(
        default="*",
        description="The host from which the principal is allowed/denied access (* for all hosts)",
    )
    operation: KafkaAclOperation = Field(..., description="The operation this ACL controls")
    permission: KafkaAclPermission = Field(..., description="Whether this ACL allows or denies the operation")


class KafkaQuotaEntityType(str, Enum):
    """The entity type for Kafka quotas."""

    USER = "User"
    CLIENT_ID = "ClientId"
    IP = "Ip"


class KafkaQuotaEntity(BaseModel):
    """A Kafka quota entity identifier."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    entity_type: KafkaQuotaEntityType = Field(..., description="The type of entity")
    name: str = Field(..., description="The name of the entity (user name, client ID, or IP address)")


class KafkaQuota(BaseModel):
    """
    Kafka quotas for rate limiting clients.

    An unset rate (``None``) is distinct from a rate of zero. Rates accept
    YAML integers and floats, never quoted numbers or booleans.
    """

    model_config = ConfigDict(extra="forbid")

    entities: List[KafkaQuotaEntity] = Field(..., description="The entities this quota applies to")
    producer_byte_rate: Optional[StrictFloat] = Field(
        default=None, ge=0, description="Producer byte rate quota (bytes/second, optional)"
    )
    consumer_byte_rate: Optional[StrictFloat] = Field(
        default=None, ge=0, description="Consumer byte rate quota (bytes/second, optional)"
    )
    request_percentage: Optional[StrictFloat] = Field(
        default=None, ge=0, description="Request percentage quota (percentage, optional)"
    )


KafkaResource = Union[KafkaTopic, KafkaAcl, KafkaQuota]
