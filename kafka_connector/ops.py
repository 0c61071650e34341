"""
Operations the connector can request against a cluster.

Each operation carries exactly the data needed to execute it, so an op string
produced at plan time can be executed later without any planning context.
"""

from typing import Annotated, Any, ClassVar, Dict, Literal, Union

import orjson
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from kafka_connector.address import ResourceKind
from kafka_connector.common.exceptions import InvalidOperationError
from kafka_connector.resources.models import KafkaAcl, KafkaQuota, KafkaTopic


class _Op(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    resource_kind: ClassVar[ResourceKind]


class CreateTopic(_Op):
    resource_kind: ClassVar[ResourceKind] = ResourceKind.TOPIC

    op: Literal["CreateTopic"] = "CreateTopic"
    topic: KafkaTopic


class UpdateTopicPartitions(_Op):
    resource_kind: ClassVar[ResourceKind] = ResourceKind.TOPIC

    op: Literal["UpdateTopicPartitions"] = "UpdateTopicPartitions"
    partitions: int = Field(..., gt=0)


class UpdateTopicConfig(_Op):
    """Replaces the topic's dynamic config with the full map, not a delta."""

    resource_kind: ClassVar[ResourceKind] = ResourceKind.TOPIC

    op: Literal["UpdateTopicConfig"] = "UpdateTopicConfig"
    config: Dict[str, str]


class DeleteTopic(_Op):
    resource_kind: ClassVar[ResourceKind] = ResourceKind.TOPIC

    op: Literal["DeleteTopic"] = "DeleteTopic"


class CreateAcl(_Op):
    resource_kind: ClassVar[ResourceKind] = ResourceKind.ACL

    op: Literal["CreateAcl"] = "CreateAcl"
    acl: KafkaAcl


class DeleteAcl(_Op):
    resource_kind: ClassVar[ResourceKind] = ResourceKind.ACL

    op: Literal["DeleteAcl"] = "DeleteAcl"
    acl: KafkaAcl


class CreateQuota(_Op):
    resource_kind: ClassVar[ResourceKind] = ResourceKind.QUOTA

    op: Literal["CreateQuota"] = "CreateQuota"
    quota: KafkaQuota


class UpdateQuota(_Op):
    resource_kind: ClassVar[ResourceKind] = ResourceKind.QUOTA

    op: Literal["UpdateQuota"] = "UpdateQuota"
    quota: KafkaQuota


class DeleteQuota(_Op):
    resource_kind: ClassVar[ResourceKind] = ResourceKind.QUOTA

    op: Literal["DeleteQuota"] = "DeleteQuota"


KafkaConnectorOp = Annotated[
    Union[
        CreateTopic,
        UpdateTopicPartitions,
        UpdateTopicConfig,
        DeleteTopic,
        CreateAcl,
        DeleteAcl,
        CreateQuota,
        UpdateQuota,
        DeleteQuota,
    ],
    Field(discriminator="op"),
]

_op_adapter: TypeAdapter = TypeAdapter(KafkaConnectorOp)


def op_to_string(op: Any) -> str:
    """
    Encode an operation as compact JSON.

    Args:
        op: Any KafkaConnectorOp variant

    Returns:
        JSON string tagged with the variant name under ``op``
    """
    return orjson.dumps(op.model_dump(mode="json")).decode("utf-8")


def op_from_string(s: Union[str, bytes]) -> Any:
    """
    Decode an operation produced by ``op_to_string``.

    Raises:
        InvalidOperationError: If the string is not a known, well-formed operation
    """
    try:
        data = orjson.loads(s)
    except orjson.JSONDecodeError as e:
        raise InvalidOperationError(f"Operation is not valid JSON: {e}") from e

    try:
        return _op_adapter.validate_python(data)
    except ValidationError as e:
        raise InvalidOperationError(f"Invalid operation: {e.errors()[0]['msg']}") from e
