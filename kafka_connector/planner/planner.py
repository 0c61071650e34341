"""
Reconciliation planner.

Compares the current and desired payloads of one address and produces the
ordered operations that move the cluster from one to the other. Planning is
a pure function of its inputs: it never talks to a cluster.
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from kafka_connector.address import (
    AclAddress,
    QuotaAddress,
    ResourceAddress,
    TopicAddress,
    encode_address,
)
from kafka_connector.common.exceptions import ImmutableFieldError, UnsupportedTransitionError
from kafka_connector.ops import (
    CreateAcl,
    CreateQuota,
    CreateTopic,
    DeleteAcl,
    DeleteQuota,
    DeleteTopic,
    UpdateQuota,
    UpdateTopicConfig,
    UpdateTopicPartitions,
    op_to_string,
)
from kafka_connector.resources.models import KafkaAcl, KafkaQuota, KafkaTopic
from kafka_connector.resources.serialization import deserialize, expect_kind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlanResponseElement:
    """One planned operation with a human-readable justification."""

    op: Any
    friendly_message: str

    @property
    def op_definition(self) -> str:
        """Wire form of the operation, as accepted by ``op_exec``."""
        return op_to_string(self.op)


def _decode(addr: ResourceAddress, data: Optional[bytes], model_cls):
    if data is None:
        return None
    return expect_kind(deserialize(addr, data), model_cls)


def plan_topic(addr: TopicAddress, current: Optional[bytes], desired: Optional[bytes]) -> List[PlanResponseElement]:
    """
    Plan changes for a topic.

    Partitions may only grow and the replication factor may never change;
    either violation rejects the whole plan.

    Raises:
        UnsupportedTransitionError: If the partition count would decrease
        ImmutableFieldError: If the replication factor would change
    """
    current_topic = _decode(addr, current, KafkaTopic)
    desired_topic = _decode(addr, desired, KafkaTopic)
    ops: List[PlanResponseElement] = []

    if current_topic is None and desired_topic is None:
        return ops

    if current_topic is None:
        ops.append(
            PlanResponseElement(
                CreateTopic(topic=desired_topic),
                f"Create topic with {desired_topic.partitions} partitions "
                f"and replication factor {desired_topic.replication_factor}",
            )
        )
        return ops

    if desired_topic is None:
        ops.append(PlanResponseElement(DeleteTopic(), "Delete topic"))
        return ops

    if desired_topic.partitions > current_topic.partitions:
        ops.append(
            PlanResponseElement(
                UpdateTopicPartitions(partitions=desired_topic.partitions),
                f"Increase partitions from {current_topic.partitions} to {desired_topic.partitions}",
            )
        )
    elif desired_topic.partitions < current_topic.partitions:
        raise UnsupportedTransitionError(
            f"Cannot decrease partition count from {current_topic.partitions} to {desired_topic.partitions} "
            "(partitions for existing topics can only be increased)"
        )

    if desired_topic.replication_factor != current_topic.replication_factor:
        raise ImmutableFieldError(
            "replication_factor", current_topic.replication_factor, desired_topic.replication_factor
        )

    # dict equality ignores key order
    if desired_topic.config != current_topic.config:
        ops.append(
            PlanResponseElement(
                UpdateTopicConfig(config=dict(desired_topic.config)),
                "Update topic configuration",
            )
        )

    return ops


def plan_acl(addr: AclAddress, current: Optional[bytes], desired: Optional[bytes]) -> List[PlanResponseElement]:
    """Plan changes for an ACL; a changed ACL is deleted and then recreated."""
    current_acl = _decode(addr, current, KafkaAcl)
    desired_acl = _decode(addr, desired, KafkaAcl)
    ops: List[PlanResponseElement] = []

    if current_acl is None and desired_acl is None:
        return ops

    if current_acl is None:
        ops.append(
            PlanResponseElement(
                CreateAcl(acl=desired_acl),
                f"Create ACL for {desired_acl.principal} on {desired_acl.resource_name}",
            )
        )
    elif desired_acl is None:
        ops.append(PlanResponseElement(DeleteAcl(acl=current_acl), "Delete ACL"))
    elif current_acl != desired_acl:
        # Delete precedes create
        ops.append(PlanResponseElement(DeleteAcl(acl=current_acl), "Delete old ACL"))
        ops.append(
            PlanResponseElement(
                CreateAcl(acl=desired_acl),
                f"Create new ACL for {desired_acl.principal} on {desired_acl.resource_name}",
            )
        )

    return ops


def plan_quota(addr: QuotaAddress, current: Optional[bytes], desired: Optional[bytes]) -> List[PlanResponseElement]:
    """Plan changes for a quota; any difference overwrites the whole quota."""
    current_quota = _decode(addr, current, KafkaQuota)
    desired_quota = _decode(addr, desired, KafkaQuota)
    ops: List[PlanResponseElement] = []

    if current_quota is None and desired_quota is None:
        return ops

    if current_quota is None:
        ops.append(PlanResponseElement(CreateQuota(quota=desired_quota), "Create quota"))
    elif desired_quota is None:
        ops.append(PlanResponseElement(DeleteQuota(), "Delete quota"))
    elif current_quota != desired_quota:
        ops.append(PlanResponseElement(UpdateQuota(quota=desired_quota), "Update quota"))

    return ops


def plan(addr: ResourceAddress, current: Optional[bytes], desired: Optional[bytes]) -> List[PlanResponseElement]:
    """
    Plan the operations that move ``current`` to ``desired`` for one address.

    Args:
        addr: Decoded address of the resource
        current: Live payload, or None if the resource does not exist
        desired: Declared payload, or None if the resource should not exist

    Returns:
        Ordered operations; empty when nothing needs to change

    Raises:
        DeserializeError: If either payload is malformed for the address kind
        PlanValidationError: If the transition is not allowed
    """
    if isinstance(addr, TopicAddress):
        ops = plan_topic(addr, current, desired)
    elif isinstance(addr, AclAddress):
        ops = plan_acl(addr, current, desired)
    elif isinstance(addr, QuotaAddress):
        ops = plan_quota(addr, current, desired)
    else:
        # Config and Task addresses are not reconciled resources
        return []

    logger.debug(f"Planned {len(ops)} operation(s) for {encode_address(addr)}")
    return ops
