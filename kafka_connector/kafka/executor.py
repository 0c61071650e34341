"""
Executes planned operations against the bound cluster.
"""

import asyncio
import logging
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from confluent_kafka import KafkaError, KafkaException
from confluent_kafka.admin import ConfigResource, NewPartitions, NewTopic

from kafka_connector.address import ClusterAddress, ResourceAddress, TopicAddress, encode_address
from kafka_connector.capabilities import capabilities_for
from kafka_connector.common.exceptions import (
    InvalidOperationError,
    NoResultReturnedError,
    RemoteOperationError,
)
from kafka_connector.kafka.registry import ClusterRegistry
from kafka_connector.ops import CreateTopic, UpdateTopicConfig, UpdateTopicPartitions

logger = logging.getLogger(__name__)


@dataclass
class OpExecResponse:
    """Outcome of executing one operation."""

    friendly_message: str
    outputs: Optional[Dict[str, str]] = None
    implemented: bool = True


def kafka_error_message(exc: BaseException) -> str:
    """Extract the broker's error string from a KafkaException."""
    if exc.args and isinstance(exc.args[0], KafkaError):
        return exc.args[0].str()
    return str(exc)


async def await_single_result(
    call: str,
    action: str,
    resource_name: str,
    submit: Callable[[], Dict[Any, Future]],
) -> Any:
    """
    Issue an admin call for a single item and await its per-item result.

    Args:
        call: Admin API name, used when no result comes back
        action: Verb phrase for failure messages, e.g. ``"create topic"``
        resource_name: Name of the item the call was issued for
        submit: Issues the call and returns confluent-kafka's item→future map

    Returns:
        The item's result value

    Raises:
        NoResultReturnedError: If the call returned no per-item results
        RemoteOperationError: If the call or the item failed
    """
    try:
        futures = submit()
    except KafkaException as e:
        raise RemoteOperationError(resource_name, action, kafka_error_message(e)) from e

    if not futures:
        raise NoResultReturnedError(call)

    future = next(iter(futures.values()))
    try:
        return await asyncio.wrap_future(future)
    except KafkaException as e:
        raise RemoteOperationError(resource_name, action, kafka_error_message(e)) from e


class OpExecutor:
    """Translates operations into admin calls on the cluster named by the address."""

    def __init__(self, registry: ClusterRegistry):
        self.registry = registry

    async def execute(self, addr: ResourceAddress, op: Any) -> OpExecResponse:
        """
        Execute one operation.

        Args:
            addr: Decoded address the operation applies to
            op: Any KafkaConnectorOp variant

        Returns:
            OpExecResponse with a human-readable summary

        Raises:
            InvalidOperationError: If the operation does not apply to the address
            ClusterNotFoundError: If the address names an unknown cluster
            RemoteOperationError: If the cluster rejects the request
            NoResultReturnedError: If the cluster returns no per-item result
        """
        kind = addr.kind
        if kind is None or op.resource_kind != kind:
            raise InvalidOperationError(f"Operation {op.op} is not valid for address {encode_address(addr)}")

        if not capabilities_for(kind).execute:
            logger.warning(
                f"{kind.value.capitalize()} operations not yet implemented for cluster '{addr.cluster}', "
                f"{kind.value} '{addr.name}'"
            )
            return OpExecResponse(
                friendly_message=f"{kind.value.capitalize()} operation not yet implemented",
                implemented=False,
            )

        return await self._execute_topic_op(addr, op)

    async def _execute_topic_op(self, addr: TopicAddress, op: Any) -> OpExecResponse:
        client = await self.registry.get_client(addr.cluster)
        config = await self.registry.get_config()
        timeout = config.operation_timeout
        cluster, topic = addr.cluster, addr.topic

        if isinstance(op, CreateTopic):
            new_topic = NewTopic(
                topic,
                num_partitions=op.topic.partitions,
                replication_factor=op.topic.replication_factor,
                config=dict(op.topic.config),
            )
            await self._call(
                addr,
                "create_topics",
                "create topic",
                lambda: client.create_topics([new_topic], operation_timeout=timeout, request_timeout=timeout),
            )
            message = f"Created topic '{topic}' in cluster '{cluster}'"

        elif isinstance(op, UpdateTopicPartitions):
            new_partitions = NewPartitions(topic, op.partitions)
            await self._call(
                addr,
                "create_partitions",
                "update partitions for topic",
                lambda: client.create_partitions(
                    [new_partitions], operation_timeout=timeout, request_timeout=timeout
                ),
            )
            message = f"Increased partitions for topic '{topic}' to {op.partitions} in cluster '{cluster}'"

        elif isinstance(op, UpdateTopicConfig):
            resource = ConfigResource(ConfigResource.Type.TOPIC, topic, set_config=dict(op.config))
            await self._call(
                addr,
                "alter_configs",
                "alter config for topic",
                lambda: client.alter_configs([resource], request_timeout=timeout),
            )
            message = f"Altered config for topic '{topic}' in cluster '{cluster}'"

        else:
            # execute() admits only topic ops here; DeleteTopic is the one left
            await self._call(
                addr,
                "delete_topics",
                "delete topic",
                lambda: client.delete_topics([topic], operation_timeout=timeout, request_timeout=timeout),
            )
            message = f"Deleted topic '{topic}' from cluster '{cluster}'"

        logger.info(message)
        return OpExecResponse(friendly_message=message)

    async def _call(
        self,
        addr: ClusterAddress,
        call: str,
        action: str,
        submit: Callable[[], Dict[Any, Future]],
    ) -> Any:
        async with self.registry.permit():
            try:
                return await await_single_result(call, action, addr.name, submit)
            except (RemoteOperationError, NoResultReturnedError) as e:
                logger.error(f"{call} failed in cluster '{addr.cluster}': {e}")
                raise
