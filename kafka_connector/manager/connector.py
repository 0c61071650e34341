"""
Connector service.

``KafkaConnector`` is the surface an external orchestrator talks to: it
classifies and lists paths, fetches live state, plans and executes changes,
and validates payloads. It owns the cluster registry; planning never touches
it.
"""

import asyncio
import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Type, Union

from confluent_kafka import KafkaException
from confluent_kafka.admin import ConfigResource
from pydantic import BaseModel

from kafka_connector.address import (
    AclAddress,
    ConfigAddress,
    QuotaAddress,
    ResourceKind,
    TaskAddress,
    TopicAddress,
    addr_matches_filter,
    cluster_path,
    decode_address,
    encode_address,
)
from kafka_connector.capabilities import capabilities_for
from kafka_connector.common.exceptions import DeserializeError, InvalidAddressError
from kafka_connector.kafka.config import (
    KafkaClusterConfig,
    KafkaConnectorConfig,
    KafkaTlsConfig,
    NoAuth,
    SaslGssapiAuth,
    SaslPlainAuth,
    SaslScramSha256Auth,
    SaslScramSha512Auth,
)
from kafka_connector.kafka.executor import OpExecResponse, OpExecutor, await_single_result, kafka_error_message
from kafka_connector.kafka.registry import ClusterRegistry
from kafka_connector.manager.models import (
    Diagnostic,
    DiagnosticResponse,
    FilterResponse,
    GetDocResponse,
    GetResourceResponse,
    OpExecOutcome,
    SkeletonResponse,
    TaskExecResponse,
)
from kafka_connector.ops import op_from_string
from kafka_connector.planner import PlanResponseElement, plan
from kafka_connector.resources.models import KafkaAcl, KafkaQuota, KafkaTopic
from kafka_connector.resources.serialization import deserialize, serialize

logger = logging.getLogger(__name__)

Payload = Union[bytes, str]

DOC_TYPES: Dict[str, Type[BaseModel]] = {
    model.__name__: model
    for model in (
        KafkaConnectorConfig,
        KafkaClusterConfig,
        KafkaTlsConfig,
        NoAuth,
        SaslPlainAuth,
        SaslScramSha256Auth,
        SaslScramSha512Auth,
        SaslGssapiAuth,
        KafkaTopic,
        KafkaAcl,
        KafkaQuota,
    )
}


def _as_bytes(data: Optional[Payload]) -> Optional[bytes]:
    if isinstance(data, str):
        return data.encode("utf-8")
    return data


class KafkaConnector:
    """Reconciles declared Kafka resources against live clusters."""

    def __init__(self, prefix: Union[str, Path] = ".", registry: Optional[ClusterRegistry] = None):
        """
        Initialize the connector.

        Args:
            prefix: Directory holding the ``kafka/`` resource tree
            registry: Cluster registry; a new one is created if None
        """
        self.prefix = Path(prefix)
        self.registry = registry or ClusterRegistry()
        self.executor = OpExecutor(self.registry)

    async def init(self, config: Optional[KafkaConnectorConfig] = None) -> None:
        """
        Load the configuration and (re)build the cluster registry.

        Args:
            config: Explicit configuration; read from ``<prefix>/kafka/config.yaml`` if None
        """
        if config is None:
            config = KafkaConnectorConfig.try_load(self.prefix) or KafkaConnectorConfig()
        await self.registry.initialize(config)
        logger.info(f"KafkaConnector initialized for prefix {self.prefix}")

    async def filter(self, path: Union[str, Path]) -> FilterResponse:
        try:
            addr = decode_address(path)
        except InvalidAddressError:
            return FilterResponse.NONE

        if isinstance(addr, ConfigAddress):
            return FilterResponse.CONFIG
        if isinstance(addr, TaskAddress):
            return FilterResponse.NONE
        return FilterResponse.RESOURCE

    async def subpaths(self) -> List[str]:
        return [cluster_path(name) for name in await self.registry.cluster_names()]

    async def list(self, subpath: Union[str, Path] = "") -> List[str]:
        """
        List the paths of live resources under a subpath.

        A cluster whose metadata cannot be fetched is skipped with a warning;
        it does not fail the listing.

        Args:
            subpath: Filter path; empty lists every cluster

        Returns:
            Sorted resource paths
        """
        config = await self.registry.get_config()
        clients = await self.registry.get_clients()
        results: List[str] = []

        for cluster_name in sorted(clients):
            if not addr_matches_filter(cluster_path(cluster_name), subpath):
                continue

            client = clients[cluster_name]
            try:
                async with self.registry.permit():
                    metadata = await asyncio.to_thread(client.list_topics, timeout=config.operation_timeout)
            except KafkaException as e:
                logger.warning(f"Failed to fetch metadata for cluster '{cluster_name}': {kafka_error_message(e)}")
                continue

            for topic_name in sorted(metadata.topics):
                # Skip internal Kafka topics
                if topic_name.startswith("__"):
                    continue
                path = encode_address(TopicAddress(cluster_name, topic_name))
                if addr_matches_filter(path, subpath):
                    results.append(path)

            for kind in (ResourceKind.ACL, ResourceKind.QUOTA):
                if not capabilities_for(kind).list:
                    logger.warning(f"{kind.value.capitalize()} listing not yet implemented for cluster '{cluster_name}'")

        return results

    async def get(self, path: Union[str, Path]) -> Optional[GetResourceResponse]:
        """
        Fetch the live state of a resource.

        Returns:
            GetResourceResponse, or None if the resource does not exist

        Raises:
            InvalidAddressError: If the path is not a known address
            ClusterNotFoundError: If the address names an unknown cluster
        """
        addr = decode_address(path)

        if isinstance(addr, (ConfigAddress, TaskAddress)):
            return None

        if not capabilities_for(addr.kind).get:
            logger.warning(
                f"{addr.kind.value.capitalize()} fetching not yet implemented for cluster '{addr.cluster}', "
                f"{addr.kind.value} '{addr.name}'"
            )
            return None

        topic = await self._get_topic(addr)
        if topic is None:
            return None
        return GetResourceResponse(resource_definition=serialize(topic))

    async def _get_topic(self, addr: TopicAddress) -> Optional[KafkaTopic]:
        client = await self.registry.get_client(addr.cluster)
        config = await self.registry.get_config()
        timeout = config.operation_timeout

        try:
            async with self.registry.permit():
                metadata = await asyncio.to_thread(client.list_topics, topic=addr.topic, timeout=timeout)
        except KafkaException as e:
            logger.debug(f"Metadata request for topic '{addr.topic}' failed: {kafka_error_message(e)}")
            return None

        topic_metadata = metadata.topics.get(addr.topic)
        if topic_metadata is None or topic_metadata.error is not None:
            return None

        partitions = topic_metadata.partitions
        first_partition = partitions[min(partitions)] if partitions else None
        replication_factor = len(first_partition.replicas) if first_partition is not None else 1

        resource = ConfigResource(ConfigResource.Type.TOPIC, addr.topic)
        async with self.registry.permit():
            entries = await await_single_result(
                "describe_configs",
                "describe configs for topic",
                addr.topic,
                lambda: client.describe_configs([resource], request_timeout=timeout),
            )

        topic_config: Dict[str, str] = {}
        for entry in sorted(entries.values(), key=lambda e: e.name):
            if entry.is_read_only or entry.is_sensitive or entry.is_default or entry.value is None:
                continue
            topic_config[entry.name] = entry.value

        return KafkaTopic(
            partitions=len(partitions),
            replication_factor=replication_factor,
            config=topic_config,
        )

    async def plan(
        self,
        path: Union[str, Path],
        current: Optional[Payload],
        desired: Optional[Payload],
    ) -> List[PlanResponseElement]:
        """Plan the operations that move ``current`` to ``desired``; see ``planner.plan``."""
        addr = decode_address(path)
        return plan(addr, _as_bytes(current), _as_bytes(desired))

    async def op_exec(self, path: Union[str, Path], op_definition: str) -> OpExecResponse:
        """
        Execute one operation produced by ``plan``.

        Raises:
            InvalidAddressError: If the path is not a known address
            InvalidOperationError: If the operation is malformed or does not apply
            ClusterNotFoundError: If the address names an unknown cluster
            RemoteOperationError: If the cluster rejects the request
            NoResultReturnedError: If the cluster returns no per-item result
        """
        addr = decode_address(path)
        op = op_from_string(op_definition)
        return await self.executor.execute(addr, op)

    async def op_exec_batch(self, items: Sequence[Tuple[str, str]]) -> List[OpExecOutcome]:
        """
        Execute operations for many addresses concurrently.

        A failing item is reported in its own outcome and never aborts the
        others; the registry's permit gate bounds how many run at once.

        Args:
            items: (path, op_definition) pairs

        Returns:
            One outcome per item, in input order
        """

        async def run(path: str, op_definition: str) -> OpExecOutcome:
            try:
                response = await self.op_exec(path, op_definition)
                return OpExecOutcome(path=path, ok=True, response=response)
            except Exception as e:
                logger.error(f"Failed to execute operation for {path}: {e}")
                return OpExecOutcome(path=path, ok=False, error=str(e))

        return list(await asyncio.gather(*(run(path, op) for path, op in items)))

    async def diag(self, path: Union[str, Path], body: Payload) -> Optional[DiagnosticResponse]:
        """
        Check a payload against the schema of its address.

        Returns:
            None if the payload is valid, else the diagnostics found
        """
        addr = decode_address(path)
        try:
            self._decode_for_compare(addr, body)
        except DeserializeError as e:
            return DiagnosticResponse(
                diagnostics=[Diagnostic(message=e.message, field=e.field, line=e.line, column=e.column)]
            )
        return None

    async def eq(self, path: Union[str, Path], a: Payload, b: Payload) -> bool:
        """Semantic equality of two payloads after decoding, not byte equality."""
        addr = decode_address(path)
        return self._decode_for_compare(addr, a) == self._decode_for_compare(addr, b)

    def _decode_for_compare(self, addr, body: Payload):
        if isinstance(addr, ConfigAddress):
            return KafkaConnectorConfig.from_bytes(body)
        if isinstance(addr, TaskAddress):
            raise InvalidAddressError(encode_address(addr), "task addresses carry no resource payload")
        return deserialize(addr, body)

    async def get_skeletons(self) -> List[SkeletonResponse]:
        """Template payloads for every resource kind at placeholder addresses."""
        topic = KafkaTopic(
            partitions=3,
            replication_factor=2,
            config={"retention.ms": "604800000", "compression.type": "snappy"},
        )
        acl = KafkaAcl(
            resource_type="Topic",
            resource_name="",
            pattern_type="Literal",
            principal={"principal_type": "User", "name": ""},
            operation="All",
            permission="Allow",
        )
        quota = KafkaQuota(entities=[])

        return [
            SkeletonResponse(encode_address(ConfigAddress()), KafkaConnectorConfig().to_bytes()),
            SkeletonResponse(encode_address(TopicAddress("[cluster_name]", "[topic_name]")), serialize(topic)),
            SkeletonResponse(encode_address(AclAddress("[cluster_name]", "[acl_identifier]")), serialize(acl)),
            SkeletonResponse(encode_address(QuotaAddress("[cluster_name]", "[quota_identifier]")), serialize(quota)),
        ]

    async def get_docstring(self, type_name: str, field: Optional[str] = None) -> Optional[GetDocResponse]:
        """
        Describe a configuration or resource model, or one of its fields.

        Returns:
            GetDocResponse, or None for an unknown model or field
        """
        model = DOC_TYPES.get(type_name)
        if model is None:
            return None

        if field is None:
            doc = (model.__doc__ or "").strip()
            return GetDocResponse(markdown=doc) if doc else None

        field_info = model.model_fields.get(field)
        if field_info is None or not field_info.description:
            return None
        return GetDocResponse(markdown=field_info.description)

    async def task_exec(
        self,
        path: Union[str, Path],
        body: Payload,
        arg: Optional[bytes] = None,
        state: Optional[bytes] = None,
    ) -> TaskExecResponse:
        """Accept a task request; tasks carry no connector-side behaviour yet."""
        decode_address(path)
        return TaskExecResponse()

    async def close(self) -> None:
        logger.info("KafkaConnector closed")

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
