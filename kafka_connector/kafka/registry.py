"""
Process-wide registry of cluster admin clients.

The registry owns the live admin handles, the loaded connector
configuration and the permit gate that bounds how many admin calls are in
flight across all clusters. Each of the three is guarded by its own
reader-writer lock: request paths take reader locks, (re)initialization
takes every writer lock.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Dict, List, Optional

from aiorwlock import RWLock

from kafka_connector.common.exceptions import ClusterNotFoundError
from kafka_connector.common.interface import IAdminClient
from kafka_connector.kafka.client import create_admin_client
from kafka_connector.kafka.config import KafkaClusterConfig, KafkaConnectorConfig

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str, KafkaClusterConfig], IAdminClient]


class ClusterRegistry:
    """Maps cluster names to admin clients behind a shared permit gate."""

    def __init__(self, client_factory: Optional[ClientFactory] = None):
        """
        Initialize an empty registry.

        Args:
            client_factory: Builds an admin client from a cluster config;
                defaults to ``create_admin_client``
        """
        self._client_factory = client_factory or create_admin_client
        self._clients: Dict[str, IAdminClient] = {}
        self._config = KafkaConnectorConfig(clusters={})
        self._semaphore = asyncio.Semaphore(1)

        self._clients_lock = RWLock()
        self._config_lock = RWLock()
        self._semaphore_lock = RWLock()

    async def initialize(self, config: KafkaConnectorConfig) -> None:
        """
        Build admin clients for every declared cluster and swap them in.

        Clients are built before any lock is taken, so a failing cluster
        leaves the previous state untouched.

        Args:
            config: Connector configuration

        Raises:
            ClientCreationError: If any cluster's client cannot be created
        """
        clients = {name: self._client_factory(name, cluster) for name, cluster in config.clusters.items()}

        async with self._config_lock.writer:
            async with self._semaphore_lock.writer:
                async with self._clients_lock.writer:
                    self._config = config
                    self._semaphore = asyncio.Semaphore(config.concurrent_requests)
                    self._clients = clients

        logger.info(
            f"Cluster registry initialized with {len(clients)} cluster(s), "
            f"{config.concurrent_requests} concurrent request permit(s)"
        )

    async def get_config(self) -> KafkaConnectorConfig:
        async with self._config_lock.reader:
            return self._config

    async def get_client(self, cluster: str) -> IAdminClient:
        """
        Resolve the admin client bound to a cluster.

        Raises:
            ClusterNotFoundError: If the cluster is not configured
        """
        async with self._clients_lock.reader:
            client = self._clients.get(cluster)
        if client is None:
            raise ClusterNotFoundError(cluster)
        return client

    async def get_clients(self) -> Dict[str, IAdminClient]:
        """Snapshot of every cluster's admin client."""
        async with self._clients_lock.reader:
            return dict(self._clients)

    async def cluster_names(self) -> List[str]:
        async with self._config_lock.reader:
            return sorted(self._config.clusters)

    @asynccontextmanager
    async def permit(self) -> AsyncIterator[None]:
        """
        Hold one permit of the process-wide gate for the duration of a remote call.

        The permit is released on exit whether or not the call raised.
        """
        async with self._semaphore_lock.reader:
            async with self._semaphore:
                yield
