from concurrent.futures import Future
from typing import Any, Dict, List, Optional, Protocol


class IAdminClient(Protocol):
    """The subset of ``confluent_kafka.admin.AdminClient`` the connector relies on."""

    def list_topics(self, topic: Optional[str] = None, timeout: float = -1) -> Any:
        """Returns cluster metadata whose ``topics`` maps names to topic metadata."""
        ...

    def describe_configs(self, resources: List[Any], **kwargs) -> Dict[Any, Future]:
        """Returns one future per requested config resource."""
        ...

    def create_topics(self, new_topics: List[Any], **kwargs) -> Dict[str, Future]:
        """Returns one future per requested topic."""
        ...

    def create_partitions(self, new_partitions: List[Any], **kwargs) -> Dict[str, Future]:
        """Returns one future per requested topic."""
        ...

    def alter_configs(self, resources: List[Any], **kwargs) -> Dict[Any, Future]:
        """Returns one future per requested config resource."""
        ...

    def delete_topics(self, topics: List[str], **kwargs) -> Dict[str, Future]:
        """Returns one future per requested topic."""
        ...
