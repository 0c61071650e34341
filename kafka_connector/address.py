"""
Address codec for connector resources.

Every resource the connector manages lives at a canonical path under
``kafka/``:

    kafka/config.yaml                          -> ConfigAddress
    kafka/<cluster>/topics/<topic>.yaml        -> TopicAddress
    kafka/<cluster>/acls/<acl_id>.yaml         -> AclAddress
    kafka/<cluster>/quotas/<quota_id>.yaml     -> QuotaAddress
    kafka/task.yaml                            -> TaskAddress
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath
from typing import Optional, Union

from kafka_connector.common.exceptions import InvalidAddressError

ROOT = "kafka"
SUFFIX = ".yaml"


class ResourceKind(str, Enum):
    """Kinds of reconciled resource an address can point at."""

    TOPIC = "topic"
    ACL = "acl"
    QUOTA = "quota"


def _check_segment(value: str, name: str) -> None:
    if not isinstance(value, str) or not value:
        raise InvalidAddressError(repr(value), f"{name} must be a non-empty string")
    if "/" in value:
        raise InvalidAddressError(value, f"{name} must not contain '/'")
    if value in (".", ".."):
        raise InvalidAddressError(value, f"{name} must not be a relative path segment")


@dataclass(frozen=True)
class ConfigAddress:
    """The connector's own cluster-list configuration."""

    @property
    def kind(self) -> Optional[ResourceKind]:
        return None


@dataclass(frozen=True)
class TaskAddress:
    """A control-plane task request; carries no persisted resource state."""

    kind_name: str = "default"

    @property
    def kind(self) -> Optional[ResourceKind]:
        return None


@dataclass(frozen=True)
class TopicAddress:
    """One topic within one cluster."""

    cluster: str
    topic: str

    def __post_init__(self):
        _check_segment(self.cluster, "cluster")
        _check_segment(self.topic, "topic")

    @property
    def kind(self) -> ResourceKind:
        return ResourceKind.TOPIC

    @property
    def name(self) -> str:
        return self.topic


@dataclass(frozen=True)
class AclAddress:
    """One ACL entry within one cluster, keyed by an opaque identifier."""

    cluster: str
    acl_id: str

    def __post_init__(self):
        _check_segment(self.cluster, "cluster")
        _check_segment(self.acl_id, "acl_id")

    @property
    def kind(self) -> ResourceKind:
        return ResourceKind.ACL

    @property
    def name(self) -> str:
        return self.acl_id


@dataclass(frozen=True)
class QuotaAddress:
    """One quota within one cluster, keyed by an opaque identifier."""

    cluster: str
    quota_id: str

    def __post_init__(self):
        _check_segment(self.cluster, "cluster")
        _check_segment(self.quota_id, "quota_id")

    @property
    def kind(self) -> ResourceKind:
        return ResourceKind.QUOTA

    @property
    def name(self) -> str:
        return self.quota_id


ResourceAddress = Union[ConfigAddress, TopicAddress, AclAddress, QuotaAddress, TaskAddress]
ClusterAddress = Union[TopicAddress, AclAddress, QuotaAddress]

_COLLECTIONS = {
    "topics": TopicAddress,
    "acls": AclAddress,
    "quotas": QuotaAddress,
}


def encode_address(addr: ResourceAddress) -> str:
    """
    Encode an address to its canonical path.

    Args:
        addr: Any resource address

    Returns:
        Path string using ``/`` separators
    """
    if isinstance(addr, ConfigAddress):
        return f"{ROOT}/config{SUFFIX}"
    if isinstance(addr, TaskAddress):
        return f"{ROOT}/task{SUFFIX}"
    if isinstance(addr, TopicAddress):
        return f"{ROOT}/{addr.cluster}/topics/{addr.topic}{SUFFIX}"
    if isinstance(addr, AclAddress):
        return f"{ROOT}/{addr.cluster}/acls/{addr.acl_id}{SUFFIX}"
    if isinstance(addr, QuotaAddress):
        return f"{ROOT}/{addr.cluster}/quotas/{addr.quota_id}{SUFFIX}"
    raise InvalidAddressError(repr(addr), "not a resource address")


def split_path(path: Union[str, PurePath]) -> list:
    """
    Split a path into its segments.

    Leading ``.`` segments and empty segments are dropped; a ``.`` or ``..``
    anywhere else is kept so that non-canonical paths fail to decode.
    """
    text = path.as_posix() if isinstance(path, PurePath) else str(path)
    parts = [part for part in text.split("/") if part]
    while parts and parts[0] == ".":
        parts.pop(0)
    return parts


def _strip_suffix(segment: str, path: str) -> str:
    if not segment.endswith(SUFFIX):
        raise InvalidAddressError(path, f"expected '{SUFFIX}' suffix")
    return segment[: -len(SUFFIX)]


def decode_address(path: Union[str, PurePath]) -> ResourceAddress:
    """
    Decode a path into a typed address.

    Args:
        path: Path relative to the connector prefix

    Returns:
        The matching address

    Raises:
        InvalidAddressError: If the path matches none of the known shapes
    """
    raw = str(path)
    parts = split_path(path)

    if len(parts) == 2 and parts[0] == ROOT:
        if parts[1] == f"config{SUFFIX}":
            return ConfigAddress()
        if parts[1] == f"task{SUFFIX}":
            return TaskAddress()
        raise InvalidAddressError(raw)

    if len(parts) == 4 and parts[0] == ROOT and parts[2] in _COLLECTIONS:
        identifier = _strip_suffix(parts[3], raw)
        address_cls = _COLLECTIONS[parts[2]]
        try:
            return address_cls(parts[1], identifier)
        except InvalidAddressError as e:
            raise InvalidAddressError(raw, e.reason) from e

    raise InvalidAddressError(raw)


def cluster_path(cluster: str) -> str:
    """Path of the subtree holding every resource of one cluster."""
    return f"{ROOT}/{cluster}"


def addr_matches_filter(path: Union[str, PurePath], subpath: Union[str, PurePath]) -> bool:
    """
    Check whether a path falls under, or contains, a listing filter.

    Args:
        path: Candidate path, e.g. ``kafka/prod``
        subpath: Filter path; empty or ``.`` matches everything

    Returns:
        True if one path is a segment-wise prefix of the other
    """
    filter_parts = split_path(subpath)
    if not filter_parts:
        return True
    path_parts = split_path(path)
    common = min(len(filter_parts), len(path_parts))
    return filter_parts[:common] == path_parts[:common]
