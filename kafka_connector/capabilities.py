"""
Per resource kind capability flags.

ACL and quota management against a live cluster is not implemented yet:
fetching, listing and executing those kinds are reported as such instead
of pretending to succeed.
"""

from dataclasses import dataclass
from typing import Dict

from kafka_connector.address import ResourceKind


@dataclass(frozen=True)
class ResourceCapabilities:
    """What the connector can do against a live cluster for one resource kind."""

    get: bool
    list: bool
    execute: bool


CAPABILITIES: Dict[ResourceKind, ResourceCapabilities] = {
    ResourceKind.TOPIC: ResourceCapabilities(get=True, list=True, execute=True),
    ResourceKind.ACL: ResourceCapabilities(get=False, list=False, execute=False),
    ResourceKind.QUOTA: ResourceCapabilities(get=False, list=False, execute=False),
}


def capabilities_for(kind: ResourceKind) -> ResourceCapabilities:
    return CAPABILITIES[kind]
