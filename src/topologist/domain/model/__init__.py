"""Domain model for topologies and access-control bindings."""

from __future__ import annotations

from .acl import (
    ANY_HOST,
    CLUSTER_RESOURCE_NAME,
    AccessBinding,
    AclOperation,
    AclPermission,
    PatternType,
    ResourceType,
    sorted_bindings,
)
from .topology import (
    DEFAULT_PARTITIONS,
    DEFAULT_REPLICATION_FACTOR,
    Connector,
    Consumer,
    KafkaStreams,
    Producer,
    Project,
    Topic,
    TopicSchemas,
    Topology,
)

__all__ = [
    "ANY_HOST",
    "CLUSTER_RESOURCE_NAME",
    "DEFAULT_PARTITIONS",
    "DEFAULT_REPLICATION_FACTOR",
    "AccessBinding",
    "AclOperation",
    "AclPermission",
    "Connector",
    "Consumer",
    "KafkaStreams",
    "PatternType",
    "Producer",
    "Project",
    "ResourceType",
    "Topic",
    "TopicSchemas",
    "Topology",
    "sorted_bindings",
]
