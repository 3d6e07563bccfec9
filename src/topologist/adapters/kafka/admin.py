"""ClusterAdmin implementation backed by ``confluent_kafka.admin.AdminClient``."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from logging import getLogger
from typing import TYPE_CHECKING, Final

from confluent_kafka import KafkaException
from confluent_kafka.admin import (
    AclBinding,
    AclBindingFilter,
    AclPermissionType,
    AdminClient,
    AlterConfigOpType,
    ConfigEntry,
    ConfigResource,
    NewPartitions,
    NewTopic,
    ResourcePatternType,
)
from confluent_kafka.admin import AclOperation as KafkaAclOperation
from confluent_kafka.admin import ResourceType as KafkaResourceType

from topologist.domain.errors import ClusterAdminError
from topologist.domain.model import (
    AccessBinding,
    AclOperation,
    AclPermission,
    PatternType,
    ResourceType,
)

if TYPE_CHECKING:
    from collections.abc import Iterable
    from concurrent.futures import Future

log = getLogger(__name__)

type AdminClientFactory = Callable[[Mapping[str, str]], AdminClient]

DEFAULT_TIMEOUT_SECONDS: Final[float] = 30.0

# librdkafka names the cluster resource BROKER
_RESOURCE_TYPES: Final[dict[ResourceType, KafkaResourceType]] = {
    ResourceType.TOPIC: KafkaResourceType.TOPIC,
    ResourceType.GROUP: KafkaResourceType.GROUP,
    ResourceType.CLUSTER: KafkaResourceType.BROKER,
    ResourceType.TRANSACTIONAL_ID: KafkaResourceType.TRANSACTIONAL_ID,
}
_DOMAIN_RESOURCE_TYPES: Final[dict[KafkaResourceType, ResourceType]] = {
    kafka: domain for domain, kafka in _RESOURCE_TYPES.items()
}


def _default_client_factory(properties: Mapping[str, str]) -> AdminClient:
    return AdminClient(dict(properties))


def to_kafka_binding(binding: AccessBinding) -> AclBinding:
    return AclBinding(
        _RESOURCE_TYPES[binding.resource_type],
        binding.resource_name,
        ResourcePatternType[binding.pattern_type.value],
        binding.principal,
        binding.host,
        KafkaAclOperation[binding.operation.value],
        AclPermissionType[binding.permission.value],
    )


def to_kafka_filter(binding: AccessBinding) -> AclBindingFilter:
    return AclBindingFilter(
        _RESOURCE_TYPES[binding.resource_type],
        binding.resource_name,
        ResourcePatternType[binding.pattern_type.value],
        binding.principal,
        binding.host,
        KafkaAclOperation[binding.operation.value],
        AclPermissionType[binding.permission.value],
    )


def from_kafka_binding(binding: AclBinding) -> AccessBinding | None:
    resource_type = _DOMAIN_RESOURCE_TYPES.get(binding.restype)
    try:
        return AccessBinding(
            resource_type=resource_type or ResourceType(binding.restype.name),
            resource_name=binding.name,
            pattern_type=PatternType(binding.resource_pattern_type.name),
            principal=binding.principal,
            operation=AclOperation(binding.operation.name),
            permission=AclPermission(binding.permission_type.name),
            host=binding.host,
        )
    except ValueError:
        log.debug("Ignoring unsupported ACL %s", binding)
        return None


class ConfluentClusterAdmin:
    def __init__(
        self,
        properties: Mapping[str, str],
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        client_factory: AdminClientFactory = _default_client_factory,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self._client: AdminClient | None = client_factory(properties)

    def list_topics(self) -> set[str]:
        try:
            metadata = self._require_client().list_topics(timeout=self.timeout_seconds)
        except KafkaException as exc:
            raise ClusterAdminError(f"Failed to list topics: {exc}") from exc
        return set(metadata.topics)

    def partition_count(self, topic: str) -> int:
        try:
            metadata = self._require_client().list_topics(
                topic=topic, timeout=self.timeout_seconds
            )
        except KafkaException as exc:
            raise ClusterAdminError(f"Failed to describe topic {topic}: {exc}") from exc
        topic_metadata = metadata.topics.get(topic)
        if topic_metadata is None or topic_metadata.error is not None:
            raise ClusterAdminError(f"Topic {topic} is not available")
        return len(topic_metadata.partitions)

    def describe_topic_config(self, topic: str) -> dict[str, str]:
        resource = ConfigResource(KafkaResourceType.TOPIC, topic)
        futures = self._require_client().describe_configs(
            [resource], request_timeout=self.timeout_seconds
        )
        config: dict[str, str] = {}
        for future in futures.values():
            entries = _wait(future, f"describe config of {topic}")
            config.update(
                {name: entry.value for name, entry in entries.items() if entry.value is not None}
            )
        return config

    def create_topic(
        self,
        topic: str,
        *,
        partitions: int,
        replication_factor: int,
        config: Mapping[str, str],
    ) -> None:
        new_topic = NewTopic(
            topic,
            num_partitions=partitions,
            replication_factor=replication_factor,
            config=dict(config),
        )
        futures = self._require_client().create_topics(
            [new_topic], request_timeout=self.timeout_seconds
        )
        _wait_all(futures, f"create topic {topic}")

    def update_topic_config(self, topic: str, config: Mapping[str, str]) -> None:
        resource = ConfigResource(
            KafkaResourceType.TOPIC,
            topic,
            incremental_configs=[
                ConfigEntry(name, value, incremental_operation=AlterConfigOpType.SET)
                for name, value in sorted(config.items())
            ],
        )
        futures = self._require_client().incremental_alter_configs(
            [resource], request_timeout=self.timeout_seconds
        )
        _wait_all(futures, f"update config of {topic}")

    def add_partitions(self, topic: str, total_count: int) -> None:
        futures = self._require_client().create_partitions(
            [NewPartitions(topic, total_count)], request_timeout=self.timeout_seconds
        )
        _wait_all(futures, f"add partitions to {topic}")

    def delete_topics(self, topics: Iterable[str]) -> None:
        names = list(topics)
        if not names:
            return
        futures = self._require_client().delete_topics(
            names, operation_timeout=self.timeout_seconds
        )
        _wait_all(futures, f"delete topics {', '.join(names)}")

    def list_acls(self) -> set[AccessBinding]:
        acl_filter = AclBindingFilter(
            KafkaResourceType.ANY,
            None,
            ResourcePatternType.ANY,
            None,
            None,
            KafkaAclOperation.ANY,
            AclPermissionType.ANY,
        )
        future = self._require_client().describe_acls(
            acl_filter, request_timeout=self.timeout_seconds
        )
        bindings: set[AccessBinding] = set()
        for kafka_binding in _wait(future, "describe ACLs"):
            binding = from_kafka_binding(kafka_binding)
            if binding is not None:
                bindings.add(binding)
        return bindings

    def create_acls(self, bindings: Iterable[AccessBinding]) -> None:
        kafka_bindings = [to_kafka_binding(binding) for binding in bindings]
        if not kafka_bindings:
            return
        futures = self._require_client().create_acls(
            kafka_bindings, request_timeout=self.timeout_seconds
        )
        _wait_all(futures, "create ACLs")

    def delete_acls(self, bindings: Iterable[AccessBinding]) -> None:
        filters = [to_kafka_filter(binding) for binding in bindings]
        if not filters:
            return
        futures = self._require_client().delete_acls(
            filters, request_timeout=self.timeout_seconds
        )
        _wait_all(futures, "delete ACLs")

    def close(self) -> None:
        if self._client is not None:
            log.debug("Releasing Kafka admin client")
        self._client = None

    def _require_client(self) -> AdminClient:
        if self._client is None:
            raise ClusterAdminError("Kafka admin client already closed")
        return self._client


def _wait[T](future: Future[T], description: str) -> T:
    try:
        return future.result()
    except (KafkaException, ValueError, TypeError) as exc:
        raise ClusterAdminError(f"Failed to {description}: {exc}") from exc


def _wait_all(futures: Mapping[object, Future[object]], description: str) -> None:
    for future in futures.values():
        _wait(future, description)
