from __future__ import annotations

from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import pytest
from confluent_kafka import KafkaException
from confluent_kafka.admin import (
    AclBinding,
    AclPermissionType,
    AlterConfigOpType,
    ResourcePatternType,
)
from confluent_kafka.admin import AclOperation as KafkaAclOperation
from confluent_kafka.admin import ResourceType as KafkaResourceType

from tests.helpers.fakes import make_binding
from topologist.adapters.kafka import ConfluentClusterAdmin, from_kafka_binding, to_kafka_binding
from topologist.domain.errors import ClusterAdminError
from topologist.domain.model import (
    CLUSTER_RESOURCE_NAME,
    AccessBinding,
    AclOperation,
    PatternType,
    ResourceType,
)

if TYPE_CHECKING:
    from collections.abc import Mapping


def _done[T](value: T) -> Future[T]:
    future: Future[T] = Future()
    future.set_result(value)
    return future


def _failed(error: Exception) -> Future[object]:
    future: Future[object] = Future()
    future.set_exception(error)
    return future


@dataclass
class FakeTopicMetadata:
    partitions: dict[int, object]
    error: object | None = None


@dataclass
class FakeClusterMetadata:
    topics: dict[str, FakeTopicMetadata]


@dataclass
class FakeConfigEntry:
    value: str | None


@dataclass
class FakeAdminClient:
    topics: dict[str, int] = field(default_factory=dict[str, int])
    acls: list[AclBinding] = field(default_factory=list[AclBinding])
    requests: list[tuple[str, object]] = field(default_factory=list[tuple[str, object]])
    failure: Exception | None = None

    def list_topics(self, topic: str | None = None, timeout: float = -1) -> FakeClusterMetadata:
        del timeout
        names = [topic] if topic else list(self.topics)
        return FakeClusterMetadata(
            topics={
                name: FakeTopicMetadata(partitions=dict.fromkeys(range(self.topics[name])))
                for name in names
                if name in self.topics
            }
        )

    def describe_configs(self, resources: list[object], **_: object) -> dict[int, Future[object]]:
        config = {"cleanup.policy": FakeConfigEntry("delete"), "unset": FakeConfigEntry(None)}
        return {index: _done(config) for index, _resource in enumerate(resources)}

    def create_topics(self, new_topics: list[object], **_: object) -> dict[str, Future[object]]:
        self.requests.append(("create_topics", new_topics))
        return {"topic": _failed(self.failure) if self.failure else _done(None)}

    def incremental_alter_configs(
        self, resources: list[object], **_: object
    ) -> dict[int, Future[object]]:
        self.requests.append(("incremental_alter_configs", resources))
        return {index: _done(None) for index, _resource in enumerate(resources)}

    def create_partitions(
        self, new_partitions: list[object], **_: object
    ) -> dict[str, Future[object]]:
        self.requests.append(("create_partitions", new_partitions))
        return {"topic": _done(None)}

    def delete_topics(self, topics: list[str], **_: object) -> dict[str, Future[object]]:
        self.requests.append(("delete_topics", topics))
        return {topic: _done(None) for topic in topics}

    def describe_acls(self, acl_filter: object, **_: object) -> Future[list[AclBinding]]:
        self.requests.append(("describe_acls", acl_filter))
        return _done(list(self.acls))

    def create_acls(self, bindings: list[AclBinding], **_: object) -> dict[int, Future[object]]:
        self.requests.append(("create_acls", bindings))
        return {index: _done(None) for index, _binding in enumerate(bindings)}

    def delete_acls(self, filters: list[object], **_: object) -> dict[int, Future[object]]:
        self.requests.append(("delete_acls", filters))
        return {index: _done([]) for index, _filter in enumerate(filters)}


def _admin(
    client: FakeAdminClient, seen: list[Mapping[str, str]] | None = None
) -> ConfluentClusterAdmin:
    def factory(properties: Mapping[str, str]) -> FakeAdminClient:
        if seen is not None:
            seen.append(properties)
        return client

    return ConfluentClusterAdmin(
        {"bootstrap.servers": "broker:9092"},
        client_factory=factory,  # type: ignore[arg-type]
    )


def test_properties_are_passed_to_the_client() -> None:
    seen: list[Mapping[str, str]] = []

    _admin(FakeAdminClient(), seen)

    assert seen == [{"bootstrap.servers": "broker:9092"}]


def test_topics_and_partitions() -> None:
    admin = _admin(FakeAdminClient(topics={"a": 3, "b": 1}))

    assert admin.list_topics() == {"a", "b"}
    assert admin.partition_count("a") == 3
    with pytest.raises(ClusterAdminError, match="not available"):
        admin.partition_count("missing")


def test_describe_topic_config_drops_unset_values() -> None:
    admin = _admin(FakeAdminClient(topics={"a": 1}))

    assert admin.describe_topic_config("a") == {"cleanup.policy": "delete"}


def test_create_topic_builds_new_topic() -> None:
    client = FakeAdminClient()
    admin = _admin(client)

    admin.create_topic("ctx.t", partitions=4, replication_factor=2, config={"a": "b"})

    ((request, (new_topic,)),) = client.requests
    assert request == "create_topics"
    assert new_topic.topic == "ctx.t"
    assert new_topic.num_partitions == 4
    assert new_topic.replication_factor == 2
    assert new_topic.config == {"a": "b"}


def test_kafka_errors_become_cluster_admin_errors() -> None:
    admin = _admin(FakeAdminClient(failure=KafkaException("topic exists")))

    with pytest.raises(ClusterAdminError, match="Failed to create topic ctx.t: .*topic exists"):
        admin.create_topic("ctx.t", partitions=1, replication_factor=1, config={})


@pytest.mark.parametrize("error", [ValueError("bad topic name"), TypeError("bad topic name")])
def test_argument_errors_from_futures_become_cluster_admin_errors(error: Exception) -> None:
    admin = _admin(FakeAdminClient(failure=error))

    with pytest.raises(ClusterAdminError, match="Failed to create topic ctx.t: bad topic name"):
        admin.create_topic("ctx.t", partitions=1, replication_factor=1, config={})


def test_update_config_uses_incremental_set() -> None:
    client = FakeAdminClient()

    _admin(client).update_topic_config("ctx.t", {"retention.ms": "10"})

    ((_request, (resource,)),) = client.requests
    (entry,) = resource.incremental_configs
    assert entry.name == "retention.ms"
    assert entry.value == "10"
    assert entry.incremental_operation == AlterConfigOpType.SET


def test_add_partitions_and_delete_topics() -> None:
    client = FakeAdminClient()
    admin = _admin(client)

    admin.add_partitions("ctx.t", 6)
    admin.delete_topics(["ctx.a", "ctx.b"])
    admin.delete_topics([])

    assert [request for request, _payload in client.requests] == [
        "create_partitions",
        "delete_topics",
    ]
    assert client.requests[0][1][0].new_total_count == 6  # type: ignore[index]


def test_cluster_binding_maps_to_broker_resource() -> None:
    binding = AccessBinding(
        ResourceType.CLUSTER, CLUSTER_RESOURCE_NAME, "User:p", AclOperation.IDEMPOTENT_WRITE
    )

    kafka_binding = to_kafka_binding(binding)

    assert kafka_binding.restype == KafkaResourceType.BROKER
    assert kafka_binding.operation == KafkaAclOperation.IDEMPOTENT_WRITE
    assert from_kafka_binding(kafka_binding) == binding


def test_list_acls_converts_bindings() -> None:
    prefixed = AclBinding(
        KafkaResourceType.GROUP,
        "app",
        ResourcePatternType.PREFIXED,
        "User:s",
        "*",
        KafkaAclOperation.READ,
        AclPermissionType.ALLOW,
    )
    admin = _admin(FakeAdminClient(acls=[to_kafka_binding(make_binding()), prefixed]))

    assert admin.list_acls() == {
        make_binding(),
        AccessBinding(
            ResourceType.GROUP,
            "app",
            "User:s",
            AclOperation.READ,
            pattern_type=PatternType.PREFIXED,
        ),
    }


def test_create_and_delete_acls() -> None:
    client = FakeAdminClient()
    admin = _admin(client)

    admin.create_acls([make_binding()])
    admin.delete_acls([make_binding()])
    admin.create_acls([])

    assert [request for request, _payload in client.requests] == ["create_acls", "delete_acls"]


def test_close_is_idempotent_and_final() -> None:
    admin = _admin(FakeAdminClient())

    admin.close()
    admin.close()

    with pytest.raises(ClusterAdminError, match="already closed"):
        admin.list_topics()
