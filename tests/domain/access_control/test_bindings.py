from __future__ import annotations

from topologist.domain.access_control import CONNECT_INTERNAL_TOPICS, AclBindingsBuilder
from topologist.domain.model import (
    CLUSTER_RESOURCE_NAME,
    AccessBinding,
    AclOperation,
    Connector,
    Consumer,
    KafkaStreams,
    PatternType,
    Producer,
    Project,
    ResourceType,
    Topic,
    Topology,
)


def _project(**users: object) -> Project:
    project = Project(name="shop", topics=[Topic(name="orders")], **users)  # type: ignore[arg-type]
    Topology(context="ctx", projects=[project])
    return project


def test_consumer_reads_project_topics_and_group() -> None:
    bindings = AclBindingsBuilder().for_project(
        _project(consumers=[Consumer(principal="User:c", group="billing")])
    )

    assert bindings == {
        AccessBinding(ResourceType.TOPIC, "ctx.shop.orders", "User:c", AclOperation.READ),
        AccessBinding(ResourceType.TOPIC, "ctx.shop.orders", "User:c", AclOperation.DESCRIBE),
        AccessBinding(ResourceType.GROUP, "billing", "User:c", AclOperation.READ),
    }


def test_transactional_idempotent_producer() -> None:
    producer = Producer(principal="User:p", transaction_id="tx", idempotence=True)

    bindings = AclBindingsBuilder().for_project(_project(producers=[producer]))

    assert AccessBinding(
        ResourceType.TRANSACTIONAL_ID, "tx", "User:p", AclOperation.WRITE
    ) in bindings
    assert AccessBinding(
        ResourceType.CLUSTER, CLUSTER_RESOURCE_NAME, "User:p", AclOperation.IDEMPOTENT_WRITE
    ) in bindings
    assert len(bindings) == 5


def test_streams_default_application_id_is_project_prefix() -> None:
    streams = KafkaStreams(principal="User:s", read_topics=("in",), write_topics=("out",))

    bindings = AclBindingsBuilder().for_project(_project(streams=[streams]))

    assert bindings == {
        AccessBinding(ResourceType.TOPIC, "in", "User:s", AclOperation.READ),
        AccessBinding(ResourceType.TOPIC, "out", "User:s", AclOperation.WRITE),
        AccessBinding(
            ResourceType.TOPIC,
            "ctx.shop",
            "User:s",
            AclOperation.ALL,
            pattern_type=PatternType.PREFIXED,
        ),
        AccessBinding(
            ResourceType.GROUP,
            "ctx.shop",
            "User:s",
            AclOperation.READ,
            pattern_type=PatternType.PREFIXED,
        ),
    }


def test_connector_gets_internal_topics() -> None:
    connector = Connector(principal="User:k", read_topics=("source",))

    bindings = AclBindingsBuilder().for_project(_project(connectors=[connector]))

    internal = {
        binding.resource_name
        for binding in bindings
        if binding.resource_type is ResourceType.TOPIC and binding.operation is AclOperation.WRITE
    }
    assert internal == set(CONNECT_INTERNAL_TOPICS)
    assert AccessBinding(ResourceType.GROUP, "connect-cluster", "User:k", AclOperation.READ) in (
        bindings
    )


def test_build_unions_all_projects() -> None:
    topology = Topology(
        context="ctx",
        projects=[
            Project(name="a", consumers=[Consumer(principal="User:x")]),
            Project(name="b", consumers=[Consumer(principal="User:x")]),
        ],
    )

    bindings = AclBindingsBuilder().build(topology)

    assert bindings == {AccessBinding(ResourceType.GROUP, "*", "User:x", AclOperation.READ)}
