"""Derive the desired access bindings from a topology."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from topologist.domain.model import (
    CLUSTER_RESOURCE_NAME,
    AccessBinding,
    AclOperation,
    PatternType,
    ResourceType,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from topologist.domain.model import (
        Connector,
        Consumer,
        KafkaStreams,
        Producer,
        Project,
        Topology,
    )

CONNECT_INTERNAL_TOPICS: Final[tuple[str, ...]] = (
    "connect-configs",
    "connect-offsets",
    "connect-status",
)


def _topic_bindings(
    principal: str,
    topics: Iterable[str],
    operations: Iterable[AclOperation],
) -> Iterator[AccessBinding]:
    ops = tuple(operations)
    for topic in topics:
        for operation in ops:
            yield AccessBinding(
                resource_type=ResourceType.TOPIC,
                resource_name=topic,
                principal=principal,
                operation=operation,
            )


class AclBindingsBuilder:
    """Translate projects and their users into the bindings they need."""

    def build(self, topology: Topology) -> set[AccessBinding]:
        bindings: set[AccessBinding] = set()
        for project in topology.projects:
            bindings.update(self.for_project(project))
        return bindings

    def for_project(self, project: Project) -> set[AccessBinding]:
        topics = [name for name, _topic in project.qualified_topics()]
        bindings: set[AccessBinding] = set()
        for consumer in project.consumers:
            bindings.update(self.for_consumer(consumer, topics))
        for producer in project.producers:
            bindings.update(self.for_producer(producer, topics))
        for streams in project.streams:
            bindings.update(self.for_streams(streams, project.prefix))
        for connector in project.connectors:
            bindings.update(self.for_connector(connector))
        return bindings

    def for_consumer(self, consumer: Consumer, topics: Iterable[str]) -> Iterator[AccessBinding]:
        yield from _topic_bindings(
            consumer.principal, topics, (AclOperation.READ, AclOperation.DESCRIBE)
        )
        yield AccessBinding(
            resource_type=ResourceType.GROUP,
            resource_name=consumer.group,
            principal=consumer.principal,
            operation=AclOperation.READ,
        )

    def for_producer(self, producer: Producer, topics: Iterable[str]) -> Iterator[AccessBinding]:
        yield from _topic_bindings(
            producer.principal, topics, (AclOperation.WRITE, AclOperation.DESCRIBE)
        )
        if producer.transaction_id:
            for operation in (AclOperation.WRITE, AclOperation.DESCRIBE):
                yield AccessBinding(
                    resource_type=ResourceType.TRANSACTIONAL_ID,
                    resource_name=producer.transaction_id,
                    principal=producer.principal,
                    operation=operation,
                )
        if producer.idempotence:
            yield AccessBinding(
                resource_type=ResourceType.CLUSTER,
                resource_name=CLUSTER_RESOURCE_NAME,
                principal=producer.principal,
                operation=AclOperation.IDEMPOTENT_WRITE,
            )

    def for_streams(self, streams: KafkaStreams, prefix: str) -> Iterator[AccessBinding]:
        application_id = streams.application_id or prefix
        yield from _topic_bindings(streams.principal, streams.read_topics, (AclOperation.READ,))
        yield from _topic_bindings(streams.principal, streams.write_topics, (AclOperation.WRITE,))
        # internal changelog and repartition topics are named after the application id
        yield AccessBinding(
            resource_type=ResourceType.TOPIC,
            resource_name=application_id,
            principal=streams.principal,
            operation=AclOperation.ALL,
            pattern_type=PatternType.PREFIXED,
        )
        yield AccessBinding(
            resource_type=ResourceType.GROUP,
            resource_name=application_id,
            principal=streams.principal,
            operation=AclOperation.READ,
            pattern_type=PatternType.PREFIXED,
        )

    def for_connector(self, connector: Connector) -> Iterator[AccessBinding]:
        yield from _topic_bindings(
            connector.principal,
            CONNECT_INTERNAL_TOPICS,
            (AclOperation.READ, AclOperation.WRITE),
        )
        yield from _topic_bindings(connector.principal, connector.read_topics, (AclOperation.READ,))
        yield from _topic_bindings(
            connector.principal, connector.write_topics, (AclOperation.WRITE,)
        )
        yield AccessBinding(
            resource_type=ResourceType.GROUP,
            resource_name=connector.group,
            principal=connector.principal,
            operation=AclOperation.READ,
        )
