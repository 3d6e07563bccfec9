"""Translate validated descriptor documents into domain topologies."""

from __future__ import annotations

from typing import TYPE_CHECKING

from topologist.domain.model import (
    Connector,
    Consumer,
    KafkaStreams,
    Producer,
    Project,
    Topic,
    TopicSchemas,
    Topology,
)

if TYPE_CHECKING:
    from pathlib import Path

    from .schema import ProjectModel, SchemasModel, TopicModel, TopologyDocument


def _resolve(base_dir: Path, location: str | None) -> Path | None:
    if location is None:
        return None
    return (base_dir / location).resolve()


def _translate_schemas(schemas: SchemasModel | None, base_dir: Path) -> TopicSchemas | None:
    if schemas is None:
        return None
    return TopicSchemas(
        key_schema_file=_resolve(base_dir, schemas.key_schema_file),
        value_schema_file=_resolve(base_dir, schemas.value_schema_file),
        schema_type=schemas.schema_type,
    )


def _translate_topic(topic: TopicModel, base_dir: Path) -> Topic:
    return Topic(
        name=topic.name,
        data_type=topic.data_type,
        partitions=topic.partitions,
        replication_factor=topic.replication_factor,
        config=dict(topic.config),
        schemas=_translate_schemas(topic.schemas, base_dir),
    )


def _translate_project(project: ProjectModel, base_dir: Path) -> Project:
    return Project(
        name=project.name,
        consumers=[Consumer(principal=c.principal, group=c.group) for c in project.consumers],
        producers=[
            Producer(
                principal=p.principal,
                transaction_id=p.transaction_id,
                idempotence=p.idempotence,
            )
            for p in project.producers
        ],
        streams=[
            KafkaStreams(
                principal=s.principal,
                application_id=s.application_id,
                read_topics=tuple(s.topics.read),
                write_topics=tuple(s.topics.write),
            )
            for s in project.streams
        ],
        connectors=[
            Connector(
                principal=c.principal,
                group=c.group,
                read_topics=tuple(c.topics.read),
                write_topics=tuple(c.topics.write),
            )
            for c in project.connectors
        ],
        topics=[_translate_topic(topic, base_dir) for topic in project.topics],
    )


def to_topology(document: TopologyDocument, *, base_dir: Path) -> Topology:
    """Build a :class:`Topology`; relative schema paths resolve against ``base_dir``."""

    topology = Topology(context=document.context, prefix_parts=document.prefix_parts)
    for project in document.projects:
        topology.add_project(_translate_project(project, base_dir))
    return topology
